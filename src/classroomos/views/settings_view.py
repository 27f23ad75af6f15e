"""
Settings hub and its sub-pages.
"""

import flet as ft

from ..sections.ui_utils import section_header
from ..sections.users_section import create_users_section

# (slug, title, description, icon)
SETTINGS_ITEMS = [
    ("users-roles", "Users & Roles", "Manage staff accounts and their roles", ft.Icons.MANAGE_ACCOUNTS),
    ("permissions", "Permissions", "Review what each role may do", ft.Icons.LOCK_PERSON),
    ("system", "System Settings", "Console preferences and defaults", ft.Icons.TUNE),
    ("organization", "Organization", "Organization profile and branding", ft.Icons.CORPORATE_FARE),
]

# Sub-pages that have a screen
AVAILABLE_PAGES = {"users-roles"}


def create_settings_view(page: ft.Page, show_snackbar, user, navigate, sub_page=None):
    """Create the settings hub, or one of its sub-pages."""
    if sub_page == "users-roles":
        return ft.Container(
            content=ft.Column([
                ft.Row([
                    ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="Back to settings",
                                  on_click=lambda e: navigate("/settings")),
                    ft.Text("Settings", size=14, color=ft.Colors.GREY_600),
                ]),
                create_users_section(page, show_snackbar, user),
            ], spacing=0, expand=True),
            expand=True,
        )

    def open_item(slug, title):
        if slug in AVAILABLE_PAGES:
            navigate(f"/settings/{slug}")
        else:
            show_snackbar(f"{title} is not available yet")

    cards = []
    for slug, title, description, icon in SETTINGS_ITEMS:
        cards.append(
            ft.Container(
                content=ft.Card(
                    content=ft.Container(
                        content=ft.Column([
                            ft.Icon(icon, size=32, color=ft.Colors.BLUE_600),
                            ft.Text(title, size=16, weight=ft.FontWeight.BOLD),
                            ft.Text(description, size=12, color=ft.Colors.GREY_600),
                        ], spacing=6),
                        padding=20,
                        on_click=lambda e, s=slug, t=title: open_item(s, t),
                    ),
                    elevation=2,
                ),
                width=260,
            )
        )

    return ft.Container(
        content=ft.Column([
            section_header("Settings", "Console administration"),
            ft.Divider(),
            ft.Row(cards, wrap=True, spacing=15, run_spacing=15),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
