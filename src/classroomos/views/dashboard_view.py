"""
Dashboard view: statistics plus the next closures.
"""

from datetime import date

import flet as ft

from ..auth import can
from ..database import get_all_time_blocks
from ..scheduling import format_date
from ..sections.stats_section import get_stats_section
from ..time_blocks import GOVERNMENT_HOLIDAYS


def upcoming_closures(limit=5):
    """Next holidays and time blocks from today, soonest first."""
    today = date.today().isoformat()
    closures = [(h.date, h.name, "Government holiday") for h in GOVERNMENT_HOLIDAYS if h.date >= today]
    closures += [(b.date, b.name, b.block_type) for b in get_all_time_blocks() if b.date >= today]
    return sorted(closures)[:limit]


def create_dashboard_view(page: ft.Page, show_snackbar, user, navigate):
    """Create the dashboard view."""
    closures = upcoming_closures()
    closure_list = ft.Column([
        ft.ListTile(
            leading=ft.Icon(ft.Icons.EVENT_BUSY, color=ft.Colors.RED_400),
            title=ft.Text(name),
            subtitle=ft.Text(f"{format_date(day)} · {kind}"),
            dense=True,
        )
        for day, name, kind in closures
    ] or [ft.Text("No upcoming closures", size=12, color=ft.Colors.GREY_500)], spacing=0)

    shortcuts = ft.Row([
        ft.OutlinedButton("Batches", icon=ft.Icons.CLASS_, on_click=lambda e: navigate("/batches")),
        ft.OutlinedButton("Attendance", icon=ft.Icons.FACT_CHECK, on_click=lambda e: navigate("/attendance")),
        ft.OutlinedButton("Time blocks", icon=ft.Icons.EVENT_BUSY, on_click=lambda e: navigate("/holidays")),
    ], wrap=True)

    welcome = f"Welcome, {user.name}" if user else "Welcome"
    role_note = "Read-only overview" if can(user, "stockholderDashboard", "read") and user.role != "admin" else ""

    return ft.Container(
        content=ft.Column([
            get_stats_section(page),
            ft.Container(
                content=ft.Column([
                    ft.Text(welcome, size=18, weight=ft.FontWeight.W_500),
                    ft.Text(role_note, size=12, color=ft.Colors.GREY_600, visible=bool(role_note)),
                    shortcuts,
                    ft.Divider(),
                    ft.Text("Upcoming closures", size=14, weight=ft.FontWeight.W_500),
                    closure_list,
                ], spacing=10),
                padding=ft.padding.symmetric(horizontal=20),
            ),
        ], spacing=0, scroll=ft.ScrollMode.AUTO, expand=True),
        expand=True,
    )
