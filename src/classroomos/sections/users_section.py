"""
Users & Roles section of the settings hub.
"""

import flet as ft

from ..auth import can_manage_staff, require_staff_manager
from ..database import delete_staff_user, get_all_branches, get_all_staff_users
from ..errors import PermissionDenied
from ..models import STAFF_ROLES, STATUSES
from ..staff import filter_users, role_stats, save_user
from .ui_utils import (
    ResponsiveCard, ResponsiveRow, apply_errors, confirm_dialog, empty_state, status_chip,
)

ROLE_ICONS = {
    "Admin": (ft.Icons.ADMIN_PANEL_SETTINGS, ft.Colors.RED_600),
    "FDO": (ft.Icons.SUPPORT_AGENT, ft.Colors.BLUE_600),
    "ADO": (ft.Icons.BADGE, ft.Colors.GREEN_600),
    "Branch Manager": (ft.Icons.STORE, ft.Colors.PURPLE_600),
}


def create_users_section(page: ft.Page, show_snackbar, current_user=None):
    """Create the staff directory with role statistics, search and a user dialog.

    Only admins see the add, edit and delete actions.
    """

    # State variables
    role_filter = "All"
    manage = can_manage_staff(current_user)

    search_field = ft.TextField(
        label="Search users",
        hint_text="Search by name or email",
        prefix_icon=ft.Icons.SEARCH,
        expand=True,
        on_change=lambda e: update_user_list(),
    )

    def on_role_filter(e):
        nonlocal role_filter
        role_filter = e.control.value or "All"
        update_user_list()

    role_dropdown = ft.Dropdown(
        label="Role",
        value="All",
        width=200,
        options=[ft.dropdown.Option("All")] + [ft.dropdown.Option(r) for r in STAFF_ROLES],
        on_change=on_role_filter,
    )

    stats_row = ResponsiveRow([], spacing=15, wrap=True)
    user_list_view = ft.ListView(spacing=10, padding=20, expand=True)

    def update_stats(users):
        stats = role_stats(users)
        stats_row.controls.clear()
        for role in STAFF_ROLES:
            icon, color = ROLE_ICONS[role]
            stats_row.controls.append(
                ft.Container(
                    content=ResponsiveCard(ft.Column([
                        ft.Icon(icon, size=28, color=color),
                        ft.Text(role, size=12, weight=ft.FontWeight.BOLD),
                        ft.Text(str(stats[role]), size=22, weight=ft.FontWeight.BOLD, color=color),
                    ], spacing=4, horizontal_alignment=ft.CrossAxisAlignment.CENTER)),
                    width=170,
                )
            )

    def update_user_list():
        """Update the user list display."""
        users = get_all_staff_users()
        update_stats(users)
        visible = filter_users(users, search_field.value or "", role_filter)

        user_list_view.controls.clear()
        if not visible:
            user_list_view.controls.append(empty_state(ft.Icons.INBOX, "No users found"))
        else:
            for user in visible:
                icon, color = ROLE_ICONS.get(user.role, (ft.Icons.PERSON, ft.Colors.GREY_600))
                details = [user.email, user.role]
                if user.branch:
                    details.append(user.branch)
                user_list_view.controls.append(
                    ft.Card(
                        content=ft.Container(
                            content=ft.Row([
                                ft.Container(
                                    content=ft.CircleAvatar(
                                        content=ft.Text(user.name[0].upper(), size=20, weight=ft.FontWeight.BOLD),
                                        bgcolor=ft.Colors.BLUE_200,
                                        color=ft.Colors.BLUE_900,
                                    ),
                                    width=50,
                                ),
                                ft.Column([
                                    ft.Row([
                                        ft.Text(user.name, weight=ft.FontWeight.BOLD, size=16),
                                        status_chip(user.status),
                                    ], spacing=8),
                                    ft.Row([
                                        ft.Icon(icon, size=14, color=color),
                                        ft.Text(" · ".join(details), size=12, color=ft.Colors.GREY_600),
                                    ], spacing=5),
                                    ft.Text(f"Created {user.created_at}", size=11, color=ft.Colors.GREY_500),
                                ], spacing=5, expand=True),
                                ft.Row([
                                    ft.IconButton(
                                        icon=ft.Icons.EDIT,
                                        icon_color=ft.Colors.BLUE_700,
                                        tooltip="Edit",
                                        on_click=lambda e, u=user: open_user_dialog(u),
                                    ),
                                    ft.IconButton(
                                        icon=ft.Icons.DELETE,
                                        icon_color=ft.Colors.RED_700,
                                        tooltip="Delete",
                                        on_click=lambda e, u=user: confirm_delete_user(u),
                                    ),
                                ], spacing=0, visible=manage),
                            ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                            padding=15,
                        ),
                    )
                )
        page.update()

    def open_user_dialog(user=None):
        """Create or edit a staff user."""
        branch_names = [b.name for b in get_all_branches()]
        name_field = ft.TextField(label="Name", value=user.name if user else "", autofocus=True)
        email_field = ft.TextField(label="Email", value=user.email if user else "",
                                   keyboard_type=ft.KeyboardType.EMAIL)
        role_field = ft.Dropdown(
            label="Role",
            value=user.role if user else None,
            options=[ft.dropdown.Option(r) for r in STAFF_ROLES],
        )
        branch_field = ft.Dropdown(
            label="Branch",
            value=user.branch if user else None,
            options=[ft.dropdown.Option(n) for n in branch_names],
            visible=bool(user and user.role == "Branch Manager"),
        )
        status_field = ft.Dropdown(
            label="Status",
            value=user.status if user else "Active",
            options=[ft.dropdown.Option(s) for s in STATUSES],
        )

        def on_role_change(e):
            branch_field.visible = role_field.value == "Branch Manager"
            page.update()

        role_field.on_change = on_role_change
        fields = {"name": name_field, "email": email_field, "role": role_field}

        def save(e):
            try:
                require_staff_manager(current_user)
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            form = {
                "name": name_field.value or "",
                "email": email_field.value or "",
                "role": role_field.value or "",
                "branch": branch_field.value or "",
                "status": status_field.value or "Active",
            }
            errors, saved = save_user(form, user.id if user else None)
            apply_errors(fields, errors)
            if errors:
                page.update()
                return
            if saved:
                show_snackbar("User updated successfully!" if user else "User added successfully!")
                dlg.open = False
                update_user_list()
            else:
                show_snackbar("Error saving user!", True)
            page.update()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text("Edit User" if user else "Add User"),
            content=ft.Container(
                content=ft.Column([name_field, email_field, role_field, branch_field, status_field],
                                  spacing=10, tight=True),
                width=360,
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Save", icon=ft.Icons.SAVE, on_click=save),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    def confirm_delete_user(user):
        def delete_confirmed():
            try:
                require_staff_manager(current_user)
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if delete_staff_user(user.id):
                show_snackbar("User deleted successfully!")
                update_user_list()
            else:
                show_snackbar("Error deleting user!", True)

        confirm_dialog(
            page, "Confirm Delete",
            f"Are you sure you want to delete user '{user.name}'?\nThis action cannot be undone.",
            delete_confirmed,
        )

    # Initialize
    update_user_list()

    return ft.Container(
        content=ft.Column([
            ft.Row([
                ft.Column([
                    ft.Text("Users & Roles", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.BLUE_700),
                    ft.Text("Manage staff accounts and their roles", size=12, color=ft.Colors.GREY_600),
                ], spacing=2, expand=True),
                ft.ElevatedButton("Add User", icon=ft.Icons.PERSON_ADD,
                                  on_click=lambda e: open_user_dialog(), visible=manage),
            ]),
            ft.Divider(),
            stats_row,
            ft.Row([search_field, role_dropdown]),
            ft.Container(content=user_list_view, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
