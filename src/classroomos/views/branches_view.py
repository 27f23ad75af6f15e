"""
Branch management view.

Lists every branch with its rooms and opens a dialog for creating or editing
a branch. Managers only see the edit action on their own branch.
"""

import flet as ft

from ..auth import can, can_edit_branch, require
from ..database import add_branch, delete_branch, get_all_branches, update_branch
from ..errors import PermissionDenied
from ..models import ROOM_TYPES, STATUSES, Room
from ..sections.ui_utils import (
    apply_errors, confirm_dialog, empty_state, section_header, status_chip,
)
from ..validation import validate_branch_form


def create_branches_view(page: ft.Page, show_snackbar, user):
    """Create the branches view."""

    search_field = ft.TextField(
        label="Search branches",
        hint_text="Search by name, code or location",
        prefix_icon=ft.Icons.SEARCH,
        expand=True,
        on_change=lambda e: update_branch_list(),
    )

    branch_list_view = ft.ListView(spacing=10, padding=20, expand=True)

    def update_branch_list():
        branches = get_all_branches(search_field.value or "")
        branch_list_view.controls.clear()

        if not branches:
            branch_list_view.controls.append(
                empty_state(ft.Icons.STORE, "No branches found", "Add your first branch to get started")
            )
        for branch in branches:
            room_summary = ", ".join(f"{r.room_name} ({r.capacity})" for r in branch.rooms) or "No rooms"
            actions = []
            if can_edit_branch(user, branch):
                actions.append(ft.IconButton(
                    icon=ft.Icons.EDIT,
                    icon_color=ft.Colors.BLUE_700,
                    tooltip="Edit",
                    on_click=lambda e, b=branch: open_branch_dialog(b),
                ))
            if can(user, "branches", "delete", branch.id):
                actions.append(ft.IconButton(
                    icon=ft.Icons.DELETE,
                    icon_color=ft.Colors.RED_700,
                    tooltip="Delete",
                    on_click=lambda e, b=branch: confirm_delete_branch(b),
                ))

            branch_list_view.controls.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row([
                            ft.Container(
                                content=ft.CircleAvatar(
                                    content=ft.Text(branch.internal_name[:2].upper(), size=16,
                                                    weight=ft.FontWeight.BOLD),
                                    bgcolor=ft.Colors.BLUE_200,
                                    color=ft.Colors.BLUE_900,
                                ),
                                width=50,
                            ),
                            ft.Column([
                                ft.Row([
                                    ft.Text(branch.name, weight=ft.FontWeight.BOLD, size=16),
                                    ft.Text(branch.internal_name, size=12, color=ft.Colors.GREY_600),
                                    status_chip(branch.status),
                                ], spacing=8),
                                ft.Row([
                                    ft.Icon(ft.Icons.PLACE, size=14, color=ft.Colors.GREY_600),
                                    ft.Text(branch.location, size=12, color=ft.Colors.GREY_600),
                                ], spacing=5),
                                ft.Row([
                                    ft.Icon(ft.Icons.MEETING_ROOM, size=14, color=ft.Colors.GREY_600),
                                    ft.Text(room_summary, size=12, color=ft.Colors.GREY_600),
                                ], spacing=5),
                            ], spacing=5, expand=True),
                            ft.Row(actions, spacing=0),
                        ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                        padding=15,
                    ),
                )
            )
        page.update()

    def open_branch_dialog(branch=None):
        """Create or edit a branch with a dynamic list of rooms."""
        name_field = ft.TextField(label="Branch Name", value=branch.name if branch else "", autofocus=True)
        code_field = ft.TextField(label="Internal Code", value=branch.internal_name if branch else "",
                                  hint_text="e.g., U1")
        location_field = ft.TextField(label="Location", value=branch.location if branch else "",
                                      multiline=True)
        map_field = ft.TextField(label="Google Map Link (optional)",
                                 value=branch.google_map_link if branch else "")
        manager_field = ft.TextField(label="Branch Manager User ID",
                                     value=branch.branch_manager_user_id if branch else "")
        status_field = ft.Dropdown(
            label="Status",
            value=branch.status if branch else "Active",
            options=[ft.dropdown.Option(s) for s in STATUSES],
        )

        room_rows = []
        rooms_column = ft.Column(spacing=8)

        def render_rooms():
            rooms_column.controls = []
            for idx, (room_name, capacity, room_type) in enumerate(room_rows):
                rooms_column.controls.append(ft.Row([
                    room_name, capacity, room_type,
                    ft.IconButton(
                        icon=ft.Icons.REMOVE_CIRCLE_OUTLINE,
                        icon_color=ft.Colors.RED_400,
                        tooltip="Remove room",
                        disabled=len(room_rows) == 1,
                        on_click=lambda e, i=idx: remove_room(i),
                    ),
                ]))

        def add_room_row(room=None):
            room_rows.append((
                ft.TextField(label="Room Name", value=room.room_name if room else "", expand=True),
                ft.TextField(label="Capacity", value=str(room.capacity) if room else "",
                             width=100, keyboard_type=ft.KeyboardType.NUMBER),
                ft.Dropdown(label="Type", value=room.room_type if room else "Regular", width=140,
                            options=[ft.dropdown.Option(t) for t in ROOM_TYPES]),
            ))
            render_rooms()

        def remove_room(idx):
            if len(room_rows) > 1:
                room_rows.pop(idx)
                render_rooms()
                page.update()

        for room in (branch.rooms if branch and branch.rooms else [None]):
            add_room_row(room)

        def collect_form():
            return {
                "id": branch.id if branch else None,
                "name": name_field.value or "",
                "internal_name": code_field.value or "",
                "location": location_field.value or "",
                "rooms": [
                    {"room_name": n.value or "", "capacity": c.value or "", "room_type": t.value or "Regular"}
                    for n, c, t in room_rows
                ],
            }

        def save(e):
            form = collect_form()
            errors = validate_branch_form(form)
            fields = {"name": name_field, "internal_name": code_field, "location": location_field}
            for idx, (n, c, _) in enumerate(room_rows):
                fields[f"rooms.{idx}.room_name"] = n
                fields[f"rooms.{idx}.capacity"] = c
            apply_errors(fields, errors)
            if errors:
                page.update()
                return

            rooms = [Room(r["room_name"].strip(), int(r["capacity"]), r["room_type"]) for r in form["rooms"]]
            try:
                if branch:
                    require(user, "branches", "update", branch.id)
                    ok = update_branch(branch.id, form["name"], form["internal_name"], form["location"],
                                       rooms, manager_field.value or "", status_field.value or "Active",
                                       map_field.value or "")
                else:
                    require(user, "branches", "create")
                    ok = add_branch(form["name"], form["internal_name"], form["location"], rooms,
                                    manager_field.value or "", status_field.value or "Active",
                                    map_field.value or "") is not None
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return

            if ok:
                show_snackbar("Branch updated successfully!" if branch else "Branch added successfully!")
                dlg.open = False
                update_branch_list()
            else:
                show_snackbar("Error saving branch! Internal code may already exist.", True)
            page.update()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text("Edit Branch" if branch else "New Branch"),
            content=ft.Container(
                content=ft.Column([
                    name_field, code_field, location_field, map_field,
                    ft.Row([manager_field, status_field]),
                    ft.Divider(),
                    ft.Row([
                        ft.Text("Rooms", size=14, weight=ft.FontWeight.W_500, expand=True),
                        ft.TextButton("Add room", icon=ft.Icons.ADD,
                                      on_click=lambda e: (add_room_row(), page.update())),
                    ]),
                    rooms_column,
                ], spacing=10, scroll=ft.ScrollMode.AUTO, tight=True),
                width=560,
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Save Branch", icon=ft.Icons.SAVE, on_click=save),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    def confirm_delete_branch(branch):
        def delete_confirmed():
            try:
                require(user, "branches", "delete", branch.id)
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if delete_branch(branch.id):
                show_snackbar("Branch deleted successfully!")
                update_branch_list()
            else:
                show_snackbar("Cannot delete: batches still belong to this branch!", True)

        confirm_dialog(
            page, "Confirm Delete",
            f"Are you sure you want to delete branch '{branch.name}'?\nThis action cannot be undone.",
            delete_confirmed,
        )

    update_branch_list()

    header_actions = []
    if can(user, "branches", "create"):
        header_actions.append(ft.ElevatedButton("New Branch", icon=ft.Icons.ADD,
                                                on_click=lambda e: open_branch_dialog()))

    return ft.Container(
        content=ft.Column([
            section_header("Branches", "Physical centers and their rooms", actions=header_actions),
            ft.Divider(),
            search_field,
            ft.Container(content=branch_list_view, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
