"""
Batch management view: searchable list plus create/edit dialog.
"""

import flet as ft

from ..auth import can, require
from ..database import add_batch, delete_batch, get_all_batches, get_all_branches, update_batch
from ..errors import PermissionDenied
from ..models import PROGRAMS, STATUSES, get_days_label
from ..scheduling import format_date, format_time_range
from ..sections.ui_components import create_date_field, create_day_selector, create_time_field
from ..sections.ui_utils import (
    apply_errors, confirm_dialog, empty_state, section_header, status_chip,
)
from ..validation import validate_batch_form


def create_batches_view(page: ft.Page, show_snackbar, user, navigate):
    """Create the batches view. ``navigate`` opens the batch planner."""

    search_field = ft.TextField(
        label="Search batches",
        hint_text="Search by name, code, program or branch",
        prefix_icon=ft.Icons.SEARCH,
        expand=True,
        on_change=lambda e: update_batch_list(),
    )

    batch_list_view = ft.ListView(spacing=10, padding=20, expand=True)

    def visible_batches():
        batches = get_all_batches(search_field.value or "")
        return [b for b in batches if can(user, "batches", "read", b.branch_id)]

    def update_batch_list():
        batches = visible_batches()
        batch_list_view.controls.clear()

        if not batches:
            batch_list_view.controls.append(
                empty_state(ft.Icons.INBOX, "No batches found", "Create a batch to start planning")
            )
        for batch in batches:
            actions = [
                ft.IconButton(
                    icon=ft.Icons.CALENDAR_MONTH,
                    icon_color=ft.Colors.TEAL_700,
                    tooltip="Open planner",
                    on_click=lambda e, b=batch: navigate(f"/batches/{b.id}"),
                ),
            ]
            if can(user, "batches", "update", batch.branch_id):
                actions.append(ft.IconButton(
                    icon=ft.Icons.EDIT,
                    icon_color=ft.Colors.BLUE_700,
                    tooltip="Edit",
                    on_click=lambda e, b=batch: open_batch_dialog(b),
                ))
            if can(user, "batches", "delete", batch.branch_id):
                actions.append(ft.IconButton(
                    icon=ft.Icons.DELETE,
                    icon_color=ft.Colors.RED_700,
                    tooltip="Delete",
                    on_click=lambda e, b=batch: confirm_delete_batch(b),
                ))

            batch_list_view.controls.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row([
                            ft.Container(
                                content=ft.CircleAvatar(
                                    content=ft.Text(batch.name[0].upper(), size=20, weight=ft.FontWeight.BOLD),
                                    bgcolor=ft.Colors.ORANGE_200,
                                    color=ft.Colors.ORANGE_900,
                                ),
                                width=50,
                            ),
                            ft.Column([
                                ft.Row([
                                    ft.Text(batch.name, weight=ft.FontWeight.BOLD, size=16),
                                    ft.Text(batch.internal_name, size=12, color=ft.Colors.GREY_600),
                                    status_chip(batch.status),
                                ], spacing=8),
                                ft.Text(f"{batch.program} · {batch.branch_name}", size=12,
                                        color=ft.Colors.GREY_700),
                                ft.Row([
                                    ft.Icon(ft.Icons.EVENT, size=14, color=ft.Colors.GREY_600),
                                    ft.Text(
                                        f"{format_date(batch.start_date)} - {format_date(batch.end_date)} · "
                                        f"{get_days_label(batch.days_mask)} · "
                                        f"{format_time_range(batch.start_time, batch.end_time)}",
                                        size=12, color=ft.Colors.GREY_600,
                                    ),
                                ], spacing=5),
                                ft.Row([
                                    ft.Icon(ft.Icons.PEOPLE, size=14, color=ft.Colors.GREY_600),
                                    ft.Text(f"{batch.enrolled} / {batch.capacity} enrolled", size=12,
                                            color=ft.Colors.GREY_600),
                                ], spacing=5),
                            ], spacing=5, expand=True),
                            ft.Row(actions, spacing=0),
                        ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                        padding=15,
                        on_click=lambda e, b=batch: navigate(f"/batches/{b.id}"),
                    ),
                )
            )
        page.update()

    def open_batch_dialog(batch=None):
        """Create or edit a batch."""
        branches = [b for b in get_all_branches()
                    if can(user, "batches", "update" if batch else "create", b.id)]

        name_field = ft.TextField(label="Batch Name", value=batch.name if batch else "", autofocus=True)
        code_field = ft.TextField(label="Internal Code", value=batch.internal_name if batch else "",
                                  hint_text="e.g., IELTS-M-1")
        branch_field = ft.Dropdown(
            label="Branch",
            value=batch.branch_id if batch else (branches[0].id if len(branches) == 1 else None),
            options=[ft.dropdown.Option(key=b.id, text=b.name) for b in branches],
        )
        program_field = ft.Dropdown(
            label="Program",
            value=batch.program if batch else None,
            options=[ft.dropdown.Option(p) for p in PROGRAMS],
        )
        start_date_field = create_date_field(page, "Start Date", batch.start_date if batch else "", expand=True)
        end_date_field = create_date_field(page, "End Date", batch.end_date if batch else "", expand=True)
        day_selector = create_day_selector(page)
        if batch:
            day_selector.set_days(batch.days)
        start_time_field = create_time_field("Start Time", batch.start_time if batch else "", expand=True)
        end_time_field = create_time_field("End Time", batch.end_time if batch else "", expand=True)
        capacity_field = ft.TextField(label="Capacity", value=str(batch.capacity) if batch else "",
                                      keyboard_type=ft.KeyboardType.NUMBER, expand=True)
        admission_start_field = create_date_field(
            page, "Admission Start", batch.admission_start_date if batch else "", expand=True)
        admission_end_field = create_date_field(
            page, "Admission End", batch.admission_end_date if batch else "", expand=True)
        status_field = ft.Dropdown(
            label="Status",
            value=batch.status if batch else "Active",
            options=[ft.dropdown.Option(s) for s in STATUSES],
            expand=True,
        )

        fields = {
            "name": name_field,
            "internal_name": code_field,
            "branch_id": branch_field,
            "program": program_field,
            "start_date": start_date_field,
            "end_date": end_date_field,
            "days": day_selector,
            "start_time": start_time_field,
            "end_time": end_time_field,
            "capacity": capacity_field,
            "admission_start_date": admission_start_field,
            "admission_end_date": admission_end_field,
        }

        def save(e):
            form = {key: (control.value or "") for key, control in fields.items() if key != "days"}
            form["days"] = day_selector.get_days()
            existing = get_all_batches()
            errors = validate_batch_form(form, existing, batch.id if batch else None)
            apply_errors(fields, errors)
            if errors:
                page.update()
                return

            args = (
                form["name"], form["internal_name"], form["branch_id"], form["program"],
                form["start_date"], form["end_date"], form["days"], form["start_time"],
                form["end_time"], int(form["capacity"]), form["admission_start_date"],
                form["admission_end_date"], status_field.value or "Active",
            )
            try:
                if batch:
                    require(user, "batches", "update", form["branch_id"])
                    ok = update_batch(batch.id, *args)
                else:
                    require(user, "batches", "create", form["branch_id"])
                    ok = add_batch(*args) is not None
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return

            if ok:
                show_snackbar("Batch updated successfully!" if batch else "Batch added successfully!")
                dlg.open = False
                update_batch_list()
            else:
                show_snackbar("Error saving batch! Internal code may already exist.", True)
            page.update()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text("Edit Batch" if batch else "New Batch"),
            content=ft.Container(
                content=ft.Column([
                    ft.Row([name_field, code_field]),
                    ft.Row([branch_field, program_field]),
                    ft.Row([start_date_field, end_date_field]),
                    day_selector,
                    ft.Row([start_time_field, end_time_field]),
                    ft.Row([capacity_field, status_field]),
                    ft.Row([admission_start_field, admission_end_field]),
                ], spacing=10, scroll=ft.ScrollMode.AUTO, tight=True),
                width=640,
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Save Batch", icon=ft.Icons.SAVE, on_click=save),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    def confirm_delete_batch(batch):
        def delete_confirmed():
            try:
                require(user, "batches", "delete", batch.branch_id)
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if delete_batch(batch.id):
                show_snackbar("Batch deleted successfully!")
                update_batch_list()
            else:
                show_snackbar(f"Cannot delete: {batch.enrolled} students are in this batch!", True)

        confirm_dialog(
            page, "Confirm Delete",
            f"Are you sure you want to delete batch '{batch.name}'?\nThis action cannot be undone.",
            delete_confirmed,
        )

    update_batch_list()

    header_actions = []
    if user and (user.role == "admin" or can(user, "batches", "create", user.branch_id)):
        header_actions.append(ft.ElevatedButton("New Batch", icon=ft.Icons.ADD,
                                                on_click=lambda e: open_batch_dialog()))

    return ft.Container(
        content=ft.Column([
            section_header("Batches", "Class cohorts, schedules and capacity",
                           color=ft.Colors.ORANGE_700, actions=header_actions),
            ft.Divider(),
            search_field,
            ft.Container(content=batch_list_view, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
