"""
Holidays and time blocks view.
"""

import flet as ft

from ..auth import can, require
from ..database import add_time_block, delete_time_block, get_all_branches, get_all_time_blocks
from ..errors import PermissionDenied
from ..models import TIME_BLOCK_TYPES
from ..scheduling import format_date, format_time_range
from ..sections.ui_components import create_date_field, create_time_field
from ..sections.ui_utils import apply_errors, confirm_dialog, empty_state, section_header
from ..time_blocks import GOVERNMENT_HOLIDAYS
from ..validation import validate_time_block_form


def create_time_blocks_view(page: ft.Page, show_snackbar, user):
    """Create the holidays / time blocks view."""

    branch_names = {b.id: b.name for b in get_all_branches()}
    block_list_view = ft.ListView(spacing=8, padding=10, expand=True)

    holiday_list = ft.Column([
        ft.ListTile(
            leading=ft.Icon(ft.Icons.FLAG, color=ft.Colors.GREEN_700),
            title=ft.Text(h.name),
            subtitle=ft.Text(format_date(h.date)),
            dense=True,
        )
        for h in GOVERNMENT_HOLIDAYS
    ], spacing=0)

    def update_block_list():
        blocks = get_all_time_blocks()
        block_list_view.controls.clear()
        if not blocks:
            block_list_view.controls.append(
                empty_state(ft.Icons.EVENT_AVAILABLE, "No custom time blocks", "All branches follow the regular schedule")
            )
        for block in blocks:
            when = "Full day" if block.block_type == "Full Day" else format_time_range(block.start_time, block.end_time)
            scope = "All branches" if block.all_branches else branch_names.get(block.branch_id, block.branch_id or "-")
            block_list_view.controls.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row([
                            ft.Icon(ft.Icons.EVENT_BUSY, color=ft.Colors.RED_400),
                            ft.Column([
                                ft.Text(block.name, weight=ft.FontWeight.BOLD),
                                ft.Text(f"{format_date(block.date)} · {when} · {scope}", size=12,
                                        color=ft.Colors.GREY_600),
                                ft.Text(block.reason, size=12, color=ft.Colors.GREY_500, visible=bool(block.reason)),
                            ], spacing=3, expand=True),
                            ft.IconButton(
                                icon=ft.Icons.DELETE,
                                icon_color=ft.Colors.RED_700,
                                tooltip="Remove",
                                visible=can(user, "holidays", "delete"),
                                on_click=lambda e, b=block: confirm_remove(b),
                            ),
                        ]),
                        padding=12,
                    ),
                )
            )
        page.update()

    def open_block_dialog(e):
        name_field = ft.TextField(label="Name", autofocus=True)
        date_field = create_date_field(page, "Date")
        type_field = ft.Dropdown(
            label="Type",
            value="Full Day",
            options=[ft.dropdown.Option(t) for t in TIME_BLOCK_TYPES],
        )
        start_field = create_time_field("Start Time", visible=False, expand=True)
        end_field = create_time_field("End Time", visible=False, expand=True)
        all_branches_field = ft.Switch(label="All branches", value=True)
        branch_field = ft.Dropdown(
            label="Branch",
            options=[ft.dropdown.Option(key=k, text=v) for k, v in branch_names.items()],
            visible=False,
        )
        reason_field = ft.TextField(label="Reason (optional)", multiline=True)

        def on_type_change(ev):
            is_range = type_field.value == "Time Range"
            start_field.visible = is_range
            end_field.visible = is_range
            page.update()

        def on_scope_change(ev):
            branch_field.visible = not all_branches_field.value
            page.update()

        type_field.on_change = on_type_change
        all_branches_field.on_change = on_scope_change

        def save(ev):
            form = {
                "name": name_field.value or "",
                "date": date_field.value or "",
                "block_type": type_field.value or "Full Day",
                "start_time": start_field.value or "",
                "end_time": end_field.value or "",
                "all_branches": bool(all_branches_field.value),
                "branch_id": branch_field.value or "",
                "reason": reason_field.value or "",
            }
            errors = validate_time_block_form(form)
            apply_errors({"name": name_field, "date": date_field, "start_time": start_field,
                          "end_time": end_field, "branch_id": branch_field}, errors)
            if errors:
                page.update()
                return
            try:
                require(user, "holidays", "create")
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if add_time_block(form["name"], form["date"], form["block_type"], form["start_time"] or None,
                              form["end_time"] or None, form["all_branches"], form["branch_id"] or None,
                              form["reason"]):
                show_snackbar("Time block added!")
                dlg.open = False
                update_block_list()
            else:
                show_snackbar("Error adding time block!", True)
            page.update()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text("New Time Block"),
            content=ft.Container(
                content=ft.Column([
                    name_field, date_field, type_field,
                    ft.Row([start_field, end_field]),
                    all_branches_field, branch_field, reason_field,
                ], spacing=10, tight=True),
                width=420,
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda ev: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Add", icon=ft.Icons.ADD, on_click=save),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    def confirm_remove(block):
        def remove():
            try:
                require(user, "holidays", "delete")
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if delete_time_block(block.id):
                show_snackbar("Time block removed!")
                update_block_list()

        confirm_dialog(page, "Remove Time Block", f"Remove '{block.name}' on {format_date(block.date)}?",
                       remove, confirm_label="Remove")

    update_block_list()

    header_actions = []
    if can(user, "holidays", "create"):
        header_actions.append(ft.ElevatedButton("New Time Block", icon=ft.Icons.ADD, on_click=open_block_dialog))

    return ft.Container(
        content=ft.Column([
            section_header("Time blocks", "Government holidays and custom closures",
                           color=ft.Colors.RED_700, actions=header_actions),
            ft.Divider(),
            ft.Row([
                ft.Container(
                    content=ft.Column([
                        ft.Text("Government holidays", size=14, weight=ft.FontWeight.W_500),
                        holiday_list,
                    ], spacing=10),
                    width=320,
                    padding=10,
                    border=ft.border.all(1, ft.Colors.OUTLINE_VARIANT),
                    border_radius=10,
                ),
                ft.Container(
                    content=ft.Column([
                        ft.Text("Custom time blocks", size=14, weight=ft.FontWeight.W_500),
                        ft.Container(content=block_list_view, expand=True),
                    ], spacing=10, expand=True),
                    expand=True,
                ),
            ], vertical_alignment=ft.CrossAxisAlignment.START, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
