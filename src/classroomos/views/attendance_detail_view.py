"""
Attendance roster of one batch on one date, with punch times and corrections.
"""

from datetime import date

import flet as ft

from ..attendance import apply_correction, set_punch_time, set_status, summarize
from ..auth import can, require
from ..database import get_attendance_rows, get_batch_by_id
from ..errors import PermissionDenied
from ..models import ATTENDANCE_STATUSES
from ..scheduling import format_date, format_time_range
from ..sections.ui_utils import empty_state, status_chip
from ..utils import export_attendance_to_csv
from .attendance_view import count_badge


def create_attendance_detail_view(page: ft.Page, show_snackbar, user, batch_id, navigate,
                                  selected_date=None):
    """Create the roster for ``batch_id`` on ``selected_date`` (default today)."""
    try:
        current_date = date.fromisoformat(selected_date or date.today().isoformat()).isoformat()
    except ValueError:
        current_date = date.today().isoformat()
    batch = get_batch_by_id(batch_id)
    if batch is None:
        return ft.Container(
            content=ft.Column([
                empty_state(ft.Icons.SEARCH_OFF, "Batch not found", f"No batch with id {batch_id}"),
                ft.TextButton("Back to attendance", icon=ft.Icons.ARROW_BACK,
                              on_click=lambda e: navigate("/attendance")),
            ], horizontal_alignment=ft.CrossAxisAlignment.CENTER),
            padding=20,
            expand=True,
        )

    can_edit = can(user, "attendance", "update", batch.branch_id)
    rows = []
    summary_row = ft.Row(spacing=10)
    roster = ft.Column(spacing=6, expand=True, scroll=ft.ScrollMode.AUTO)

    def guarded(action):
        """Run ``action`` only when the user may update this batch's attendance."""
        try:
            require(user, "attendance", "update", batch.branch_id)
        except PermissionDenied as ex:
            show_snackbar(str(ex), True)
            return False
        action()
        return True

    def load_rows():
        nonlocal rows
        rows = get_attendance_rows(batch.id, current_date)
        render()

    def render():
        summary = summarize(rows)
        summary_row.controls = [
            count_badge("Present", summary["present"], "Present"),
            count_badge("Late", summary["late"], "Late"),
            count_badge("Absent", summary["absent"], "Absent"),
        ]
        roster.controls.clear()
        if not rows:
            roster.controls.append(empty_state(ft.Icons.PEOPLE_OUTLINE, "No students enrolled"))
        for row in rows:
            roster.controls.append(roster_row(row))
        page.update()

    def roster_row(row):
        punch_in = ft.TextField(value=row.punch_in or "", hint_text="HH:MM", width=100, dense=True,
                                read_only=not can_edit)
        punch_out = ft.TextField(value=row.punch_out or "", hint_text="HH:MM", width=100, dense=True,
                                 read_only=not can_edit)
        status = ft.Dropdown(
            value=row.status,
            width=130,
            dense=True,
            disabled=not can_edit,
            options=[ft.dropdown.Option(s) for s in ATTENDANCE_STATUSES],
        )

        def on_punch(e, field):
            value = (e.control.value or "").strip()
            if value == (getattr(row, field) or ""):
                return
            try:
                changed = guarded(lambda: set_punch_time(row, field, value, batch.id, current_date,
                                                         batch.start_time))
            except ValueError:
                show_snackbar("Punch times use the HH:MM format", True)
                return
            if changed:
                render()

        def on_status(e):
            if guarded(lambda: set_status(row, e.control.value, batch.id, current_date)):
                render()

        punch_in.on_blur = lambda e: on_punch(e, "punch_in")
        punch_out.on_blur = lambda e: on_punch(e, "punch_out")
        status.on_change = on_status

        return ft.Container(
            content=ft.Row([
                ft.Text(row.student_id, width=80, size=12, color=ft.Colors.GREY_600),
                ft.Text(row.student_name, weight=ft.FontWeight.W_500, expand=True),
                punch_in,
                punch_out,
                status,
                status_chip(row.status),
                ft.IconButton(
                    icon=ft.Icons.HISTORY_EDU,
                    tooltip=f"Corrections ({len(row.correction_log)})",
                    on_click=lambda e, r=row: open_correction_dialog(r),
                ),
            ], spacing=10),
            padding=ft.padding.symmetric(horizontal=10, vertical=6),
            border=ft.border.only(bottom=ft.BorderSide(1, ft.Colors.OUTLINE_VARIANT)),
        )

    def open_correction_dialog(row):
        status_field = ft.Dropdown(
            label="Status",
            value=row.status,
            disabled=not can_edit,
            options=[ft.dropdown.Option(s) for s in ATTENDANCE_STATUSES],
        )
        note_field = ft.TextField(label="Note", multiline=True, min_lines=2, read_only=not can_edit)
        history = ft.Column([
            ft.Text(f"{entry.time} · {entry.user}: {entry.note}", size=12)
            for entry in row.correction_log
        ] or [ft.Text("No corrections yet", size=12, color=ft.Colors.GREY_500)], spacing=4)

        def save(e):
            if guarded(lambda: apply_correction(row, status_field.value, note_field.value or "",
                                                batch.id, current_date, user.id if user else "staff-demo")):
                show_snackbar(f"Attendance corrected for {row.student_name}")
                dlg.open = False
                render()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text(f"Correct attendance · {row.student_name}"),
            content=ft.Container(
                content=ft.Column([
                    status_field,
                    note_field,
                    ft.Divider(),
                    ft.Text("Correction log", size=13, weight=ft.FontWeight.W_500),
                    history,
                ], spacing=10, tight=True, scroll=ft.ScrollMode.AUTO),
                width=420,
            ),
            actions=[
                ft.TextButton("Close", on_click=lambda e: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Save", icon=ft.Icons.SAVE, on_click=save, visible=can_edit),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    def export_csv(e):
        try:
            filename = export_attendance_to_csv(batch.id, current_date)
        except OSError as ex:
            show_snackbar(f"Export failed: {ex}", True)
            return
        show_snackbar(f"Exported to {filename}")

    load_rows()

    return ft.Container(
        content=ft.Column([
            ft.Row([
                ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="Back to attendance",
                              on_click=lambda e: navigate("/attendance")),
                ft.Column([
                    ft.Text(batch.name, size=22, weight=ft.FontWeight.BOLD),
                    ft.Text(f"{batch.internal_name} · {format_date(current_date)} · "
                            f"{format_time_range(batch.start_time, batch.end_time)}",
                            size=12, color=ft.Colors.GREY_600),
                ], spacing=2, expand=True),
                ft.OutlinedButton("Export CSV", icon=ft.Icons.DOWNLOAD, on_click=export_csv),
            ]),
            summary_row,
            ft.Row([
                ft.Text("ID", width=80, size=12, weight=ft.FontWeight.BOLD),
                ft.Text("Student", size=12, weight=ft.FontWeight.BOLD, expand=True),
                ft.Text("Punch In", width=100, size=12, weight=ft.FontWeight.BOLD),
                ft.Text("Punch Out", width=100, size=12, weight=ft.FontWeight.BOLD),
                ft.Text("Status", width=130, size=12, weight=ft.FontWeight.BOLD),
            ], spacing=10),
            ft.Divider(height=1),
            roster,
        ], spacing=12, expand=True),
        padding=20,
        expand=True,
    )
