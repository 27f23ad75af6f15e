"""
Attendance directory: one card per batch with the day's present/absent/late counts.
"""

from datetime import date

import flet as ft

from ..attendance import batch_summary
from ..auth import can
from ..database import get_all_batches
from ..scheduling import format_time_range
from ..sections.ui_components import create_date_field
from ..sections.ui_utils import STATUS_COLORS, empty_state, section_header


def count_badge(label, value, status):
    bgcolor, color = STATUS_COLORS[status]
    return ft.Container(
        content=ft.Column([
            ft.Text(str(value), size=18, weight=ft.FontWeight.BOLD, color=color),
            ft.Text(label, size=11, color=color),
        ], spacing=0, horizontal_alignment=ft.CrossAxisAlignment.CENTER),
        bgcolor=bgcolor,
        border_radius=8,
        padding=ft.padding.symmetric(horizontal=12, vertical=6),
        width=80,
    )


def create_attendance_view(page: ft.Page, show_snackbar, user, navigate, selected_date=None):
    """Create the attendance directory for ``selected_date`` (default today)."""
    current_date = selected_date or date.today().isoformat()

    search_field = ft.TextField(
        label="Search batches",
        prefix_icon=ft.Icons.SEARCH,
        expand=True,
        on_change=lambda e: load_batches(),
    )

    def on_date_change(value):
        nonlocal current_date
        current_date = value
        load_batches()

    date_field = create_date_field(page, "Date", current_date, on_change=on_date_change, width=200)
    batch_list_view = ft.ListView(spacing=10, padding=20, expand=True)

    def load_batches():
        batches = [b for b in get_all_batches(search_field.value or "")
                   if b.status == "Active" and can(user, "attendance", "read", b.branch_id)]
        batch_list_view.controls.clear()
        if not batches:
            batch_list_view.controls.append(empty_state(ft.Icons.EVENT_BUSY, "No active batches"))
        for batch in batches:
            summary = batch_summary(batch.id, current_date)
            batch_list_view.controls.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row([
                            ft.Column([
                                ft.Text(batch.name, weight=ft.FontWeight.BOLD, size=16),
                                ft.Text(f"{batch.internal_name} · {batch.branch_name} · "
                                        f"{format_time_range(batch.start_time, batch.end_time)}",
                                        size=12, color=ft.Colors.GREY_600),
                            ], spacing=4, expand=True),
                            count_badge("Present", summary["present"], "Present"),
                            count_badge("Late", summary["late"], "Late"),
                            count_badge("Absent", summary["absent"], "Absent"),
                            ft.IconButton(
                                icon=ft.Icons.CHEVRON_RIGHT,
                                tooltip="Open roster",
                                on_click=lambda e, b=batch: navigate(f"/attendance/{b.id}/{current_date}"),
                            ),
                        ], spacing=10),
                        padding=15,
                        on_click=lambda e, b=batch: navigate(f"/attendance/{b.id}/{current_date}"),
                    ),
                )
            )
        page.update()

    load_batches()

    return ft.Container(
        content=ft.Column([
            section_header("Attendance", "Daily present, late and absent counts per batch",
                           color=ft.Colors.TEAL_700),
            ft.Divider(),
            ft.Row([search_field, date_field]),
            ft.Container(content=batch_list_view, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
