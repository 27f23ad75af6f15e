"""
Batch planner view.

Shows the batch summary and its planned activities as a list or a month
calendar, and hosts the activity generator (form, preview, confirm).
"""

import calendar
import datetime

import flet as ft

from ..auth import can, require
from ..config import get_settings
from ..database import (
    get_activities_for_batch, get_batch_by_id, replace_activities, update_activity,
)
from ..errors import ClassroomOSError, PermissionDenied
from ..models import get_days_label
from ..scheduling import (
    change_activity_time, format_date, format_time, format_time_range,
    generate_activities, reschedule_activity,
)
from ..sections.ui_components import create_time_field
from ..sections.ui_utils import TAG_COLORS, apply_errors, empty_state, tag_chip
from ..time_blocks import blocked_dates, is_blocked
from ..validation import validate_generator_form


def summary_item(label, value):
    return ft.Container(
        content=ft.Column([
            ft.Text(label, size=11, color=ft.Colors.GREY_600),
            ft.Text(value, size=14, weight=ft.FontWeight.W_500),
        ], spacing=2),
        padding=ft.padding.symmetric(horizontal=12, vertical=8),
    )


def create_batch_detail_view(page: ft.Page, show_snackbar, user, batch_id, navigate):
    """Create the planner view for one batch."""
    batch = get_batch_by_id(batch_id)
    if batch is None:
        return ft.Container(
            content=ft.Column([
                empty_state(ft.Icons.SEARCH_OFF, "Batch not found", f"No batch with id {batch_id}"),
                ft.TextButton("Back to batches", icon=ft.Icons.ARROW_BACK,
                              on_click=lambda e: navigate("/batches")),
            ], horizontal_alignment=ft.CrossAxisAlignment.CENTER),
            padding=20,
            expand=True,
        )

    # State variables
    activities = get_activities_for_batch(batch.id)
    view_mode = "list"
    highlighted_id = None
    can_plan = can(user, "planner", "update", batch.branch_id)

    content_area = ft.Column(spacing=10, expand=True, scroll=ft.ScrollMode.AUTO)

    def refresh():
        content_area.controls.clear()
        if not activities:
            content_area.controls.append(
                empty_state(ft.Icons.EVENT_NOTE, "No activities planned yet",
                            "Generate activities to build the course plan")
            )
        elif view_mode == "list":
            content_area.controls.extend(activity_card(a) for a in activities)
        else:
            content_area.controls.extend(calendar_months())
        page.update()

    # ---------- list mode ----------------------------------------------
    def activity_card(activity):
        actions = []
        if can_plan:
            actions = [
                ft.IconButton(icon=ft.Icons.EDIT_CALENDAR, tooltip="Change date",
                              on_click=lambda e, a=activity: pick_date(a)),
                ft.IconButton(icon=ft.Icons.SCHEDULE, tooltip="Change time",
                              on_click=lambda e, a=activity: edit_time(a)),
            ]
        border_color = ft.Colors.AMBER_400 if activity.id == highlighted_id else ft.Colors.OUTLINE_VARIANT
        return ft.Container(
            content=ft.Row([
                ft.Column([
                    ft.Row([
                        ft.Text(activity.title, weight=ft.FontWeight.BOLD, size=15),
                        ft.Text(activity.code, size=12, color=ft.Colors.GREY_600),
                        tag_chip(activity.tag),
                    ], spacing=8),
                    ft.Row([
                        ft.Icon(ft.Icons.EVENT, size=14, color=ft.Colors.GREY_600),
                        ft.Text(format_date(activity.date), size=12),
                        ft.Icon(ft.Icons.SCHEDULE, size=14, color=ft.Colors.GREY_600),
                        ft.Text(format_time_range(activity.start_time, activity.end_time), size=12),
                        ft.Icon(ft.Icons.MEETING_ROOM, size=14, color=ft.Colors.GREY_600),
                        ft.Text(activity.room_id or "-", size=12),
                    ], spacing=5, wrap=True),
                    ft.Text(", ".join(activity.teacher_names()), size=12, color=ft.Colors.GREY_600),
                ], spacing=4, expand=True),
                ft.Row(actions, spacing=0),
            ]),
            padding=12,
            border=ft.border.all(2 if activity.id == highlighted_id else 1, border_color),
            border_radius=10,
        )

    def pick_date(activity):
        picker = ft.DatePicker(
            value=datetime.datetime.strptime(activity.date, "%Y-%m-%d"),
            first_date=datetime.date.today() - datetime.timedelta(days=365),
            last_date=datetime.date.today() + datetime.timedelta(days=365 * 2),
        )

        def on_pick(e):
            if e.control.value:
                move_activity(activity, e.control.value.strftime("%Y-%m-%d"))

        picker.on_change = on_pick
        page.overlay.append(picker)
        picker.open = True
        page.update()

    def move_activity(activity, new_date):
        nonlocal activities, highlighted_id
        try:
            require(user, "planner", "update", batch.branch_id)
            activities = reschedule_activity(activities, activity.id, new_date)
        except ClassroomOSError as ex:
            show_snackbar(str(ex), True)
            return
        update_activity(activity)
        highlighted_id = activity.id
        if is_blocked(new_date, batch.branch_id):
            show_snackbar(f"{activity.title} now falls on a blocked date ({format_date(new_date)})", True)
        else:
            show_snackbar(f"{activity.title} moved to {format_date(new_date)}")
        refresh()

    def edit_time(activity):
        start_field = create_time_field("Start Time", activity.start_time)
        end_field = create_time_field("End Time", activity.end_time)

        def save(e):
            nonlocal activities
            form = {"start_time": start_field.value or "", "end_time": end_field.value or "",
                    "room": activity.room_id or "-"}
            errors = validate_generator_form(form)
            apply_errors({"start_time": start_field, "end_time": end_field}, errors)
            if errors:
                page.update()
                return
            try:
                require(user, "planner", "update", batch.branch_id)
                if form["start_time"] != activity.start_time:
                    activities = change_activity_time(activities, activity.id, form["start_time"], True)
                if form["end_time"] != activity.end_time:
                    activities = change_activity_time(activities, activity.id, form["end_time"], False)
            except ClassroomOSError as ex:
                show_snackbar(str(ex), True)
                return
            update_activity(activity)
            dlg.open = False
            show_snackbar(f"{activity.title}: {format_time_range(activity.start_time, activity.end_time)}")
            refresh()

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text(f"Change time · {activity.title}"),
            content=ft.Container(content=ft.Column([start_field, end_field], tight=True), width=300),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: (setattr(dlg, 'open', False), page.update())),
                ft.ElevatedButton("Save", icon=ft.Icons.SAVE, on_click=save),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    # ---------- calendar mode ------------------------------------------
    def calendar_months():
        by_date = {}
        for activity in activities:
            by_date.setdefault(activity.date, []).append(activity)
        months = sorted({(int(d[:4]), int(d[5:7])) for d in by_date})

        cal = calendar.Calendar(firstweekday=6)  # Sunday first
        blocked = blocked_dates(batch.branch_id)
        blocks = []
        for year, month in months:
            header = ft.Row(
                [ft.Container(content=ft.Text(name, size=11, weight=ft.FontWeight.BOLD,
                                              text_align=ft.TextAlign.CENTER), expand=True)
                 for name in ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]],
                spacing=2,
            )
            weeks = []
            for week in cal.monthdatescalendar(year, month):
                cells = []
                for day in week:
                    iso = day.isoformat()
                    in_month = day.month == month
                    items = [
                        ft.Container(
                            content=ft.Text(f"{a.code} {format_time(a.start_time)}", size=10,
                                            color=TAG_COLORS.get(a.tag, (None, ft.Colors.GREY_700))[1]),
                            bgcolor=TAG_COLORS.get(a.tag, (ft.Colors.GREY_50, None))[0],
                            border_radius=4,
                            padding=2,
                        )
                        for a in by_date.get(iso, [])
                    ] if in_month else []
                    cells.append(ft.Container(
                        content=ft.Column([
                            ft.Text(str(day.day), size=11,
                                    color=ft.Colors.ON_SURFACE if in_month else ft.Colors.GREY_400),
                            *items,
                        ], spacing=2),
                        bgcolor=ft.Colors.RED_50 if in_month and iso in blocked else None,
                        border=ft.border.all(1, ft.Colors.OUTLINE_VARIANT),
                        padding=4,
                        height=80,
                        expand=True,
                    ))
                weeks.append(ft.Row(cells, spacing=2))
            blocks.append(ft.Column([
                ft.Text(f"{calendar.month_name[month]} {year}", size=16, weight=ft.FontWeight.BOLD),
                header,
                *weeks,
            ], spacing=2))
        return blocks

    def on_mode_change(e):
        nonlocal view_mode
        view_mode = next(iter(e.control.selected), "list")
        refresh()

    mode_toggle = ft.SegmentedButton(
        selected={"list"},
        allow_multiple_selection=False,
        segments=[
            ft.Segment(value="list", label=ft.Text("List"), icon=ft.Icon(ft.Icons.VIEW_LIST)),
            ft.Segment(value="calendar", label=ft.Text("Calendar"), icon=ft.Icon(ft.Icons.CALENDAR_MONTH)),
        ],
        on_change=on_mode_change,
    )

    # ---------- generator ----------------------------------------------
    def open_generator(e):
        settings = get_settings()
        start_field = create_time_field("Start Time", batch.start_time, expand=True)
        end_field = create_time_field("End Time", batch.end_time, expand=True)
        room_field = ft.TextField(label="Room", value=settings.default_room, expand=True)
        teachers_field = ft.TextField(label="Teachers", value=settings.default_teachers,
                                      hint_text="Comma separated")
        count_field = ft.TextField(label="Activities", value=str(settings.activity_count), width=120,
                                   keyboard_type=ft.KeyboardType.NUMBER)
        preview = []

        form_step = ft.Column([
            ft.Text("Prefilled with batch info. Adjust time and room, then generate.",
                    size=12, color=ft.Colors.GREY_600),
            ft.Row([start_field, end_field]),
            ft.Row([room_field, count_field]),
            teachers_field,
        ], spacing=10, tight=True)
        preview_step = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, height=360, visible=False)

        def generate(ev):
            nonlocal preview
            form = {"start_time": start_field.value or "", "end_time": end_field.value or "",
                    "room": room_field.value or ""}
            errors = validate_generator_form(form)
            try:
                count = int(count_field.value or settings.activity_count)
                if count < 1:
                    raise ValueError
            except ValueError:
                errors["count"] = "Invalid"
            apply_errors({"start_time": start_field, "end_time": end_field,
                          "room": room_field, "count": count_field}, errors)
            if errors:
                page.update()
                return
            preview = generate_activities(batch, form["start_time"], form["end_time"],
                                          form["room"].strip(), teachers_field.value or "", count)
            preview_step.controls = [
                ft.Row([
                    ft.Text(a.code, width=60, size=12, weight=ft.FontWeight.BOLD),
                    ft.Text(a.title, width=80, size=12),
                    tag_chip(a.tag),
                    ft.Text(format_date(a.date), width=80, size=12),
                    ft.Text(format_time_range(a.start_time, a.end_time), size=12),
                ], spacing=8)
                for a in preview
            ] or [ft.Text("No free meeting dates left in this batch.", color=ft.Colors.RED_600)]
            form_step.visible = False
            preview_step.visible = True
            generate_button.visible = False
            back_button.visible = True
            confirm_button.visible = bool(preview)
            page.update()

        def back(ev):
            form_step.visible = True
            preview_step.visible = False
            generate_button.visible = True
            back_button.visible = False
            confirm_button.visible = False
            page.update()

        def confirm(ev):
            nonlocal activities, highlighted_id
            try:
                require(user, "planner", "create", batch.branch_id)
            except PermissionDenied as ex:
                show_snackbar(str(ex), True)
                return
            if replace_activities(batch.id, preview):
                activities = get_activities_for_batch(batch.id)
                highlighted_id = None
                show_snackbar(f"{len(preview)} activities planned")
                dlg.open = False
                refresh()
            else:
                show_snackbar("Error saving activities!", True)

        generate_button = ft.ElevatedButton("Generate", icon=ft.Icons.AUTO_AWESOME, on_click=generate)
        back_button = ft.TextButton("Back", icon=ft.Icons.ARROW_BACK, on_click=back, visible=False)
        confirm_button = ft.ElevatedButton("Confirm", icon=ft.Icons.CHECK, on_click=confirm, visible=False)

        dlg = ft.AlertDialog(
            modal=True,
            title=ft.Text(f"Generate activities · {batch.name}"),
            content=ft.Container(content=ft.Column([form_step, preview_step], tight=True), width=560),
            actions=[
                ft.TextButton("Cancel", on_click=lambda ev: (setattr(dlg, 'open', False), page.update())),
                back_button,
                generate_button,
                confirm_button,
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        page.overlay.append(dlg)
        dlg.open = True
        page.update()

    summary_bar = ft.Container(
        content=ft.Row([
            summary_item("Branch", batch.branch_name),
            summary_item("Program", batch.program),
            summary_item("Class Duration", format_time_range(batch.start_time, batch.end_time)),
            summary_item("Start Date", format_date(batch.start_date)),
            summary_item("End Date", format_date(batch.end_date)),
            summary_item("Days", get_days_label(batch.days_mask)),
            summary_item("Capacity", str(batch.capacity)),
            summary_item("Enrolled", str(batch.enrolled)),
        ], wrap=True, spacing=0),
        border=ft.border.all(1, ft.Colors.OUTLINE_VARIANT),
        border_radius=10,
    )

    toolbar = [mode_toggle]
    if can(user, "planner", "create", batch.branch_id):
        toolbar.append(ft.ElevatedButton("Generate activities", icon=ft.Icons.AUTO_AWESOME,
                                         on_click=open_generator))

    refresh()

    return ft.Container(
        content=ft.Column([
            ft.Row([
                ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="Back to batches",
                              on_click=lambda e: navigate("/batches")),
                ft.Column([
                    ft.Text(batch.name, size=22, weight=ft.FontWeight.BOLD),
                    ft.Text(batch.internal_name, size=12, color=ft.Colors.GREY_600),
                ], spacing=2, expand=True),
                *toolbar,
            ], vertical_alignment=ft.CrossAxisAlignment.CENTER, wrap=True),
            summary_bar,
            ft.Divider(),
            content_area,
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
