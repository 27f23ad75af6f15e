"""
UI components for console forms: weekday selector and date fields.
"""

import datetime

import flet as ft

from ..models import ALL_DAYS_MASK, WEEK_DAYS, days_to_mask, get_days_label, mask_to_days


def create_day_selector(page: ft.Page, on_change=None):
    """Create a weekday selector with checkboxes and quick select buttons."""

    class DaySelector(ft.Container):
        """Day selector container with get_days / set_days methods."""

        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.current_bitmask = 0

            # Bitmask values follow WEEK_DAYS: Sun=1, Mon=2, ... Sat=64
            self.checkboxes = []
            for i, day_name in enumerate(WEEK_DAYS):
                checkbox = ft.Checkbox(
                    label=day_name,
                    value=False,
                    on_change=lambda e, bv=1 << i: self.update_bitmask(bv, e.control.value)
                )
                self.checkboxes.append(checkbox)

            self.quick_buttons = ft.Row([
                ft.OutlinedButton(
                    "Sun/Tue/Thu",
                    on_click=lambda e: self.set_days(["Sun", "Tue", "Thu"]),
                ),
                ft.OutlinedButton(
                    "Mon/Wed",
                    on_click=lambda e: self.set_days(["Mon", "Wed"]),
                ),
                ft.OutlinedButton(
                    "All Days",
                    icon=ft.Icons.CALENDAR_VIEW_WEEK,
                    on_click=lambda e: self.set_bitmask(ALL_DAYS_MASK),
                ),
            ], spacing=10, wrap=True)

            self.summary = ft.Text(get_days_label(0), size=12, color=ft.Colors.GREY_600)
            self.error = ft.Text("", size=12, color=ft.Colors.RED_600, visible=False)

            self.content = ft.Column([
                ft.Text("Days", size=14, weight=ft.FontWeight.W_500),
                ft.Row([ft.Container(content=cb, width=70) for cb in self.checkboxes],
                       spacing=5, wrap=True),
                self.quick_buttons,
                self.summary,
                self.error,
            ], spacing=8)

            self.padding = 15
            self.border = ft.border.all(1, ft.Colors.OUTLINE)
            self.border_radius = 10

        def update_bitmask(self, bit_value, checked):
            if checked:
                self.current_bitmask |= bit_value
            else:
                self.current_bitmask &= ~bit_value
            self.refresh()

        def refresh(self):
            for i, checkbox in enumerate(self.checkboxes):
                checkbox.value = (self.current_bitmask & (1 << i)) != 0
            self.summary.value = get_days_label(self.current_bitmask)
            if on_change:
                on_change(self.get_days())
            page.update()

        def set_bitmask(self, bitmask_value):
            self.current_bitmask = bitmask_value & ALL_DAYS_MASK
            self.refresh()

        def get_days(self):
            return mask_to_days(self.current_bitmask)

        def set_days(self, days):
            self.set_bitmask(days_to_mask(days))

        @property
        def error_text(self):
            return self.error.value or None

        @error_text.setter
        def error_text(self, message):
            self.error.value = message or ""
            self.error.visible = bool(message)

    return DaySelector()


def create_date_field(page: ft.Page, label: str, value: str = "", on_change=None, **kwargs):
    """Read-only text field that opens a DatePicker and holds an ISO date."""
    picker = ft.DatePicker(
        first_date=datetime.date.today() - datetime.timedelta(days=365 * 3),
        last_date=datetime.date.today() + datetime.timedelta(days=365 * 3),
    )

    field = ft.TextField(
        label=label,
        hint_text="YYYY-MM-DD",
        value=value,
        read_only=True,
        prefix_icon=ft.Icons.CALENDAR_TODAY,
        suffix_icon=ft.Icons.ARROW_DROP_DOWN,
        **kwargs
    )

    def picked(e):
        if e.control.value:
            field.value = e.control.value.strftime("%Y-%m-%d")
            field.error_text = None
            if on_change:
                on_change(field.value)
            page.update()

    def open_picker(e):
        if picker not in page.overlay:
            page.overlay.append(picker)
        if field.value:
            try:
                picker.value = datetime.datetime.strptime(field.value, "%Y-%m-%d")
            except ValueError:
                picker.value = None
        picker.open = True
        page.update()

    picker.on_change = picked
    field.on_click = open_picker
    field.on_focus = open_picker
    return field


def create_time_field(label: str, value: str = "", **kwargs):
    """Text field for a 24-hour "HH:MM" time."""
    return ft.TextField(
        label=label,
        hint_text="HH:MM",
        value=value,
        prefix_icon=ft.Icons.SCHEDULE,
        max_length=5,
        **kwargs
    )
