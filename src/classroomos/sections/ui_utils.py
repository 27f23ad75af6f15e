"""
Utility functions and small responsive components shared by the views.
"""

import flet as ft


TAG_COLORS = {
    "Lecture": (ft.Colors.BLUE_50, ft.Colors.BLUE_700),
    "Exam": (ft.Colors.RED_50, ft.Colors.RED_700),
    "PTM": (ft.Colors.PURPLE_50, ft.Colors.PURPLE_700),
    "Play Day": (ft.Colors.GREEN_50, ft.Colors.GREEN_700),
    "Homework": (ft.Colors.ORANGE_50, ft.Colors.ORANGE_700),
    "Rating": (ft.Colors.YELLOW_50, ft.Colors.YELLOW_800),
    "Free Class": (ft.Colors.GREY_50, ft.Colors.GREY_700),
    "Speaking Tests": (ft.Colors.INDIGO_50, ft.Colors.INDIGO_700),
}

STATUS_COLORS = {
    "Active": (ft.Colors.GREEN_50, ft.Colors.GREEN_700),
    "Inactive": (ft.Colors.GREY_200, ft.Colors.GREY_700),
    "Present": (ft.Colors.GREEN_50, ft.Colors.GREEN_700),
    "Late": (ft.Colors.AMBER_50, ft.Colors.AMBER_800),
    "Absent": (ft.Colors.RED_50, ft.Colors.RED_700),
}


def get_breakpoint(page):
    """Get current responsive breakpoint based on window width."""
    try:
        width = getattr(page.window, 'width', getattr(page, 'width', 800)) or 800
        if width < 768:
            return 'mobile'
        elif width < 1024:
            return 'tablet'
        else:
            return 'desktop'
    except AttributeError:
        return 'desktop'


def ResponsiveRow(controls, **kwargs):
    """Row with the default desktop spacing."""
    layout_props = {'alignment': ft.MainAxisAlignment.START, 'spacing': 20}
    layout_props.update(kwargs)
    return ft.Row(controls, **layout_props)


def ResponsiveCard(content, **kwargs):
    """Card with standard padding and elevation."""
    return ft.Card(
        content=ft.Container(content=content, padding=15),
        elevation=2,
        **kwargs
    )


def chip(label, colors):
    """Small rounded label, e.g. a status or activity tag."""
    bgcolor, color = colors
    return ft.Container(
        content=ft.Text(label, size=11, weight=ft.FontWeight.W_500, color=color),
        bgcolor=bgcolor,
        border=ft.border.all(1, color),
        border_radius=12,
        padding=ft.padding.symmetric(horizontal=8, vertical=2),
    )


def status_chip(status):
    return chip(status, STATUS_COLORS.get(status, (ft.Colors.GREY_50, ft.Colors.GREY_700)))


def tag_chip(tag):
    return chip(tag, TAG_COLORS.get(tag, (ft.Colors.GREY_50, ft.Colors.GREY_700)))


def empty_state(icon, title, subtitle=""):
    """Centered placeholder for lists without rows."""
    return ft.Container(
        content=ft.Column([
            ft.Icon(icon, size=64, color=ft.Colors.GREY_400),
            ft.Text(title, size=16, color=ft.Colors.GREY_600),
            ft.Text(subtitle, size=12, color=ft.Colors.GREY_500),
        ], horizontal_alignment=ft.CrossAxisAlignment.CENTER),
        alignment=ft.alignment.center,
        padding=40,
    )


def apply_errors(fields, errors):
    """Show validation messages under the matching form fields.

    ``fields`` maps error keys to controls with an ``error_text`` attribute.
    Fields without an error are cleared.
    """
    for key, control in fields.items():
        control.error_text = errors.get(key)


def section_header(title, subtitle, color=ft.Colors.BLUE_700, actions=None):
    return ft.Row([
        ft.Column([
            ft.Text(title, size=20, weight=ft.FontWeight.BOLD, color=color),
            ft.Text(subtitle, size=12, color=ft.Colors.GREY_600),
        ], spacing=2, expand=True),
        *(actions or []),
    ], vertical_alignment=ft.CrossAxisAlignment.CENTER)


def close_dialog(page, dialog):
    dialog.open = False
    page.update()


def open_dialog(page, dialog):
    page.overlay.append(dialog)
    dialog.open = True
    page.update()


def confirm_dialog(page, title, message, on_confirm, confirm_label="Delete"):
    """Modal confirmation; ``on_confirm`` runs after the dialog closes."""
    def confirmed(e):
        close_dialog(page, dialog)
        on_confirm()

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: close_dialog(page, dialog)),
            ft.TextButton(confirm_label, on_click=confirmed, style=ft.ButtonStyle(
                color=ft.Colors.RED_700,
            )),
        ],
    )
    open_dialog(page, dialog)
    return dialog
