"""
Dashboard statistics section.
"""

from datetime import date

import flet as ft

from ..attendance import batch_summary
from ..database import count_students, get_all_batches, get_all_branches, get_all_staff_users
from .ui_utils import ResponsiveCard, ResponsiveRow, get_breakpoint


def get_stats_section(page, title="Dashboard"):
    """Stat cards for branches, batches, students, active staff and today's attendance."""
    branches = get_all_branches()
    batches = get_all_batches()
    active_staff = [u for u in get_all_staff_users() if u.status == "Active"]

    today = date.today().isoformat()
    present = late = 0
    for batch in batches:
        if batch.status != "Active":
            continue
        summary = batch_summary(batch.id, today)
        present += summary["present"]
        late += summary["late"]

    stat_data = [
        {
            'icon': ft.Icons.STORE,
            'color': ft.Colors.BLUE_600,
            'title': 'Branches',
            'value': f"{len([b for b in branches if b.status == 'Active'])} / {len(branches)}",
        },
        {
            'icon': ft.Icons.CLASS_,
            'color': ft.Colors.ORANGE_600,
            'title': 'Batches',
            'value': str(len(batches)),
        },
        {
            'icon': ft.Icons.PEOPLE,
            'color': ft.Colors.GREEN_600,
            'title': 'Students',
            'value': str(count_students()),
        },
        {
            'icon': ft.Icons.BADGE,
            'color': ft.Colors.PURPLE_600,
            'title': 'Active Staff',
            'value': str(len(active_staff)),
        },
        {
            'icon': ft.Icons.FACT_CHECK,
            'color': ft.Colors.TEAL_600,
            'title': "Today's Attendance",
            'value': f"{present + late}",
        },
    ]

    cards = []
    for data in stat_data:
        card_content = ft.Column([
            ft.Icon(data['icon'], size=32, color=data['color']),
            ft.Text(data['title'], size=12, weight=ft.FontWeight.BOLD),
            ft.Text(data['value'], size=24, weight=ft.FontWeight.BOLD, color=data['color']),
        ], alignment=ft.MainAxisAlignment.CENTER, spacing=5)
        cards.append(ft.Container(content=ResponsiveCard(card_content), expand=True))

    if get_breakpoint(page) == 'mobile':
        layout = ft.Column(cards, spacing=10)
    else:
        layout = ResponsiveRow(cards, alignment=ft.MainAxisAlignment.CENTER, spacing=15)

    return ft.Container(
        content=ft.Column([
            ft.Text(title, size=28, weight=ft.FontWeight.BOLD),
            layout,
        ], spacing=15),
        padding=20,
    )
