"""
Navigation for the ClassroomOS console.

Provides responsive navigation that adapts based on screen width:
- NavigationBar for mobile (< 600px)
- NavigationRail for tablet (600-1024px)
- Horizontal NavigationBar for desktop (>= 1024px)

Routes are path strings ("/batches/bt1"); a destination is highlighted when
its href matches the current path.
"""

import flet as ft

# (href, label, icon, selected_icon)
NAV_MAIN = [
    ("/", "Dashboard", ft.Icons.DASHBOARD_OUTLINED, ft.Icons.DASHBOARD),
    ("/branches", "Branches", ft.Icons.STORE_OUTLINED, ft.Icons.STORE),
    ("/batches", "Batches", ft.Icons.CLASS_OUTLINED, ft.Icons.CLASS_),
    ("/holidays", "Time blocks", ft.Icons.EVENT_BUSY_OUTLINED, ft.Icons.EVENT_BUSY),
    ("/attendance", "Attendance", ft.Icons.FACT_CHECK_OUTLINED, ft.Icons.FACT_CHECK),
    ("/students", "Students", ft.Icons.PEOPLE_OUTLINE, ft.Icons.PEOPLE),
]

NAV_SECONDARY = [
    ("/settings", "Settings", ft.Icons.SETTINGS_OUTLINED, ft.Icons.SETTINGS),
]

NAV_ITEMS = NAV_MAIN + NAV_SECONDARY


def is_active(href: str, path: str) -> bool:
    """"/" only matches itself; other hrefs also match their sub-paths."""
    if href == "/":
        return path == "/"
    return path == href or path.startswith(href + "/")


def selected_index(path: str) -> int:
    for idx, (href, _, _, _) in enumerate(NAV_ITEMS):
        if is_active(href, path):
            return idx
    return 0


def href_for_index(index: int) -> str:
    if 0 <= index < len(NAV_ITEMS):
        return NAV_ITEMS[index][0]
    return "/"


def navigation_rail(current_path: str, page_width: float, on_change):
    """Return the correct navigation widget for the current form-factor."""
    idx = selected_index(current_path)

    destinations_bar = [
        ft.NavigationBarDestination(
            icon=icon,
            selected_icon=selected_icon,
            label=label
        ) for _, label, icon, selected_icon in NAV_ITEMS
    ]

    destinations_rail = [
        ft.NavigationRailDestination(
            icon=icon,
            selected_icon=selected_icon,
            label=label
        ) for _, label, icon, selected_icon in NAV_ITEMS
    ]
    if page_width < 600:                       # phone
        return ft.Container(
            content=ft.NavigationBar(
                destinations=destinations_bar,
                selected_index=idx,
                on_change=on_change,
                elevation=8,
            ),
            height=80,
        )

    elif page_width < 1024:  # tablet
        return ft.NavigationRail(
            destinations=destinations_rail,
            selected_index=idx,
            label_type=ft.NavigationRailLabelType.SELECTED,
            min_width=72, expand=True,
            on_change=on_change,
            elevation=2,
        )

    # desktop (>= 1024px) - horizontal navigation at top
    else:
        return ft.Container(
            content=ft.NavigationBar(
                destinations=destinations_bar,
                selected_index=idx,
                on_change=on_change,
                elevation=2,
            ),
            height=72,
        )
