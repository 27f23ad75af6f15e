"""
Main entry point for the ClassroomOS console.

Builds the login screen and the main layout, and routes navigation paths
("/batches/bt1", "/attendance/bt1/2025-09-02", ...) to the views.
"""

import warnings
# websockets deprecation warnings come from Flet's transport layer
warnings.filterwarnings("ignore", message="websockets.legacy is deprecated", category=DeprecationWarning)
warnings.filterwarnings("ignore", message="websockets.server.WebSocketServerProtocol is deprecated", category=DeprecationWarning)

import flet as ft

from . import auth
from .config import get_settings
from .database import init_db
from .logging_config import get_logger, setup_logging
from .navigation import href_for_index, navigation_rail
from .views import (
    create_attendance_detail_view,
    create_attendance_view,
    create_batch_detail_view,
    create_batches_view,
    create_branches_view,
    create_dashboard_view,
    create_settings_view,
    create_students_view,
    create_time_blocks_view,
)

logger = get_logger(__name__)

ROLE_LABELS = {"admin": "Admin", "manager": "Branch Manager", "stockholder": "Stockholder"}


def resolve_view(page, path, show_snackbar, user, navigate):
    """Return the content for a navigation path."""
    parts = [p for p in path.split("/") if p]
    section = parts[0] if parts else ""

    if section == "branches":
        return create_branches_view(page, show_snackbar, user)
    if section == "batches":
        if len(parts) > 1:
            return create_batch_detail_view(page, show_snackbar, user, parts[1], navigate)
        return create_batches_view(page, show_snackbar, user, navigate)
    if section == "holidays":
        return create_time_blocks_view(page, show_snackbar, user)
    if section == "attendance":
        selected_date = parts[2] if len(parts) > 2 else None
        if len(parts) > 1:
            return create_attendance_detail_view(page, show_snackbar, user, parts[1], navigate, selected_date)
        return create_attendance_view(page, show_snackbar, user, navigate)
    if section == "students":
        return create_students_view(page, show_snackbar, user)
    if section == "settings":
        return create_settings_view(page, show_snackbar, user, navigate, parts[1] if len(parts) > 1 else None)
    return create_dashboard_view(page, show_snackbar, user, navigate)


def main(page: ft.Page):
    """Main application entry point."""
    settings = get_settings()

    # ------------------------------------------------------------------
    # Page-level configuration
    # ------------------------------------------------------------------
    page.theme_mode = ft.ThemeMode.SYSTEM
    page.title = settings.app_title
    page.window.width = 1200
    page.window.height = 800
    page.window.min_width = 800
    page.window.min_height = 600
    page.padding = 0

    page.theme = ft.Theme(color_scheme_seed=ft.Colors.INDIGO, use_material3=True)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    current_user = None
    current_path = "/"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def show_snackbar(message: str, is_error: bool = False):
        sb = ft.SnackBar(
            content=ft.Text(message),
            bgcolor=ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400,
            open=True,
        )
        page.overlay.append(sb)
        page.update()

    # ---------- view routing ------------------------------------------
    def navigate(path: str):
        nonlocal current_path
        current_path = path or "/"
        logger.debug("navigate", path=current_path)
        show_main_app()

    def change_view(index: int):
        navigate(href_for_index(index))

    # ---------- logout -------------------------------------------------
    def logout(_):
        nonlocal current_user, current_path
        auth.logout()
        current_user = None
        current_path = "/"
        show_login()

    # ---------- rebuild navigation on resize ---------------------------
    def on_resize(_):
        if current_user is not None:
            show_main_app()

    page.on_resized = on_resize

    # ---------- app-bar ------------------------------------------------
    def create_app_bar():
        return ft.AppBar(
            title=ft.Text(settings.app_title, weight=ft.FontWeight.BOLD),
            center_title=False,
            bgcolor=ft.Colors.INDIGO_700,
            color=ft.Colors.WHITE,
            actions=[
                ft.PopupMenuButton(
                    items=[
                        ft.PopupMenuItem(
                            text=f"{current_user.name} · {ROLE_LABELS.get(current_user.role, current_user.role)}",
                            disabled=True,
                        ),
                        ft.PopupMenuItem(text=current_user.email, disabled=True),
                        ft.PopupMenuItem(),
                        ft.PopupMenuItem(text="Settings", icon=ft.Icons.SETTINGS,
                                         on_click=lambda e: navigate("/settings")),
                        ft.PopupMenuItem(text="Logout", icon=ft.Icons.LOGOUT, on_click=logout),
                    ],
                    icon=ft.Icons.ACCOUNT_CIRCLE,
                    icon_color=ft.Colors.WHITE,
                )
            ],
        )

    # ---------- main layout -------------------------------------------
    def show_main_app():
        page.controls.clear()
        page.overlay.clear()

        w = getattr(page.window, "width", 800) or 800
        main_content = resolve_view(page, current_path, show_snackbar, current_user, navigate)
        nav = navigation_rail(current_path, w, lambda e: change_view(e.control.selected_index))

        # ---------------- mobile ---------------------------------------
        if w < 600:
            page.add(
                create_app_bar(),
                ft.Container(content=main_content, expand=True),
                nav,
            )
        # ---------------- tablet -----------------------------
        elif w < 1024:
            rail_container = ft.Container(
                content=nav,
                width=72,
                height=(page.height or 800) - 56,      # AppBar height
            )
            page.add(
                create_app_bar(),
                ft.Container(
                    content=ft.Row(
                        [
                            rail_container,
                            ft.VerticalDivider(width=1),
                            ft.Container(content=main_content, expand=True),
                        ],
                        expand=True,
                    ),
                    expand=True,
                ),
            )
        # ---------------- desktop -----------------------------
        else:
            page.add(
                create_app_bar(),
                ft.Container(
                    content=ft.Column(
                        [
                            nav,
                            ft.Container(content=main_content, expand=True),
                        ],
                        spacing=0,
                        expand=True,
                    ),
                    expand=True,
                ),
            )
        page.update()

    # ---------- login -------------------------------------------------
    def show_login():
        page.controls.clear()
        page.overlay.clear()
        field_width = min(320, (getattr(page.window, "width", 400) or 400) * 0.8)

        email_field = ft.TextField(
            label="Email", prefix_icon=ft.Icons.EMAIL,
            width=field_width, autofocus=True,
            keyboard_type=ft.KeyboardType.EMAIL,
        )
        pass_field = ft.TextField(
            label="Password", prefix_icon=ft.Icons.LOCK,
            password=True, can_reveal_password=True,
            width=field_width,
        )

        def login_as(role):
            nonlocal current_user, current_path
            current_user = auth.login_as(role)
            current_path = "/"
            show_main_app()

        def handle_login(_):
            if not (email_field.value or "").strip():
                email_field.error_text = "Required"
                page.update()
                return
            # Demo console: the form always signs in as the administrator
            login_as("admin")

        quick_buttons = ft.Row(
            [
                ft.OutlinedButton(ROLE_LABELS[role], on_click=lambda e, r=role: login_as(r))
                for role in auth.ROLES
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            wrap=True,
        )

        page.add(
            ft.Container(
                content=ft.Column(
                    [
                        ft.Icon(ft.Icons.SCHOOL, size=64, color=ft.Colors.INDIGO_600),
                        ft.Text(settings.app_title, size=24, weight=ft.FontWeight.BOLD),
                        ft.Text("Sign in to the education center console", size=12, color=ft.Colors.GREY_600),
                        ft.Divider(height=20),
                        email_field, pass_field,
                        ft.ElevatedButton(
                            "Login", icon=ft.Icons.LOGIN,
                            width=field_width,
                            on_click=handle_login,
                        ),
                        ft.Text("Quick demo login", size=12, color=ft.Colors.GREY_600),
                        quick_buttons,
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    spacing=16,
                ),
                alignment=ft.alignment.center,
                expand=True,
            )
        )
        page.update()

    # ------------------------------------------------------------------
    # kick-off
    # ------------------------------------------------------------------
    init_db()
    current_user = auth.current_user()
    if current_user is not None:
        show_main_app()
    else:
        show_login()


def run():
    """Console script entry point."""
    setup_logging(get_settings())
    ft.app(target=main)


if __name__ == "__main__":
    run()
