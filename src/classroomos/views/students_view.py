import flet as ft

from ..database import get_all_students
from ..sections.ui_utils import empty_state, section_header


def create_students_view(page: ft.Page, show_snackbar, user):
    """Create the student directory (read-only)."""
    search_field = ft.TextField(
        label="Search students",
        hint_text="Search by name or ID",
        prefix_icon=ft.Icons.SEARCH,
        expand=True,
        on_change=lambda e: update_student_list(),
    )

    student_list_view = ft.ListView(spacing=10, padding=20, expand=True)

    def update_student_list():
        students = get_all_students(search_field.value or "")
        student_list_view.controls.clear()
        if not students:
            student_list_view.controls.append(empty_state(ft.Icons.PEOPLE_OUTLINE, "No students found"))
        for student in students:
            student_list_view.controls.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row([
                            ft.CircleAvatar(
                                content=ft.Text(student["name"][0].upper(), weight=ft.FontWeight.BOLD),
                                bgcolor=ft.Colors.GREEN_200,
                                color=ft.Colors.GREEN_900,
                            ),
                            ft.Column([
                                ft.Text(student["name"], weight=ft.FontWeight.BOLD, size=16),
                                ft.Text(f"{student['id']} · {student['batches'] or 'Not enrolled'}",
                                        size=12, color=ft.Colors.GREY_600),
                            ], spacing=4, expand=True),
                        ]),
                        padding=15,
                    ),
                )
            )
        page.update()

    update_student_list()

    return ft.Container(
        content=ft.Column([
            section_header("Students", "Enrolled students and their batches", color=ft.Colors.GREEN_700),
            ft.Divider(),
            search_field,
            ft.Container(content=student_list_view, expand=True),
        ], spacing=15, expand=True),
        padding=20,
        expand=True,
    )
