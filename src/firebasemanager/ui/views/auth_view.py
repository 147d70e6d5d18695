import flet as ft

from firebasemanager.state.app_state import AppState


def build_auth_panel(page: ft.Page, app_state: AppState) -> ft.Control:
    email = ft.TextField(label="Email", width=350)
    password = ft.TextField(label="Password", password=True, can_reveal_password=True, width=350)
    status_text = ft.Text()

    def set_status(message: str, is_error: bool = True) -> None:
        status_text.value = message
        status_text.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400
        page.update()

    def on_sign_in(_):
        if not email.value or not password.value:
            set_status("Email and password are required.")
            return

        result = app_state.session.sign_in(email.value.strip(), password.value)
        if result is None:
            set_status(f"Sign in failed: {app_state.session.last_sign_in_error}")
            return
        password.value = ""
        set_status(f"Signed in as {result.email}.", is_error=False)

    return ft.Container(
        padding=20,
        content=ft.Column(
            controls=[
                ft.Text("Authentication", size=22, weight=ft.FontWeight.BOLD),
                email,
                password,
                ft.ElevatedButton("Sign In", on_click=on_sign_in),
                status_text,
            ],
        ),
    )
