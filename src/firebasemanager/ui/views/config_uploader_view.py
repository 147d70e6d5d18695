from typing import Callable
import flet as ft

from firebasemanager.config.settings import settings
from firebasemanager.core.project_config import ConfigError, parse_config
from firebasemanager.state.app_state import AppState
from firebasemanager.ui.file_picking import PickedFileReader


def build_config_uploader_view(
    page: ft.Page,
    app_state: AppState,
    on_config_uploaded: Callable[[], None],
) -> ft.View:
    config_text = ft.TextField(
        label="Firebase config JSON",
        hint_text="Paste your Firebase config JSON here...",
        multiline=True,
        min_lines=10,
        max_lines=20,
        width=520,
        text_style=ft.TextStyle(font_family="monospace"),
    )
    status_text = ft.Text(color=ft.Colors.RED_400)

    def set_status(message: str) -> None:
        status_text.value = message
        page.update()

    def on_file_read(_name: str, data: bytes) -> None:
        try:
            config_text.value = data.decode("utf-8")
        except UnicodeDecodeError:
            set_status("Failed to read file")
            return
        set_status("")

    def on_file_error(_message: str) -> None:
        set_status("Failed to read file")

    file_reader = PickedFileReader(page, settings.upload_dir, on_file_read, on_file_error)

    def on_submit(_):
        try:
            config = parse_config(config_text.value or "")
        except ConfigError as exc:
            set_status(str(exc))
            return

        app_state.session.set_config(config)
        set_status("")
        on_config_uploaded()

    return ft.View(
        route="/setup",
        controls=[
            ft.AppBar(title=ft.Text("Firebase Manager - Configuration")),
            ft.Container(
                alignment=ft.alignment.center,
                padding=20,
                content=ft.Column(
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    controls=[
                        ft.Text("Firebase Configuration", size=30, weight=ft.FontWeight.BOLD),
                        ft.Text("Upload or paste your Firebase configuration JSON"),
                        ft.OutlinedButton(
                            "Upload a file",
                            icon=ft.Icons.UPLOAD_FILE,
                            on_click=lambda _: file_reader.pick(allowed_extensions=["json"]),
                        ),
                        ft.Text("JSON up to 10MB", size=12, color=ft.Colors.GREY_600),
                        config_text,
                        ft.ElevatedButton("Connect", on_click=on_submit),
                        status_text,
                    ],
                ),
            ),
        ],
    )
