import flet as ft

from firebasemanager.core.project_config import ProjectConfig
from firebasemanager.state.app_state import AppState


def build_config_editor_panel(page: ft.Page, app_state: AppState) -> ft.Control:
    config = app_state.session.config
    if config is None:
        return ft.Container(padding=20, content=ft.Text("No configuration loaded"))

    fields = {
        key: ft.TextField(label=key, value=value or "", width=500)
        for key, value in config.model_dump().items()
    }

    def on_save(_):
        values = {key: (field.value or "") for key, field in fields.items()}
        values["measurementId"] = values.get("measurementId") or None
        app_state.session.update_config(ProjectConfig(**values))
        page.open(ft.SnackBar(ft.Text("Configuration updated")))
        page.update()

    return ft.Container(
        padding=20,
        content=ft.Column(
            scroll=ft.ScrollMode.AUTO,
            controls=[
                ft.Text("Configuration", size=22, weight=ft.FontWeight.BOLD),
                ft.Text(
                    "Changes are saved to the session; the open connection keeps its original project.",
                    size=12,
                    color=ft.Colors.GREY_600,
                ),
                *fields.values(),
                ft.ElevatedButton("Save Configuration", icon=ft.Icons.SAVE, on_click=on_save),
            ],
        ),
    )
