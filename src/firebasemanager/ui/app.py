from pathlib import Path
import logging
import flet as ft

from firebasemanager.config.settings import settings
from firebasemanager.core.project_config import EXPORT_FILE_NAME, dump_config
from firebasemanager.state.app_state import AppState
from firebasemanager.state.bookmarks import CollectionBookmarks
from firebasemanager.state.session_state import SessionState, load_local_config
from firebasemanager.ui.views.auth_view import build_auth_panel
from firebasemanager.ui.views.config_editor_view import build_config_editor_panel
from firebasemanager.ui.views.config_uploader_view import build_config_uploader_view
from firebasemanager.ui.views.firestore_view import build_firestore_panel
from firebasemanager.ui.views.storage_view import build_storage_panel


logger = logging.getLogger(__name__)


class FirebaseManagerApp:
    def __init__(self, page: ft.Page) -> None:
        self.page = page
        self.page.title = "Firebase Manager"
        self.state = AppState(
            session=SessionState(),
            bookmarks=CollectionBookmarks(page.client_storage),
        )
        self.save_picker = ft.FilePicker(on_result=self.on_save_result)
        self.page.overlay.append(self.save_picker)
        self.page.on_disconnect = self.on_disconnect

    def run(self) -> None:
        if load_local_config(self.state.session, settings):
            self.show_manager()
        else:
            self.show_uploader()

    def show_uploader(self) -> None:
        self.page.views.clear()
        self.page.views.append(build_config_uploader_view(self.page, self.state, self.show_manager))
        self.page.update()

    def show_manager(self) -> None:
        tabs = ft.Tabs(
            selected_index=0,
            expand=True,
            tabs=[
                ft.Tab(text="Firestore", content=build_firestore_panel(self.page, self.state)),
                ft.Tab(text="Storage", content=build_storage_panel(self.page, self.state)),
                ft.Tab(text="Authentication", content=build_auth_panel(self.page, self.state)),
                ft.Tab(text="Config", content=build_config_editor_panel(self.page, self.state)),
            ],
        )
        export_menu = ft.PopupMenuButton(
            icon=ft.Icons.SHARE,
            tooltip="Export configuration",
            items=[
                ft.PopupMenuItem(text="Copy to clipboard", on_click=self.copy_config),
                ft.PopupMenuItem(text="Download as JSON", on_click=self.download_config),
            ],
        )
        self.page.views.clear()
        self.page.views.append(
            ft.View(
                route="/",
                controls=[
                    ft.AppBar(title=ft.Text("Firebase Manager"), actions=[export_menu]),
                    tabs,
                ],
            )
        )
        self.page.update()

    def notify(self, message: str) -> None:
        self.page.open(ft.SnackBar(ft.Text(message)))
        self.page.update()

    def copy_config(self, _: ft.ControlEvent) -> None:
        config = self.state.session.config
        if config is None:
            return
        self.page.set_clipboard(dump_config(config))
        self.notify("Firebase configuration has been copied to clipboard.")

    def download_config(self, _: ft.ControlEvent) -> None:
        config = self.state.session.config
        if config is None:
            return
        if self.page.web:
            # browsers get no save dialog
            self.page.set_clipboard(dump_config(config))
            self.notify("Saving files is not available in the browser; the configuration was copied to the clipboard.")
            return
        self.save_picker.save_file(file_name=EXPORT_FILE_NAME, allowed_extensions=["json"])

    def on_save_result(self, e: ft.FilePickerResultEvent) -> None:
        config = self.state.session.config
        if not e.path or config is None:
            return
        try:
            Path(e.path).write_text(dump_config(config), encoding="utf-8")
        except OSError as exc:
            logger.error("Could not save configuration to %s: %s", e.path, exc)
            self.notify(f"Could not save configuration: {exc}")
            return
        self.notify("Firebase configuration has been downloaded as JSON.")

    def on_disconnect(self, _: ft.ControlEvent) -> None:
        logger.info("Page disconnected; closing the Firebase session")
        self.state.session.close()


def main(page: ft.Page) -> None:
    FirebaseManagerApp(page).run()
