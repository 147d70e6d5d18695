import mimetypes
import flet as ft

from firebasemanager.config.settings import settings
from firebasemanager.core.storage_paths import StorageItem, format_file_size
from firebasemanager.state.app_state import AppState
from firebasemanager.state.session_state import NotReadyError
from firebasemanager.state.storage_explorer import StorageExplorer
from firebasemanager.ui.file_picking import PickedFileReader


def build_storage_panel(page: ft.Page, app_state: AppState) -> ft.Control:
    explorer = StorageExplorer(app_state.session)

    path_text = ft.Text(weight=ft.FontWeight.BOLD)
    up_button = ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="Up")
    error_text = ft.Text(color=ft.Colors.RED_400)
    item_list = ft.Column(spacing=4)
    details = ft.Column(spacing=6)
    progress_label = ft.Text()
    progress_bar = ft.ProgressBar(width=400, value=0)
    progress_row = ft.Column(controls=[progress_label, progress_bar], visible=False)

    def render() -> None:
        path_text.value = explorer.current_path or "Root"
        up_button.disabled = not explorer.current_path
        error_text.value = explorer.error or ""

        item_list.controls.clear()
        if explorer.loading:
            item_list.controls.append(ft.ProgressRing())
        elif not explorer.items:
            item_list.controls.append(ft.Text("This folder is empty"))
        for item in explorer.items:
            item_list.controls.append(
                ft.ListTile(
                    leading=ft.Icon(ft.Icons.FOLDER if item.is_folder else ft.Icons.INSERT_DRIVE_FILE),
                    title=ft.Text(item.name),
                    subtitle=None if item.is_folder else ft.Text(format_file_size(item.size)),
                    on_click=make_select(item),
                )
            )

        details.controls.clear()
        selected = explorer.selected_item
        if selected is None:
            details.controls.append(ft.Text("Select a file to view details"))
        else:
            details.controls.extend(
                [
                    ft.Text(selected.name, size=18, weight=ft.FontWeight.BOLD),
                    ft.Text(f"Path: {selected.full_path}"),
                    ft.Text(f"Size: {format_file_size(selected.size)}"),
                    ft.Text(f"Type: {selected.content_type or '-'}"),
                    ft.Text(f"Updated: {selected.updated or '-'}"),
                ]
            )
            if selected.download_url:
                details.controls.append(
                    ft.Row(
                        controls=[
                            ft.TextField(value=selected.download_url, read_only=True, expand=True),
                            ft.OutlinedButton("Open", on_click=lambda _, url=selected.download_url: page.launch_url(url)),
                        ]
                    )
                )

        progress_row.visible = explorer.uploading
        progress_bar.value = explorer.progress.value / 100
        progress_label.value = f"Uploading... {explorer.progress.percent}%"
        page.update()

    async def run(action) -> None:
        try:
            await action
        except NotReadyError as exc:
            page.open(ft.SnackBar(ft.Text(str(exc))))
        render()

    def make_select(item: StorageItem):
        async def handler(_):
            await run(explorer.select(item))

        return handler

    async def on_up(_):
        await run(explorer.navigate_up())

    async def on_refresh(_):
        await run(explorer.refresh())

    def on_progress(_value: float) -> None:
        progress_bar.value = explorer.progress.value / 100
        progress_label.value = f"Uploading... {explorer.progress.percent}%"
        page.update()

    async def upload_file(name: str, data: bytes) -> None:
        content_type = mimetypes.guess_type(name)[0]
        progress_row.visible = True
        page.update()
        await run(explorer.upload(name, data, content_type, on_progress=on_progress))

    def on_file_read(name: str, data: bytes) -> None:
        page.run_task(upload_file, name, data)

    def on_file_error(message: str) -> None:
        explorer.error = message
        render()

    file_reader = PickedFileReader(page, settings.upload_dir, on_file_read, on_file_error)
    up_button.on_click = on_up

    async def load_initial() -> None:
        if app_state.session.storage is not None:
            await run(explorer.refresh())

    page.run_task(load_initial)
    render()

    return ft.Container(
        padding=20,
        content=ft.Column(
            scroll=ft.ScrollMode.AUTO,
            controls=[
                ft.Text("Storage Explorer", size=22, weight=ft.FontWeight.BOLD),
                ft.Row(
                    controls=[
                        up_button,
                        path_text,
                        ft.IconButton(icon=ft.Icons.REFRESH, tooltip="Refresh", on_click=on_refresh),
                        ft.ElevatedButton(
                            "Upload File",
                            icon=ft.Icons.UPLOAD,
                            on_click=lambda _: file_reader.pick(),
                        ),
                    ]
                ),
                progress_row,
                error_text,
                ft.Row(
                    vertical_alignment=ft.CrossAxisAlignment.START,
                    controls=[
                        ft.Container(content=item_list, expand=1),
                        ft.Container(content=details, expand=1),
                    ],
                ),
            ],
        ),
    )
