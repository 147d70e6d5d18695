import logging
from pathlib import Path
from typing import Callable, Union
import flet as ft


logger = logging.getLogger(__name__)

UPLOAD_URL_EXPIRES = 600


class PickedFileReader:
    """Delivers the bytes of one picked file on desktop and in the browser.

    Desktop pickers return a local path. Browser pickers return only a name,
    so the file is first uploaded to the app's upload directory and read back
    from there.
    """

    def __init__(
        self,
        page: ft.Page,
        upload_dir: Union[str, Path],
        on_read: Callable[[str, bytes], None],
        on_error: Callable[[str], None],
    ) -> None:
        self.page = page
        self.upload_dir = Path(upload_dir).resolve()
        self.on_read = on_read
        self.on_error = on_error
        self.picker = ft.FilePicker(on_result=self.on_result, on_upload=self.on_upload)
        page.overlay.append(self.picker)

    def pick(self, **kwargs) -> None:
        self.picker.pick_files(allow_multiple=False, **kwargs)

    def on_result(self, e: ft.FilePickerResultEvent) -> None:
        if not e.files:
            return
        picked = e.files[0]
        if picked.path:
            self._read(picked.name, Path(picked.path))
            return
        if not self.page.web:
            self.on_error(f"Could not access {picked.name}")
            return
        upload_url = self.page.get_upload_url(picked.name, UPLOAD_URL_EXPIRES)
        self.picker.upload([ft.FilePickerUploadFile(picked.name, upload_url=upload_url)])

    def on_upload(self, e: ft.FilePickerUploadEvent) -> None:
        if e.error:
            logger.error("Browser upload of %s failed: %s", e.file_name, e.error)
            self.on_error(f"Could not read {e.file_name}: {e.error}")
            return
        if e.progress is None or e.progress < 1:
            return
        target = self.upload_dir / Path(e.file_name).name
        try:
            self._read(e.file_name, target)
        finally:
            target.unlink(missing_ok=True)

    def _read(self, name: str, path: Path) -> None:
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.error("Could not read %s: %s", path, exc)
            self.on_error(f"Could not read {name}: {exc}")
            return
        self.on_read(name, data)
