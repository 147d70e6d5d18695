import os
from pathlib import Path
import secrets
import flet as ft

from firebasemanager.config.logging_config import configure_logging
from firebasemanager.config.settings import settings
from firebasemanager.ui.app import main


def run() -> None:
    configure_logging(settings.log_level)
    upload_dir = Path(settings.upload_dir).resolve()
    upload_dir.mkdir(parents=True, exist_ok=True)
    # browser uploads need signed upload URLs
    os.environ.setdefault("FLET_SECRET_KEY", secrets.token_urlsafe(32))
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
        upload_dir=str(upload_dir),
    )


if __name__ == "__main__":
    run()
