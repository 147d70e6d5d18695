from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, ""))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    firebase_config_file: str = os.getenv("FIREBASE_CONFIG_FILE", "")

    auth_url: str = os.getenv("FIREBASE_AUTH_URL", "https://identitytoolkit.googleapis.com/v1")
    firestore_url: str = os.getenv("FIRESTORE_URL", "https://firestore.googleapis.com/v1")
    storage_url: str = os.getenv("FIREBASE_STORAGE_URL", "https://firebasestorage.googleapis.com/v0")
    firestore_database_id: str = os.getenv("FIRESTORE_DATABASE_ID", "(default)")

    request_timeout: float = _float_env("REQUEST_TIMEOUT", 15.0)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    web_mode: bool = os.getenv("FIREBASE_MANAGER_WEB", "0") == "1"
    port: int = int(os.getenv("PORT", "8550"))
    upload_dir: str = os.getenv("FIREBASE_MANAGER_UPLOAD_DIR", "uploads")


settings = Settings()
