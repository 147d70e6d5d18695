from dataclasses import dataclass, field
import logging
from typing import Callable, Optional

from firebasemanager.config.settings import Settings
from firebasemanager.core.project_config import ConfigError, ProjectConfig, load_config_file
from firebasemanager.services.auth_service import AuthResult, AuthServiceError, FirebaseAuthService
from firebasemanager.services.firebase_app import FirebaseApp
from firebasemanager.services.firestore_service import FirestoreService
from firebasemanager.services.storage_service import StorageService


logger = logging.getLogger(__name__)


class NotReadyError(RuntimeError):
    pass


@dataclass
class SessionState:
    """Active project configuration plus the handles derived from it.

    Handles stay ``None`` until ``set_config`` has connected. The first
    connection is kept for the life of the session: later configs are recorded
    but the live clients keep talking to the first project.
    """

    app_factory: Callable[[ProjectConfig], FirebaseApp] = field(default=FirebaseApp.initialize)
    config: Optional[ProjectConfig] = None
    app: Optional[FirebaseApp] = None
    auth: Optional[FirebaseAuthService] = None
    firestore: Optional[FirestoreService] = None
    storage: Optional[StorageService] = None
    last_sign_in_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.app is not None

    @property
    def user_email(self) -> Optional[str]:
        if self.auth is None or self.auth.current_user is None:
            return None
        return self.auth.current_user.email

    def set_config(self, config: ProjectConfig) -> None:
        self.config = config
        try:
            app = self.app or self.app_factory(config)
            auth = app.auth()
            firestore = app.firestore()
            storage = app.storage()
        except Exception:
            logger.exception("Firebase initialization failed")
            return

        self.app = app
        self.auth = auth
        self.firestore = firestore
        self.storage = storage

    def update_config(self, config: ProjectConfig) -> None:
        self.set_config(config)

    def sign_in(self, email: str, password: str) -> Optional[AuthResult]:
        self.last_sign_in_error = None
        if self.auth is None:
            self.last_sign_in_error = "Firebase Auth is not initialized"
            logger.error("Sign in failed: %s", self.last_sign_in_error)
            return None
        try:
            return self.auth.sign_in(email, password)
        except AuthServiceError as exc:
            self.last_sign_in_error = str(exc)
            logger.error("Sign in failed: %s", exc)
            return None

    def close(self) -> None:
        if self.app is not None:
            self.app.close()

    def require_auth(self) -> FirebaseAuthService:
        if self.auth is None:
            raise NotReadyError("Firebase Auth is not initialized")
        return self.auth

    def require_firestore(self) -> FirestoreService:
        if self.firestore is None:
            raise NotReadyError("Firestore is not initialized")
        return self.firestore

    def require_storage(self) -> StorageService:
        if self.storage is None:
            raise NotReadyError("Firebase Storage is not initialized")
        return self.storage


def load_local_config(session: SessionState, settings: Settings) -> bool:
    """Connect from ``FIREBASE_CONFIG_FILE`` when it is set (local development)."""
    if not settings.firebase_config_file:
        return False
    try:
        config = load_config_file(settings.firebase_config_file)
    except ConfigError as exc:
        logger.error("Ignoring %s: %s", settings.firebase_config_file, exc)
        return False
    session.set_config(config)
    logger.info("Loaded configuration from %s", settings.firebase_config_file)
    return session.is_connected
