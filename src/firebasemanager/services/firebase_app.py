import logging
from typing import Optional

import requests

from firebasemanager.config.settings import Settings, settings as default_settings
from firebasemanager.core.project_config import ProjectConfig
from firebasemanager.services.auth_service import FirebaseAuthService
from firebasemanager.services.firestore_service import FirestoreService
from firebasemanager.services.storage_service import StorageService


logger = logging.getLogger(__name__)


class FirebaseApp:
    """One connection to a Firebase project.

    Owns the HTTP session and hands out the auth, Firestore and Storage
    clients for the config it was created with. The clients are created once
    and share the auth client, so a sign-in applies to every later request.
    """

    def __init__(
        self,
        config: ProjectConfig,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.settings = settings or default_settings
        self.http = http or requests.Session()
        self._auth: Optional[FirebaseAuthService] = None
        self._firestore: Optional[FirestoreService] = None
        self._storage: Optional[StorageService] = None

    @classmethod
    def initialize(cls, config: ProjectConfig) -> "FirebaseApp":
        logger.info("Initializing Firebase app for project %s", config.projectId)
        return cls(config)

    def auth(self) -> FirebaseAuthService:
        if self._auth is None:
            self._auth = FirebaseAuthService(
                api_key=self.config.apiKey,
                base_url=self.settings.auth_url,
                http=self.http,
                timeout=self.settings.request_timeout,
            )
        return self._auth

    def firestore(self) -> FirestoreService:
        if self._firestore is None:
            self._firestore = FirestoreService(
                project_id=self.config.projectId,
                api_key=self.config.apiKey,
                base_url=self.settings.firestore_url,
                database_id=self.settings.firestore_database_id,
                auth=self.auth(),
                http=self.http,
                timeout=self.settings.request_timeout,
            )
        return self._firestore

    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = StorageService(
                bucket=self.config.storageBucket,
                base_url=self.settings.storage_url,
                auth=self.auth(),
                http=self.http,
                timeout=self.settings.request_timeout,
            )
        return self._storage

    def close(self) -> None:
        self.http.close()
