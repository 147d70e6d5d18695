from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests import RequestException

from firebasemanager.core.storage_paths import as_prefix
from firebasemanager.services.auth_service import FirebaseAuthService


logger = logging.getLogger(__name__)


class StorageServiceError(Exception):
    pass


@dataclass
class ListResult:
    prefixes: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)


class StorageService:
    def __init__(
        self,
        bucket: str,
        base_url: str,
        auth: Optional[FirebaseAuthService] = None,
        http: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ) -> None:
        self.bucket = bucket
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.http = http or requests.Session()
        self.timeout = timeout

    @property
    def objects_url(self) -> str:
        return f"{self.base_url}/b/{quote(self.bucket, safe='')}/o"

    def _object_url(self, path: str) -> str:
        return f"{self.objects_url}/{quote(path, safe='')}"

    def _headers(self) -> Dict[str, str]:
        token = self.auth.id_token if self.auth else None
        if token:
            return {"Authorization": f"Firebase {token}"}
        return {}

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            res = self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except RequestException as exc:
            raise StorageServiceError(str(exc)) from exc

        try:
            data = res.json()
        except ValueError:
            data = {}

        if res.status_code >= 400:
            error = data.get("error") if isinstance(data, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            raise StorageServiceError(str(message or f"HTTP {res.status_code}"))
        return data if isinstance(data, dict) else {}

    def list_all(self, path: str) -> ListResult:
        """One level of folders and files under ``path``, across all pages."""
        result = ListResult()
        params: Dict[str, str] = {"prefix": as_prefix(path), "delimiter": "/"}
        while True:
            data = self._request("GET", self.objects_url, params=params)
            result.prefixes.extend(p.rstrip("/") for p in data.get("prefixes", []))
            result.items.extend(str(item["name"]) for item in data.get("items", []) if item.get("name"))
            token = data.get("nextPageToken")
            if not token:
                break
            params["pageToken"] = token
        logger.debug(
            "Listed gs://%s/%s: %d folders, %d files",
            self.bucket,
            path,
            len(result.prefixes),
            len(result.items),
        )
        return result

    def get_metadata(self, path: str) -> Dict[str, Any]:
        return self._request("GET", self._object_url(path))

    def get_download_url(self, path: str) -> str:
        return self.download_url_for(path, self.get_metadata(path))

    def download_url_for(self, path: str, metadata: Dict[str, Any]) -> str:
        """Token URL built from already fetched object metadata."""
        tokens = str(metadata.get("downloadTokens") or "")
        token = tokens.split(",")[0] if tokens else ""
        if not token:
            raise StorageServiceError(f"No download token for {path}")
        return f"{self._object_url(path)}?alt=media&token={quote(token, safe='')}"

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Content-Type": content_type or "application/octet-stream"}
        metadata = self._request(
            "POST",
            self.objects_url,
            params={"name": path},
            data=data,
            headers=headers,
        )
        logger.info("Uploaded %d bytes to gs://%s/%s", len(data), self.bucket, path)
        return metadata
