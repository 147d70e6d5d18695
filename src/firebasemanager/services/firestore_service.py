import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import requests
from requests import RequestException

from firebasemanager.core.firestore_encoding import decode_fields
from firebasemanager.core.query import QueryCondition, QueryOrder, build_query, split_collection_path
from firebasemanager.services.auth_service import FirebaseAuthService


logger = logging.getLogger(__name__)


class FirestoreServiceError(Exception):
    pass


def _error_message(res: requests.Response) -> str:
    try:
        data = res.json()
    except ValueError:
        return f"HTTP {res.status_code}: {res.text[:200]}"
    # runQuery reports errors as a one-element array
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        error = data.get("error") or {}
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {res.status_code}"


class FirestoreService:
    def __init__(
        self,
        project_id: str,
        api_key: str,
        base_url: str,
        database_id: str = "(default)",
        auth: Optional[FirebaseAuthService] = None,
        http: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ) -> None:
        self.project_id = project_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.database_id = database_id
        self.auth = auth
        self.http = http or requests.Session()
        self.timeout = timeout

    @property
    def documents_path(self) -> str:
        return f"projects/{quote(self.project_id, safe='')}/databases/{quote(self.database_id, safe='()')}/documents"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.auth.id_token if self.auth else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def run_query(self, structured_query: Dict[str, Any], parent: str = "") -> List[Dict[str, Any]]:
        """Run one snapshot query and return ``{"id": ..., **fields}`` rows.

        ``parent`` is the document path that owns a subcollection, empty for
        top-level collections.
        """
        url = f"{self.base_url}/{self.documents_path}"
        if parent:
            url = f"{url}/{quote(parent, safe='/')}"
        url = f"{url}:runQuery"
        try:
            res = self.http.post(
                url,
                params={"key": self.api_key},
                headers=self._headers(),
                json={"structuredQuery": structured_query},
                timeout=self.timeout,
            )
        except RequestException as exc:
            raise FirestoreServiceError(str(exc)) from exc

        if res.status_code >= 400:
            raise FirestoreServiceError(_error_message(res))

        try:
            rows = res.json()
        except ValueError as exc:
            raise FirestoreServiceError("Malformed response from Firestore") from exc

        results: List[Dict[str, Any]] = []
        for row in rows or []:
            doc = row.get("document") if isinstance(row, dict) else None
            if not doc:
                continue
            results.append(self._to_record(doc))
        logger.debug("Query on %s returned %d documents", structured_query.get("from"), len(results))
        return results

    def query(
        self,
        collection: str,
        conditions: Iterable[QueryCondition] = (),
        orders: Iterable[QueryOrder] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        parent, _ = split_collection_path(collection)
        return self.run_query(build_query(collection, conditions, orders, limit), parent)

    @staticmethod
    def _to_record(doc: Dict[str, Any]) -> Dict[str, Any]:
        doc_id = str(doc.get("name", "")).rsplit("/", maxsplit=1)[-1]
        data = decode_fields(doc.get("fields"))
        if "id" in data:
            # the document id replaces the body field; its value is lost from the results
            logger.warning("Document %s has an 'id' field that is shadowed by the document id", doc_id)
        record: Dict[str, Any] = {"id": doc_id}
        record.update(data)
        record["id"] = doc_id
        return record
