from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional
import requests
from requests import RequestException


logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    pass


@dataclass
class AuthResult:
    uid: str
    email: str
    id_token: str
    refresh_token: str


class FirebaseAuthService:
    SIGN_IN_PATH = "/accounts:signInWithPassword"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        http: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.current_user: Optional[AuthResult] = None

    @property
    def id_token(self) -> Optional[str]:
        if self.current_user is None:
            return None
        return self.current_user.id_token

    def sign_in(self, email: str, password: str) -> AuthResult:
        payload = {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        }
        response = self._post(self.SIGN_IN_PATH, payload)
        result = self._to_result(response, email)
        self.current_user = result
        logger.info("Signed in as %s", result.email)
        return result

    def sign_out(self) -> None:
        self.current_user = None

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            res = self.http.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except RequestException as exc:
            raise AuthServiceError("AUTH_SERVICE_UNAVAILABLE") from exc
        try:
            data = res.json()
        except ValueError:
            raise AuthServiceError("AUTH_SERVICE_UNAVAILABLE")

        if res.status_code >= 400:
            error = data.get("error") or {}
            raise AuthServiceError(str(error.get("message") or "AUTH_ERROR"))

        return data

    @staticmethod
    def _to_result(data: Dict[str, Any], email: str) -> AuthResult:
        uid = str(data.get("localId") or "")
        if not uid:
            raise AuthServiceError("INVALID_AUTH_RESPONSE")
        return AuthResult(
            uid=uid,
            email=str(data.get("email") or email),
            id_token=str(data.get("idToken") or ""),
            refresh_token=str(data.get("refreshToken") or ""),
        )
