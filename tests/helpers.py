from typing import Any
from unittest.mock import MagicMock

from firebasemanager.core.project_config import ProjectConfig


def make_config(**overrides: Any) -> ProjectConfig:
    values = {
        "apiKey": "AIza-test",
        "authDomain": "demo.firebaseapp.com",
        "projectId": "demo",
        "storageBucket": "demo.appspot.com",
        "messagingSenderId": "1234",
        "appId": "1:1234:web:abcd",
    }
    values.update(overrides)
    return ProjectConfig(**values)


def make_response(status_code: int = 200, payload: Any = None) -> MagicMock:
    res = MagicMock()
    res.status_code = status_code
    if isinstance(payload, Exception):
        res.json.side_effect = payload
    else:
        res.json.return_value = payload
    res.text = "" if payload is None else str(payload)
    return res
