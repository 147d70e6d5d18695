"""Firebase web-app configuration: parsing, validation and export."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError


REQUIRED_FIELDS = (
    "apiKey",
    "authDomain",
    "projectId",
    "storageBucket",
    "messagingSenderId",
    "appId",
)

EXPORT_FILE_NAME = "firebase-config.json"


class ConfigError(ValueError):
    pass


class ProjectConfig(BaseModel):
    apiKey: str
    authDomain: str
    projectId: str
    storageBucket: str
    messagingSenderId: str
    appId: str
    measurementId: Optional[str] = None


def missing_fields(data: Dict[str, Any]) -> List[str]:
    return [name for name in REQUIRED_FIELDS if not data.get(name)]


def parse_config(text: str) -> ProjectConfig:
    """Parse pasted or uploaded JSON into a config.

    Every required field must be present and non-empty; nothing is connected
    when this raises.
    """
    if not text or not text.strip():
        raise ConfigError("No configuration provided")

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigError("Invalid JSON format") from exc
    if not isinstance(data, dict):
        raise ConfigError("Invalid JSON format")

    missing = missing_fields(data)
    if missing:
        raise ConfigError(f"Missing required fields: {', '.join(missing)}")

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ConfigError(f"Invalid field values: {', '.join(fields)}") from exc


def load_config_file(path: Union[str, Path]) -> ProjectConfig:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError("Failed to read file") from exc
    return parse_config(text)


def dump_config(config: ProjectConfig) -> str:
    return json.dumps(config.model_dump(exclude_none=True), indent=2)
