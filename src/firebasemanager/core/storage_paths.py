from dataclasses import dataclass
from typing import Optional


@dataclass
class StorageItem:
    name: str
    full_path: str
    is_folder: bool = False
    download_url: Optional[str] = None
    size: Optional[int] = None
    content_type: Optional[str] = None
    updated: Optional[str] = None


def join_path(parent: str, name: str) -> str:
    parent = parent.strip("/")
    name = name.strip("/")
    if not parent:
        return name
    return f"{parent}/{name}"


def parent_path(path: str) -> str:
    parts = path.strip("/").split("/")
    parts.pop()
    return "/".join(parts)


def name_of(path: str) -> str:
    return path.rstrip("/").rsplit("/", maxsplit=1)[-1]


def as_prefix(path: str) -> str:
    """List prefix for a folder path: ``""`` for the root, ``"a/b/"`` otherwise."""
    path = path.strip("/")
    return f"{path}/" if path else ""


def format_file_size(size: Optional[int]) -> str:
    if size is None:
        return "-"
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
