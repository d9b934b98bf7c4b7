"""Snapshot type and write sentinels shared by the REST and in-memory clients."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any


class _ServerTimestamp:
    """Placeholder resolved to the store's commit time."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Increment:
    """Atomic numeric add applied by the store (missing field counts as 0)."""

    value: int | float


def increment(value: int | float) -> Increment:
    return Increment(value)


INCREMENT = increment


class DocumentSnapshot:
    """Snapshot of a document (id + path relative to the database root + data)."""

    def __init__(self, id_: str, data: dict, path: str = "") -> None:
        self.id = id_
        self.path = path or id_
        self._data = data

    def get(self, field: str, default: Any = None) -> Any:
        return self._data.get(field, default)

    def to_dict(self) -> dict:
        return self._data

    def __repr__(self) -> str:
        return f"DocumentSnapshot(path={self.path!r})"


@dataclass(frozen=True)
class FieldTransform:
    field_path: tuple[str, ...]
    kind: str  # "server_timestamp" or "increment"
    value: Any = None


_SIMPLE_FIELD = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_field_path(parts: tuple[str, ...]) -> str:
    """Dotted field path; non-identifier segments are backtick-quoted."""
    out = []
    for part in parts:
        if _SIMPLE_FIELD.match(part):
            out.append(part)
        else:
            escaped = part.replace("\\", "\\\\").replace("`", "\\`")
            out.append(f"`{escaped}`")
    return ".".join(out)


def split_transforms(
    data: dict[str, Any], prefix: tuple[str, ...] = ()
) -> tuple[dict[str, Any], list[FieldTransform]]:
    """Separate sentinel values from plain data.

    Returns the data with sentinels removed (nested maps kept, possibly empty)
    and the list of transforms with their full field paths.
    """
    plain: dict[str, Any] = {}
    transforms: list[FieldTransform] = []
    for key, value in data.items():
        path = (*prefix, key)
        if value is SERVER_TIMESTAMP:
            transforms.append(FieldTransform(path, "server_timestamp"))
        elif isinstance(value, Increment):
            transforms.append(FieldTransform(path, "increment", value.value))
        elif isinstance(value, dict):
            nested, nested_transforms = split_transforms(value, path)
            transforms.extend(nested_transforms)
            if nested or not nested_transforms:
                plain[key] = nested
            elif not prefix:
                # Map made only of sentinels: keep the key so it is replaced.
                plain[key] = {}
        else:
            plain[key] = copy.deepcopy(value)
    return plain, transforms
