"""Serialization helpers."""

from __future__ import annotations

import json
from typing import Any


def to_json(payload: Any, *, indent: int = 2) -> str:
    """Dump ``payload`` as JSON, using wire names for API records."""

    def _default(obj: Any) -> Any:
        if hasattr(obj, "model_dump"):
            return obj.model_dump(by_alias=True, exclude_none=True)
        return str(obj)

    return json.dumps(payload, indent=indent, default=_default, ensure_ascii=False)
