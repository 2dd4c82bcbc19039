"""
Response formatting for tool results.

Every tool answers with one text block holding the backend JSON,
pretty-printed with two-space indentation.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel


def format_json(data: Any) -> str:
    """Pretty-print a backend payload for a tool result."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, ensure_ascii=False)
