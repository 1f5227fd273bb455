from __future__ import annotations

from typing import Any

from pydantic_core import to_json


def to_json_text(value: Any) -> str:
    # dates and decimals come out as JSON strings, binary columns as hex
    return to_json(value, indent=2, bytes_mode="hex", fallback=str).decode("utf-8")
