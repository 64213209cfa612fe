"""Turn raw analyzer text into a validated OutfitAnalysis.

The analyzer output is untrusted: it may be wrapped in markdown fences, carry a
sentence of prose around the JSON, or omit and mangle fields. Everything here
returns a tagged result and never raises; the caller decides what a failure means.
"""
from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from trendhaven.core.result import Err, Ok, Result
from trendhaven.schemas.outfits import OutfitAnalysis

_FENCED_BLOCK = re.compile(r"```[\w+-]*[ \t]*\r?\n?(.*?)\r?\n?[ \t]*```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    text = (text or "").strip()
    m = _FENCED_BLOCK.search(text)
    if m:
        return m.group(1).strip()
    # unterminated fence: drop the opening marker only
    return re.sub(r"^```[\w+-]*[ \t]*\r?\n?", "", text).strip()


def _load_object(text: str) -> Result[dict]:
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start < 0 or end <= start:
            return Err("not_json")
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return Err("not_json")
    if not isinstance(data, dict):
        return Err("not_an_object")
    return Ok(data)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "analysis"
    return f"{loc}: {err.get('msg', 'invalid')}"


def normalize_analysis(raw: str | None) -> Result[OutfitAnalysis]:
    if not raw or not raw.strip():
        return Err("empty_response")
    loaded = _load_object(strip_code_fences(raw))
    if isinstance(loaded, Err):
        return loaded
    try:
        return Ok(OutfitAnalysis.model_validate(loaded.value))
    except ValidationError as e:
        return Err(_first_error(e))
