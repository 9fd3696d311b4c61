"""Lenient parsing of tool-call argument payloads."""

from __future__ import annotations

import json
from typing import Any

import json_repair


def parse_object(args: Any) -> Any:
    """Turn a tool-call ``arguments`` value into a JSON object.

    Dicts and lists pass through. Strings are parsed as JSON, then repaired
    (models often emit truncated objects); text that still is not an object
    or array is wrapped as ``{"args": raw}``. Anything else yields ``{}``.
    """
    if isinstance(args, (dict, list)):
        return args
    if not isinstance(args, str):
        return {}

    try:
        return json.loads(args)
    except json.JSONDecodeError:
        pass

    try:
        repaired = json_repair.loads(args)
    except Exception:
        repaired = None
    if isinstance(repaired, (dict, list)) and repaired:
        return repaired
    return {"args": args}
