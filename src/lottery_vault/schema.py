"""JSON Schema for the persisted lottery document.

The schema only covers structure: key names, types and the color vocabulary.
Whether the numbers make sense together is checked by
:mod:`lottery_vault.validator` after decoding. Unknown keys are tolerated so
that files written by newer versions still load.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from jsonschema import Draft202012Validator, exceptions as js_exceptions

from .models import PrizeColor

_UINT = {"type": "integer", "minimum": 0, "maximum": 2**32 - 1}
_INT = {"type": "integer", "minimum": -(2**63), "maximum": 2**63 - 1}
_OPT_STR = {"type": ["string", "null"]}

STATE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "prize": {
            "type": "object",
            "required": ["id", "color", "name"],
            "properties": {
                "id": {"type": "string"},
                "color": {"enum": [c.value for c in PrizeColor]},
                "name": {"type": "string"},
                "description": _OPT_STR,
                "icon": _OPT_STR,
            },
        },
        "drawResult": {
            "type": "object",
            "required": ["prizeId", "timestamp", "cycleId", "drawNumber"],
            "properties": {
                "prizeId": {"type": "string"},
                "timestamp": _INT,
                "cycleId": {"type": "string"},
                "drawNumber": _UINT,
            },
        },
        "remainingDraws": {
            "type": "object",
            "required": ["red", "yellow", "blue"],
            "properties": {"red": _UINT, "yellow": _UINT, "blue": _UINT},
        },
        "cycle": {
            "type": "object",
            "required": ["id", "startTime", "results", "completed", "remainingDraws"],
            "properties": {
                "id": {"type": "string"},
                "startTime": _INT,
                "endTime": {"anyOf": [_INT, {"type": "null"}]},
                "results": {"type": "array", "items": {"$ref": "#/$defs/drawResult"}},
                "completed": {"type": "boolean"},
                "remainingDraws": {"$ref": "#/$defs/remainingDraws"},
            },
        },
        "config": {
            "type": "object",
            "required": ["drawsPerCycle", "drawsPerColor", "enableAnimations", "animationDuration"],
            "properties": {
                "drawsPerCycle": _UINT,
                "drawsPerColor": _UINT,
                "enableAnimations": {"type": "boolean"},
                "animationDuration": _UINT,
            },
        },
    },
    "type": "object",
    "required": ["currentCycle", "history", "availablePrizes", "config"],
    "properties": {
        "currentCycle": {"$ref": "#/$defs/cycle"},
        "history": {"type": "array", "items": {"$ref": "#/$defs/cycle"}},
        "availablePrizes": {"type": "array", "items": {"$ref": "#/$defs/prize"}},
        "config": {"$ref": "#/$defs/config"},
    },
}

_validator = Draft202012Validator(STATE_SCHEMA)


def schema_errors(data: Any) -> List[js_exceptions.ValidationError]:
    return sorted(_validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])


def format_schema_errors(errors: Sequence[js_exceptions.ValidationError]) -> str:
    """Build a readable message, listing missing keys once per location."""
    lines: List[str] = []
    missing_by_path: Dict[str, List[str]] = {}
    other_msgs: List[str] = []

    for err in errors:
        where = ".".join(str(p) for p in err.absolute_path) or "$"
        if err.validator == "required":
            # message looks like: "'id' is a required property"
            parts = err.message.split("'")
            if len(parts) >= 3:
                missing_by_path.setdefault(where, []).append(parts[1])
                continue
        other_msgs.append(f" - At {where}: {err.message}")

    for loc, props in sorted(missing_by_path.items()):
        loc_display = "root" if loc == "$" else loc
        lines.append(f" - Missing required keys at {loc_display}: {', '.join(sorted(set(props)))}")
    lines.extend(other_msgs)
    return "\n".join(lines)
