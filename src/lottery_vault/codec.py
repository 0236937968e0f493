from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from .errors import StorageDecodeError, StorageEncodeError
from .models import State
from .schema import format_schema_errors, schema_errors


def encode_state(state: State) -> str:
    """Encode a State to pretty-printed JSON with sorted keys.

    The document is checked against the schema first, so a state that could
    not be decoded again is never written.
    """
    try:
        data = state.to_dict()
    except (TypeError, ValueError, AttributeError) as e:
        raise StorageEncodeError(f"Failed to serialize state: {e}") from e

    errors = schema_errors(data)
    if errors:
        raise StorageEncodeError("State does not match the document schema:\n" + format_schema_errors(errors))

    try:
        return json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)
    except (TypeError, ValueError) as e:
        raise StorageEncodeError(f"Failed to serialize state: {e}") from e


def decode_state(text: Union[str, bytes], source: Optional[Union[str, Path]] = None) -> State:
    """Decode JSON text into a State.

    Raises StorageDecodeError when the text is not JSON or does not match the
    document schema. No logical checks are made here.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageDecodeError(f"Not UTF-8 text: {e}", source) from e
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageDecodeError(f"Invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}", source) from e
    except RecursionError as e:
        raise StorageDecodeError("Invalid JSON: nesting too deep", source) from e

    try:
        errors = schema_errors(data)
    except RecursionError as e:
        raise StorageDecodeError("Schema validation failed: nesting too deep", source) from e
    if errors:
        raise StorageDecodeError("Schema validation failed:\n" + format_schema_errors(errors), source)

    try:
        return State.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageDecodeError(f"Unexpected document content: {e}", source) from e
