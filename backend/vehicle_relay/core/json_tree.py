"""JSON Tree — kind-tagged view of an upstream payload and tolerant key lookup.

Invariants:
    - Numbers keep the exact text they had in the document (JsonNumber)
    - Only strings, numbers and booleans produce a value; arrays, objects and
      null count as "not found" for the key that holds them
    - lookup() never raises for a well-formed tree; a miss returns None

Lookup tiers (first hit wins, each tier tried across all candidate keys):
    1. exact key at the top level
    2. case-insensitive key at the top level
    3. one level into each nested object, in document order: exact key,
       then case-insensitive
"""

import json
from enum import Enum
from typing import Any


class JsonKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


class JsonNumber(str):
    """A JSON number held as its source text ("2021", "349.0", "1e3")."""

    def __repr__(self) -> str:
        return f"JsonNumber({str.__repr__(self)})"


def _reject_constant(name: str):
    raise ValueError(f"'{name}' is not valid JSON")


def parse_json(text: str) -> Any:
    """Parse text into a tree of dict/list/str/JsonNumber/bool/None.

    Raises ValueError (json.JSONDecodeError included) on invalid input.
    """
    return json.loads(
        text,
        parse_int=JsonNumber,
        parse_float=JsonNumber,
        parse_constant=_reject_constant,
    )


def kind_of(value: Any) -> JsonKind:
    if isinstance(value, JsonNumber):
        return JsonKind.NUMBER
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    if value is None:
        return JsonKind.NULL
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def as_text(value: Any) -> str | None:
    """Coerce a scalar node to text; None for array/object/null."""
    kind = kind_of(value)
    if kind is JsonKind.STRING or kind is JsonKind.NUMBER:
        return str(value)
    if kind is JsonKind.BOOLEAN:
        return "True" if value else "False"
    return None


def _exact(node: dict, keys: tuple[str, ...]) -> str | None:
    for key in keys:
        if key in node:
            text = as_text(node[key])
            if text is not None:
                return text
    return None


def _case_insensitive(node: dict, keys: tuple[str, ...]) -> str | None:
    folded = [key.casefold() for key in keys]
    for name, value in node.items():
        if name.casefold() in folded:
            text = as_text(value)
            if text is not None:
                return text
    return None


def lookup(tree: dict, *keys: str) -> str | None:
    """Find the first scalar value under any of `keys` using the three tiers."""
    found = _exact(tree, keys)
    if found is not None:
        return found
    found = _case_insensitive(tree, keys)
    if found is not None:
        return found
    for value in tree.values():
        if kind_of(value) is not JsonKind.OBJECT:
            continue
        found = _exact(value, keys)
        if found is None:
            found = _case_insensitive(value, keys)
        if found is not None:
            return found
    return None
