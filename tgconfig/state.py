"""Wizard state — the answer tree addressed by dotted keys, plus the Q/A history."""

from typing import Any, TypedDict

from tgconfig.errors import StateKeyError


class HistoryEntry(TypedDict):
    question: str  # Step title as shown to the user.
    answer: str  # Display form of the answer (option label, Yes/No, or str()).


def _split_key(key: str) -> list[str]:
    parts = key.split(".") if isinstance(key, str) else []
    if not parts or any(not part for part in parts):
        raise StateKeyError(f"Invalid state key: {key!r}")
    return parts


def set_value(state: dict, key: str, value: Any) -> None:
    """Write ``value`` at dotted ``key``, creating intermediate objects.

    Overwrites an existing leaf. Raises StateKeyError if a path segment
    already holds a non-object value.
    """
    parts = _split_key(key)
    node = state
    for i, part in enumerate(parts[:-1]):
        if part not in node:
            node[part] = {}
        elif not isinstance(node[part], dict):
            prefix = ".".join(parts[: i + 1])
            raise StateKeyError(
                f"Cannot write '{key}': '{prefix}' already holds {node[part]!r}"
            )
        node = node[part]
    node[parts[-1]] = value


def get_value(state: dict, key: str, default: Any = None) -> Any:
    """Read the value at dotted ``key``, or ``default`` if any segment is missing."""
    node: Any = state
    for part in _split_key(key):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node
