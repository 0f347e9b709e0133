"""Merge helpers for partial updates of editor documents.

Two flavours are used, one per field group:

* Website settings are nested (``colors``, ``fonts``, ``globalStyles``) and use
  ``deep_merge``: a partial update touching ``colors.primary`` keeps every other
  color and every font.
* Pages and elements use ``shallow_merge``: a top-level key in the update
  replaces the stored value as a whole. Element ``content`` is therefore
  replaced, never merged, which keeps edits predictable for undo.
"""
import copy
from typing import Any, Dict, Iterable, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; lists and scalars replace the base
    value; keys whose override value is ``None`` are ignored. Neither input is
    modified.

    Args:
        base: The current values
        override: The partial update

    Returns:
        A new dict holding the merged values
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def shallow_merge(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    exclude: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Replace top-level keys of ``base`` with those of ``override``.

    Args:
        base: The current values
        override: The partial update
        exclude: Keys that may never be overwritten (identity fields)

    Returns:
        A new dict holding the merged values
    """
    blocked = set(exclude)
    merged = dict(base)
    for key, value in override.items():
        if key in blocked:
            continue
        merged[key] = copy.deepcopy(value)
    return merged
