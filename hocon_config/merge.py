# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Merge algebra for configuration trees.

Three operations combine an existing value with a new one:

- merge_into: deep merge of one mapping into another (includes, inline
  mapping concatenation, plain assignment)
- assign_into: `key = value` assignment; skips absent values, otherwise the
  merge_into rule for that single key
- append_into: `key += value`; concatenates lists and strings

Merge rules (merge_into):

- **Dicts**: Recursively merged (keys from source override target)
- **Lists**: A single-element source patches index 0 of the target list
  and leaves the rest in place; `[None]` leaves the target untouched;
  any other length replaces the target list
- **Everything else**: Source replaces target, including a dict replacing
  a scalar and vice versa

Values copied out of a source are deep copies, so later in-place edits of
the target never reach back into the source tree.

Example:
    Patch the first port, keep the others:
        ```python
        from hocon_config.merge import merge_into

        target = {"ports": [80, 443, 8080]}
        merge_into(target, {"ports": [9999]})
        # target == {"ports": [9999, 443, 8080]}
        ```
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Iterable

from hocon_config.logging import Logger, get_global_logger
from hocon_config.nodes import get_path, set_path, split_path

__all__ = ["merge_into", "merge_all", "assign_into", "append_into"]


def _merge_lists(
    target: dict[str, Any], key: str, existing: list[Any], value: list[Any], logger: Logger
) -> None:
    """Apply the single-element patch rule for a list-over-list merge."""
    if len(value) != 1:
        target[key] = deepcopy(value)
        return
    if value[0] is None:
        logger.debug("MERGE", f"[None] over list => keep old => {key}")
        return
    if existing:
        existing[0] = deepcopy(value[0])
    else:
        target[key] = deepcopy(value)


def merge_into(
    target: dict[str, Any], source: dict[str, Any], logger: Logger | None = None
) -> dict[str, Any]:
    """Deep-merge source into target, in place.

    Args:
        target: Mapping to update.
        source: Mapping whose keys win on collision.
        logger: Optional logger; defaults to the global logger.

    Returns:
        target, for chaining.
    """
    if logger is None:
        logger = get_global_logger()

    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merge_into(existing, value, logger)
        elif isinstance(existing, list) and isinstance(value, list):
            _merge_lists(target, key, existing, value, logger)
        else:
            target[key] = deepcopy(value)
    return target


def merge_all(trees: Iterable[dict[str, Any]], logger: Logger | None = None) -> dict[str, Any]:
    """Merge several mappings left to right into a new mapping.

    None of the inputs is modified.
    """
    result: dict[str, Any] = {}
    for tree in trees:
        merge_into(result, tree, logger)
    return result


def _parent_for(target: dict[str, Any], parts: list[str]) -> dict[str, Any]:
    """Walk to (and create) the mapping that holds the last path segment."""
    current = target
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    return current


def assign_into(
    target: dict[str, Any], dotted_key: str, value: Any, logger: Logger | None = None
) -> None:
    """Apply `dotted_key = value` to target.

    An absent (None) value never overwrites a present one, which lets
    `key = ${?UNSET_VAR}` keep an earlier default. Otherwise the value is
    merged with the merge_into rules, so assigning a mapping over a mapping
    deep-merges and assigning a one-element list patches index 0.
    """
    if logger is None:
        logger = get_global_logger()

    parts = split_path(dotted_key)
    if not parts:
        return

    existing = get_path(target, dotted_key)
    if value is None and existing is not None:
        logger.debug("MERGE", f"Skipping absent value => keep old => {dotted_key}")
        return

    parent = _parent_for(target, parts)
    merge_into(parent, {parts[-1]: value}, logger)


def append_into(
    target: dict[str, Any], dotted_key: str, value: Any, logger: Logger | None = None
) -> None:
    """Apply `dotted_key += value` to target.

    Rules:
      - key absent -> plain set
      - value absent (None or [None]) -> keep old
      - list + list -> concatenation (never a partial patch)
      - dict + dict -> merge_into
      - str + str -> string concatenation
      - anything else -> value replaces old
    """
    if logger is None:
        logger = get_global_logger()

    existing = get_path(target, dotted_key)
    if existing is None:
        set_path(target, dotted_key, value)
        return

    if value is None:
        logger.debug("MERGE", f"Skipping absent value => keep old => {dotted_key}")
        return

    if isinstance(value, list) and isinstance(existing, list):
        if len(value) == 1 and value[0] is None:
            logger.debug("MERGE", f"[None] appended => keep old => {dotted_key}")
            return
        set_path(target, dotted_key, existing + value)
    elif isinstance(value, dict) and isinstance(existing, dict):
        merge_into(existing, value, logger)
    elif isinstance(value, str) and isinstance(existing, str):
        set_path(target, dotted_key, existing + value)
    else:
        set_path(target, dotted_key, value)
