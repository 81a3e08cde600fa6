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

"""Configuration tree node types and path helpers.

A parsed document is plain Python data: dict, list, str, int, float, bool
and None. Two extra node kinds exist only while a document is being built:

- Reference: a `${path}` pointer, resolved after parsing
- Fallback: an `X or Y` expression, resolved after overrides are applied

None doubles as the absent-or-null sentinel: a missing key, an unset
environment variable and an explicit `null` are treated alike by the
merge and skip rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from hocon_config.lexer import QUOTES, skip_quoted

__all__ = [
    "Reference",
    "Fallback",
    "ConfigNode",
    "is_deferred",
    "split_path",
    "get_path",
    "set_path",
    "find_deferred",
]


@dataclass(frozen=True)
class Reference:
    """Deferred pointer to another value in the same document.

    Attributes:
        path: Dotted path of the target, e.g. "database.host".
    """

    path: str


@dataclass(frozen=True)
class Fallback:
    """Deferred `main or fallback` expression.

    Attributes:
        main: Preferred value; may itself be deferred.
        fallback: Used when main resolves to None.
    """

    main: Any
    fallback: Any


ConfigNode = Union[dict, list, str, int, float, bool, None, Reference, Fallback]


def is_deferred(value: Any) -> bool:
    """Return True for Reference and Fallback nodes."""
    return isinstance(value, (Reference, Fallback))


def split_path(dotted: str) -> list[str]:
    """Split a dotted key into segments.

    Quoted segments keep their dots and lose their quotes. Empty segments
    are dropped, so "a..b" equals "a.b".

    Example:
        >>> split_path('server."host.name".port')
        ['server', 'host.name', 'port']
    """
    parts: list[str] = []
    current = ""
    i = 0
    n = len(dotted)
    while i < n:
        ch = dotted[i]
        if ch in QUOTES:
            end = skip_quoted(dotted, i)
            closed = end - i >= 2 and dotted[end - 1] == ch
            current += dotted[i + 1 : end - 1 if closed else end]
            i = end
            continue
        if ch == ".":
            parts.append(current)
            current = ""
        else:
            current += ch
        i += 1
    parts.append(current)
    return [p.strip() for p in parts if p.strip()]


def get_path(root: Any, dotted: str) -> Any:
    """Look up a dotted path.

    Numeric segments index into lists, so "servers.0.host" works.

    Returns:
        The value found, or None if any segment is missing.
    """
    current = root
    for part in split_path(dotted):
        if isinstance(current, dict):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def set_path(root: dict[str, Any], dotted: str, value: Any) -> None:
    """Assign value at a dotted path, creating intermediate mappings.

    An intermediate segment holding a non-dict value is replaced by a new
    empty dict. Modifies root in place.
    """
    parts = split_path(dotted)
    if not parts:
        return
    current = root
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def find_deferred(tree: Any) -> list[str]:
    """Return dotted paths of every Reference/Fallback left in tree.

    Containers reached twice (shared or cyclic) are only visited once.
    """
    found: list[str] = []
    seen: set[int] = set()

    def walk(node: Any, path: str) -> None:
        if is_deferred(node):
            found.append(path or "<root>")
            return
        if isinstance(node, (dict, list)):
            if id(node) in seen:
                return
            seen.add(id(node))
            items = node.items() if isinstance(node, dict) else enumerate(node)
            for key, child in items:
                walk(child, f"{path}.{key}" if path else str(key))

    walk(tree, "")
    return found
