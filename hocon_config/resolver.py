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

"""Resolution passes for deferred nodes.

After parsing and override application a document may still contain
Fallback and Reference nodes. Two depth-first passes collapse them:

1. resolve_fallbacks: `X or Y` becomes X, or Y when X is None
2. resolve_references: `${path}` becomes a deep copy of the value at path
   in the document root, or None when the path does not exist

Both passes rewrite containers in place and track containers by identity,
so shared or self-containing structures are walked once.

Structural cycles (`a = ${b}` with `b = ${a}`, or a mapping that refers to
itself) cannot be resolved. The Reference marker is left where the cycle
was detected and the rest of the document is still resolved. Use
nodes.find_deferred, or parse with strict=True, to detect leftovers.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from hocon_config.logging import Logger, get_global_logger
from hocon_config.nodes import Fallback, Reference, get_path

__all__ = ["resolve_fallbacks", "resolve_references"]


def _rewrite_children(node: dict | list, walk) -> None:
    if isinstance(node, dict):
        for key in list(node):
            node[key] = walk(node[key])
    else:
        for index, item in enumerate(node):
            node[index] = walk(item)


def resolve_fallbacks(node: Any, logger: Logger | None = None) -> Any:
    """Replace every Fallback with its chosen operand.

    Args:
        node: Tree to resolve; containers are updated in place.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The resolved node (the same object for containers).
    """
    if logger is None:
        logger = get_global_logger()

    visited: dict[int, Any] = {}

    def walk(current: Any) -> Any:
        if isinstance(current, Fallback):
            main = walk(current.main)
            if main is None:
                logger.debug("RESOLVE", "Fallback main is absent => using fallback")
                return walk(current.fallback)
            return main
        if isinstance(current, (dict, list)):
            if id(current) in visited:
                return current
            visited[id(current)] = current
            _rewrite_children(current, walk)
        return current

    return walk(node)


def resolve_references(root: dict[str, Any], logger: Logger | None = None) -> dict[str, Any]:
    """Replace every Reference with a copy of its target.

    References are looked up against root, transitively: a target that is
    itself a reference is resolved too. A missing target resolves to None.
    Lookups see the tree as resolved so far in document order, so a path
    that passes through a key still holding a Reference (`${a.c}` ahead of
    `a = ${b}`) resolves to None.

    Args:
        root: Document root; updated in place.
        logger: Optional logger; defaults to the global logger.

    Returns:
        root, for chaining.
    """
    if logger is None:
        logger = get_global_logger()

    # Values pin the objects so their ids stay unique for the whole pass
    visited: dict[int, Any] = {}

    def walk(current: Any, active: tuple[str, ...]) -> Any:
        if isinstance(current, Reference):
            if current.path in active:
                logger.debug("RESOLVE", f"Cycle detected => leaving ${{{current.path}}} unresolved")
                return current
            target = get_path(root, current.path)
            if target is None:
                logger.debug("RESOLVE", f"Unresolved reference => None => ${{{current.path}}}")
                return None
            return walk(deepcopy(target), active + (current.path,))
        if isinstance(current, (dict, list)):
            if id(current) in visited:
                logger.debug("RESOLVE", "Container already visited => cycle => skip")
                return current
            visited[id(current)] = current
            _rewrite_children(current, lambda child: walk(child, active))
        return current

    walk(root, ())
    return root
