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

"""Recursive-descent block parser.

The parser consumes logical lines (see preprocess) with one forward-only
cursor shared by every nested block. Each line is matched against these
forms, in priority order:

1. `}` -> closes the current block
2. `include "file"` / `include required("file")`
3. `key { body }` on a single line
4. `key {` (or `key = {`) opening a multi-line block
5. `key += value`
6. `key = value` / `key: value`

Anything else is skipped silently. Keys may be dotted (`a.b.c = 1`), which
creates the intermediate mappings.

Inline bodies (`{ ... }` on one line) separate their fields with commas as
well as newlines, so `point { x = 1, y = 2 }` defines two keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from hocon_config.includes import load_include, parse_include
from hocon_config.lexer import find_operator, split_items, strip_comment
from hocon_config.logging import Logger
from hocon_config.merge import append_into, assign_into, merge_into
from hocon_config.overrides import OverrideEntry
from hocon_config.preprocess import preprocess
from hocon_config.values import resolve_value

if TYPE_CHECKING:
    from hocon_config.includes import DocumentSource

__all__ = ["ParseContext", "BlockParser", "clean_lines"]


@dataclass(frozen=True)
class ParseContext:
    """Inputs shared by every stage of one parse invocation.

    Attributes:
        base_dir: Directory of the document being parsed; includes are
            located relative to it. None means the current directory.
        env: Environment used for `?NAME` and `${?NAME}` lookups.
        source: Where included documents are read from.
        logger: Destination for verbose/debug messages.
        overrides: Override pairs of the top-level call. Included documents
            apply them before their own reference pass.
    """

    base_dir: Path | None
    env: Mapping[str, str]
    source: DocumentSource
    logger: Logger
    overrides: tuple[OverrideEntry, ...] = ()

    def parse_body(self, text: str) -> dict[str, Any]:
        """Parse the interior of an inline `{ ... }` group into a mapping."""
        lines: list[str] = []
        for line in preprocess(text):
            lines.extend(split_items(strip_comment(line), ",\n"))
        return BlockParser(lines, self).parse()


def clean_lines(lines: list[str]) -> list[str]:
    """Strip comments and whitespace and drop blank lines."""
    cleaned = []
    for line in lines:
        content = strip_comment(line).strip()
        if content:
            cleaned.append(content)
    return cleaned


class BlockParser:
    """Builds a mapping from logical lines.

    Example:
        ```python
        parser = BlockParser(preprocess(text), ctx)
        tree = parser.parse()
        ```
    """

    def __init__(self, lines: list[str], ctx: ParseContext) -> None:
        self._lines = clean_lines(lines)
        self._pos = 0
        self._ctx = ctx

    def parse(self) -> dict[str, Any]:
        """Parse every line into a new mapping.

        Returns:
            The document mapping. It may still hold Reference and Fallback
            nodes; resolution happens later.
        """
        root: dict[str, Any] = {}
        while self._pos < len(self._lines):
            self._parse_block(root)
            if self._pos < len(self._lines):
                self._ctx.logger.debug("PARSE", "Unmatched '}' at document level, skipping")
                self._pos += 1
        return root

    def _parse_block(self, mapping: dict[str, Any]) -> None:
        """Consume lines into mapping until a closing brace or end of input.

        The closing brace itself is left for the caller to consume.
        """
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            if line.startswith("}"):
                return
            self._pos += 1
            self._parse_line(line, mapping)

    def _parse_child_block(self) -> dict[str, Any]:
        child: dict[str, Any] = {}
        self._parse_block(child)
        if self._pos < len(self._lines) and self._lines[self._pos].startswith("}"):
            self._pos += 1
        return child

    def _parse_line(self, line: str, mapping: dict[str, Any]) -> None:
        ctx = self._ctx

        directive = parse_include(line)
        if directive is not None:
            included = load_include(directive, ctx)
            if included is not None:
                merge_into(mapping, included, ctx.logger)
            return

        found = find_operator(line)
        if found is None:
            ctx.logger.debug("PARSE", f"No pattern matched, skipping line => {line}")
            return

        index, operator = found
        key = line[:index].strip()
        rest = line[index + len(operator) :].strip()
        if not key:
            ctx.logger.debug("PARSE", f"Missing key, skipping line => {line}")
            return

        if operator == "{" or (operator in ("=", ":") and rest == "{"):
            if operator == "{" and rest:
                if not rest.endswith("}"):
                    ctx.logger.debug("PARSE", f"Unclosed inline block, skipping line => {line}")
                    return
                child = ctx.parse_body(rest[:-1])
            else:
                child = self._parse_child_block()
            assign_into(mapping, key, child, ctx.logger)
            return

        if not rest:
            ctx.logger.debug("PARSE", f"Missing value, skipping line => {line}")
            return

        value = resolve_value(rest, ctx, scope=mapping)
        if operator == "+=":
            append_into(mapping, key, value, ctx.logger)
        else:
            assign_into(mapping, key, value, ctx.logger)
