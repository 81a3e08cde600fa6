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

"""Physical-to-logical line normalization.

The block parser works one logical line at a time. Two constructs span
several physical lines and are folded here before parsing:

- Triple-quoted strings: the body is collected until the closing `\"\"\"`
  and re-emitted on one line with backslash escapes (`\\n`, `\\"`, `\\\\`).
- Multi-line arrays: a line whose `[` is left open absorbs the following
  lines (comments dropped, no separator inserted) until the bracket closes.

Unterminated constructs at end of input are accepted as-is.
"""

from __future__ import annotations

import re

from hocon_config.lexer import TRIPLE_QUOTE, bracket_depth, strip_comment

__all__ = ["preprocess", "encode_multiline", "decode_multiline"]

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_UNESCAPES = {"n": "\n", "\\": "\\", '"': '"'}


def encode_multiline(body: str) -> str:
    """Encode a triple-quoted body so it fits on a single line."""
    return body.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def decode_multiline(encoded: str) -> str:
    """Reverse encode_multiline. Unknown escapes are kept verbatim."""
    return _ESCAPE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), encoded)


def _fold_triple_quote(line: str, rest: list[str], pos: int) -> tuple[str, int]:
    """Fold a triple-quoted string starting on `line` into one logical line.

    Returns:
        The logical line and the index of the next unread physical line.
    """
    start = line.find(TRIPLE_QUOTE)
    prefix = line[:start]
    remainder = line[start + 3 :]

    close = remainder.find(TRIPLE_QUOTE)
    if close >= 0:
        body = remainder[:close]
        tail = remainder[close + 3 :]
        return f'{prefix}"""{encode_multiline(body)}"""{tail}', pos

    buffer = [remainder]
    tail = ""
    while pos < len(rest):
        physical = rest[pos]
        pos += 1
        close = physical.find(TRIPLE_QUOTE)
        if close >= 0:
            buffer.append(physical[:close])
            tail = physical[close + 3 :]
            break
        buffer.append(physical)

    body = "\n".join(buffer)
    return f'{prefix}"""{encode_multiline(body)}"""{tail}', pos


def preprocess(text: str) -> list[str]:
    """Split raw document text into logical lines.

    Args:
        text: Raw document text.

    Returns:
        Logical lines in document order. Lines are not stripped and comment
        lines are kept; the block parser filters them.

    Example:
        >>> preprocess('ports = [\\n  80,\\n  443\\n]')
        ['ports = [  80,  443]']
    """
    physical = text.replace("\r\n", "\n").split("\n")
    logical: list[str] = []
    pos = 0

    while pos < len(physical):
        line = physical[pos]
        pos += 1

        if TRIPLE_QUOTE in strip_comment(line):
            folded, pos = _fold_triple_quote(line, physical, pos)
            logical.append(folded)
            continue

        content = strip_comment(line)
        depth = bracket_depth(content)
        if depth > 0:
            merged = content
            while depth > 0 and pos < len(physical):
                piece = strip_comment(physical[pos])
                pos += 1
                merged += piece
                depth += bracket_depth(piece)
            logical.append(merged)
            continue

        logical.append(line)

    return logical
