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

"""Quote-aware character scanning helpers.

Every stage of the parser needs to answer questions like "where does this
comment start" or "which `=` separates key from value" without being fooled
by delimiters inside quoted text. This module keeps that scanning logic in
one place.

Quoting rules:

- `\"\"\"...\"\"\"` is a triple-quoted region; a backslash escapes the next
  character (the preprocessor encodes bodies that way)
- `"..."` and `'...'` run to the next identical quote character
- An unterminated quote runs to the end of the text

Bracket groups `[...]` and brace groups `{...}` share one depth counter, so
`[${a}, {b = 1}]` is a single group.
"""

from __future__ import annotations

QUOTES = "\"'"
TRIPLE_QUOTE = '"""'
OPENERS = "[{"
CLOSERS = "]}"


def skip_quoted(text: str, start: int) -> int:
    """Return the index just past the quoted region starting at `start`.

    Args:
        text: Text being scanned.
        start: Index of the opening quote character.

    Returns:
        Index after the closing quote, or len(text) if it is unterminated.
    """
    if text.startswith(TRIPLE_QUOTE, start):
        # Preprocessed bodies escape their quotes with backslashes
        i = start + 3
        while i < len(text):
            if text[i] == "\\":
                i += 2
            elif text.startswith(TRIPLE_QUOTE, i):
                return i + 3
            else:
                i += 1
        return len(text)
    end = text.find(text[start], start + 1)
    return len(text) if end < 0 else end + 1


def skip_substitution(text: str, start: int) -> int:
    """Return the index just past a `${...}` substitution starting at `start`."""
    end = text.find("}", start + 2)
    return len(text) if end < 0 else end + 1


def find_group_end(text: str, start: int) -> int:
    """Return the index just past the group opened at `start`, or -1.

    Args:
        text: Text being scanned.
        start: Index of a `[` or `{` character.

    Returns:
        Index after the matching closer, or -1 if the group never closes.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i = skip_quoted(text, i)
            continue
        if ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return -1


def match_group(text: str, start: int) -> int:
    """Like find_group_end, but an unclosed group runs to the end of text."""
    end = find_group_end(text, start)
    return len(text) if end < 0 else end


def strip_comment(line: str) -> str:
    """Remove an end-of-line comment.

    `#` outside quotes always starts a comment. `//` outside quotes starts
    one only at the beginning of the line or after whitespace, so unquoted
    URLs such as `http://host` keep their slashes.
    """
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch in QUOTES:
            i = skip_quoted(line, i)
            continue
        if ch == "#":
            return line[:i]
        if ch == "/" and line.startswith("//", i) and (i == 0 or line[i - 1].isspace()):
            return line[:i]
        i += 1
    return line


def bracket_depth(text: str) -> int:
    """Return the net `[`/`]` depth of text, ignoring quoted regions."""
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i = skip_quoted(text, i)
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        i += 1
    return depth


def find_operator(line: str) -> tuple[int, str] | None:
    """Locate the first top-level block or assignment operator.

    Args:
        line: A logical line with comments already stripped.

    Returns:
        (index, operator) where operator is one of "{", "=", ":", "+=",
        or None when the line holds no operator outside quotes.
    """
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch in QUOTES:
            i = skip_quoted(line, i)
            continue
        if ch == "{":
            return i, "{"
        if ch == "=":
            if i > 0 and line[i - 1] == "+":
                return i - 1, "+="
            return i, "="
        if ch == ":":
            return i, ":"
        i += 1
    return None


def count_groups(text: str) -> int:
    """Count top-level `[...]` and `{...}` groups.

    Quoted text and `${...}` substitutions are not groups.
    """
    count = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i = skip_quoted(text, i)
        elif text.startswith("${", i):
            i = skip_substitution(text, i)
        elif ch in OPENERS:
            count += 1
            i = match_group(text, i)
        else:
            i += 1
    return count


def is_single_group(text: str, opener: str) -> bool:
    """Return True when text is exactly one group opened by `opener`."""
    return text.startswith(opener) and find_group_end(text, 0) == len(text)


def tokenize(text: str) -> list[str]:
    """Split a value into tokens.

    Tokens are bracket/brace groups, `${...}` substitutions, quoted strings
    (kept with their quotes) and bare words. Whitespace separates tokens
    and is discarded.

    Example:
        >>> tokenize('${?PORT} or "8080"')
        ['${?PORT}', 'or', '"8080"']
    """
    tokens: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch in OPENERS:
            end = match_group(text, i)
        elif text.startswith("${", i):
            end = skip_substitution(text, i)
        elif ch in QUOTES:
            end = skip_quoted(text, i)
        elif ch in CLOSERS:
            # Stray closer; keep it so the scan always advances
            end = i + 1
        else:
            end = i
            while end < n:
                c = text[end]
                if c.isspace() or c in OPENERS or c in CLOSERS or c in QUOTES:
                    break
                if text.startswith("${", end):
                    break
                end += 1
        tokens.append(text[i:end].strip())
        i = end
    return [t for t in tokens if t]


def split_items(text: str, separators: str) -> list[str]:
    """Split text on top-level separator characters.

    Separators inside quotes or inside nested groups are ignored. Empty
    items are dropped.

    Args:
        text: Text to split, e.g. the interior of an array literal.
        separators: Characters that separate items (e.g. ", \\t\\n").

    Returns:
        Stripped, non-empty items in order.
    """
    items: list[str] = []
    depth = 0
    start = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i = skip_quoted(text, i)
            continue
        if ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0 and ch in separators:
            items.append(text[start:i])
            start = i + 1
        i += 1
    items.append(text[start:])
    return [item.strip() for item in items if item.strip()]
