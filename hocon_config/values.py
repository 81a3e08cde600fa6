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

"""Value resolution: raw value text to typed configuration nodes.

A value is everything to the right of `=`, `:` or `+=`. It resolves to one
of:

- a list, for a single `[...]` group
- a dict, for a single `{...}` group (parsed with the block grammar)
- a Fallback, for `X or Y`
- a concatenation of several groups or words
- a single scalar token

Scalar tokens are resolved in this order:

1. `\"\"\"...\"\"\"` -> str with escapes decoded, never coerced
2. one layer of `"..."` or `'...'` is stripped; quoted text stays a str
3. `?NAME` / `${?NAME}` -> environment lookup (None when unset)
4. `${path}` -> Reference, resolved after parsing
5. typed coercion: true/false, null, integers and decimals

An integral decimal such as `2.0` is kept as the string "2.0" rather than
collapsing to the integer 2.
"""

from __future__ import annotations

from copy import deepcopy
import json
import re
from typing import TYPE_CHECKING, Any, Mapping

from hocon_config.lexer import QUOTES, TRIPLE_QUOTE, count_groups, is_single_group, split_items, tokenize
from hocon_config.merge import merge_all
from hocon_config.nodes import Fallback, Reference, get_path
from hocon_config.preprocess import decode_multiline

if TYPE_CHECKING:
    from hocon_config.parser import ParseContext

__all__ = [
    "coerce_literal",
    "strip_quotes",
    "lookup_env",
    "resolve_token",
    "resolve_value",
    "text_form",
]

_ENV_SHORT = re.compile(r"^\?(\w+)$")
_ENV_SUBST = re.compile(r"^\$\{\?(\w+)\}$")
_REFERENCE = re.compile(r"^\$\{([\w.\-]+)\}$")
_NUMBER = re.compile(r"^[+-]?\d+(\.\d+)?$")

_ARRAY_SEPARATORS = ", \t\n"


def coerce_literal(text: str) -> Any:
    """Convert bare text to bool, None, int, float or str.

    Example:
        >>> coerce_literal("TRUE"), coerce_literal("2.5"), coerce_literal("2.0")
        (True, 2.5, '2.0')
    """
    raw = text.strip()
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _NUMBER.match(raw):
        if "." not in raw:
            return int(raw)
        number = float(raw)
        if number.is_integer():
            return raw
        return number
    return raw


def strip_quotes(raw: str) -> tuple[str, bool]:
    """Remove exactly one layer of matching single or double quotes.

    Returns:
        (text, was_quoted)
    """
    if len(raw) >= 2 and raw[0] in QUOTES and raw[-1] == raw[0]:
        return raw[1:-1], True
    return raw, False


def lookup_env(name: str, env: Mapping[str, str]) -> str | None:
    """Read an environment variable, stripping one layer of quotes."""
    value = env.get(name)
    if value is None:
        return None
    return strip_quotes(value)[0]


def text_form(value: Any) -> str:
    """Render a resolved node for string concatenation.

    A Reference keeps its `${path}` text, the same form leaked markers take
    in YAML and CLI output, so `${b.c} suffix` stays `"${b.c} suffix"` when
    `b.c` is not in the local block.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Reference):
        return f"${{{value.path}}}"
    if isinstance(value, Fallback):
        return text_form(value.main)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=text_form)
    return str(value)


def _parse_array(group: str, ctx: ParseContext) -> list[Any]:
    inner = group[1:-1].strip()
    return [resolve_token(item, ctx) for item in split_items(inner, _ARRAY_SEPARATORS)]


def resolve_token(token: str, ctx: ParseContext) -> Any:
    """Resolve a single token to a typed node.

    Args:
        token: One token as produced by lexer.tokenize.
        ctx: Parse context supplying the environment and the block parser.

    Returns:
        The typed node. Environment lookups of unset variables return None.
    """
    token = token.strip()

    if is_single_group(token, "["):
        return _parse_array(token, ctx)
    if is_single_group(token, "{"):
        return ctx.parse_body(token[1:-1])

    if len(token) >= 6 and token.startswith(TRIPLE_QUOTE) and token.endswith(TRIPLE_QUOTE):
        return decode_multiline(token[3:-3])

    text, was_quoted = strip_quotes(token)

    match = _ENV_SHORT.match(text) or _ENV_SUBST.match(text)
    if match:
        name = match.group(1)
        value = lookup_env(name, ctx.env)
        if value is None:
            ctx.logger.debug("PARSE", f"Environment variable not set => {name}")
            return None
        return value if was_quoted else coerce_literal(value)

    match = _REFERENCE.match(text)
    if match:
        return Reference(match.group(1))

    if was_quoted:
        return text
    return coerce_literal(text)


def _lookup_local(value: Any, scope: dict[str, Any] | None) -> Any:
    """Swap a Reference for a copy of its target in the mapping being built."""
    if not isinstance(value, Reference) or scope is None:
        return value
    found = get_path(scope, value.path)
    if found is None:
        return value
    return deepcopy(found)


def _resolve_tokens(text: str, ctx: ParseContext, scope: dict[str, Any] | None) -> Any:
    tokens = tokenize(text)
    if not tokens:
        return ""

    if len(tokens) == 3 and tokens[1].lower() == "or":
        return Fallback(resolve_token(tokens[0], ctx), resolve_token(tokens[2], ctx))

    if len(tokens) == 1:
        return resolve_token(tokens[0], ctx)

    parsed = [_lookup_local(resolve_token(t, ctx), scope) for t in tokens]

    if all(isinstance(p, list) for p in parsed):
        return [item for p in parsed for item in p]
    if all(isinstance(p, dict) for p in parsed):
        return merge_all(parsed, ctx.logger)
    return " ".join(text_form(p) for p in parsed).strip()


def resolve_value(raw: str, ctx: ParseContext, scope: dict[str, Any] | None = None) -> Any:
    """Resolve the raw text of a value.

    Args:
        raw: Text after the assignment operator.
        ctx: Parse context.
        scope: The mapping currently being built. `${path}` tokens inside a
            multi-token value are looked up here first so they can take part
            in concatenation; misses stay deferred.

    Returns:
        A typed node, possibly a deferred Reference or Fallback.

    Example:
        `[1, 2] [3]` resolves to [1, 2, 3]; `${?PORT} or 8080` resolves to
        Fallback(<env value or None>, 8080).
    """
    value = raw.strip()
    if count_groups(value) <= 1:
        if is_single_group(value, "["):
            return _parse_array(value, ctx)
        if is_single_group(value, "{"):
            return ctx.parse_body(value[1:-1])
    return _resolve_tokens(value, ctx, scope)
