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

"""Layered overrides applied on top of a parsed document.

An override is a `(dotted_path, value)` pair. Overrides are applied in list
order after the document (and its includes) has been parsed and before
fallbacks and references are resolved, so a `${path}` elsewhere in the
document sees the overridden value.

Unlike assignments inside a document, an override always replaces the
existing value: no merging, and None is written as-is. String values are
stored verbatim (`"9999"` stays a string).

Override Sources
----------------
1. **Environment** (env_overrides): variables, optionally filtered by a
   prefix which is stripped; `_` becomes `.` (APP_server_port with prefix
   "APP_" -> server.port; case is kept)
2. **Command line** (argv_overrides): `--dotted.key=value` arguments
3. **Programmatic**: pairs or a mapping supplied by the caller

collect_overrides orders them so command-line entries win over environment
entries and programmatic entries win over both.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Iterable, Mapping, Union

from hocon_config.logging import Logger, get_global_logger
from hocon_config.nodes import set_path

__all__ = [
    "OverrideEntry",
    "Overrides",
    "normalize_overrides",
    "apply_overrides",
    "env_overrides",
    "argv_overrides",
    "collect_overrides",
]

OverrideEntry = tuple[str, Any]
Overrides = Union[Mapping[str, Any], Iterable[OverrideEntry], None]


def normalize_overrides(overrides: Overrides) -> list[OverrideEntry]:
    """Turn a mapping, an iterable of pairs or None into a list of pairs."""
    if overrides is None:
        return []
    if isinstance(overrides, Mapping):
        return list(overrides.items())
    return [(str(path), value) for path, value in overrides]


def apply_overrides(
    root: dict[str, Any], overrides: Overrides, logger: Logger | None = None
) -> dict[str, Any]:
    """Write each override into root, last entry winning.

    Args:
        root: Document root; updated in place.
        overrides: Ordered overrides.
        logger: Optional logger; defaults to the global logger.

    Returns:
        root, for chaining.
    """
    if logger is None:
        logger = get_global_logger()

    for path, value in normalize_overrides(overrides):
        logger.verbose("OVERRIDE", f"{path} = {value!r}")
        set_path(root, path, deepcopy(value))
    return root


def env_overrides(environ: Mapping[str, str], prefix: str = "") -> list[OverrideEntry]:
    """Translate environment variables into overrides.

    Args:
        environ: Environment mapping, typically os.environ.
        prefix: Only variables starting with prefix are used; the prefix is
            removed before `_` is turned into `.`. Empty means every variable.

    Returns:
        Override pairs in environment order.
    """
    entries: list[OverrideEntry] = []
    for name, value in environ.items():
        if prefix and not name.startswith(prefix):
            continue
        path = name[len(prefix) :].replace("_", ".")
        if path.strip("."):
            entries.append((path, value))
    return entries


def argv_overrides(argv: Iterable[str]) -> list[OverrideEntry]:
    """Translate `--dotted.key=value` arguments into overrides.

    Other arguments are ignored.

    Example:
        >>> argv_overrides(["--server.port=9999", "-v", "run"])
        [('server.port', '9999')]
    """
    entries: list[OverrideEntry] = []
    for arg in argv:
        if not arg.startswith("--"):
            continue
        eq = arg.find("=")
        if eq <= 2:
            continue
        entries.append((arg[2:eq], arg[eq + 1 :]))
    return entries


def collect_overrides(
    env: Iterable[OverrideEntry] = (),
    argv: Iterable[OverrideEntry] = (),
    overrides: Overrides = None,
) -> list[OverrideEntry]:
    """Combine override sources in precedence order (last wins)."""
    return [*env, *argv, *normalize_overrides(overrides)]
