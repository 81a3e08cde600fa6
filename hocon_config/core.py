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

"""Core orchestration for hocon-config.

This module wires the parser stages together:

1. Preprocess raw text into logical lines
2. Parse blocks into a mapping (resolving includes as they appear)
3. Apply overrides (full replace, last wins)
4. Resolve `X or Y` fallbacks
5. Resolve `${path}` references

Entry points:

- parse_string: parse text already in memory
- parse_file: read a document and parse it
- load: parse_file plus overrides gathered from the environment and the
  command line

Every call is self-contained: the environment and the file system are read
at call time and nothing is cached between calls.

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from hocon_config.core import parse_file

        config = parse_file(
            Path("conf/app.conf"),
            overrides=[("server.port", "9999")],
        )
        print(config["server"]["port"])  # "9999"
        ```

"""

from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import Any, Mapping, Sequence

import yaml

from hocon_config.exceptions import UnresolvedReferenceError
from hocon_config.includes import DocumentSource, FileSystemSource
from hocon_config.logging import Logger, get_global_logger
from hocon_config.nodes import Fallback, Reference, find_deferred
from hocon_config.overrides import (
    Overrides,
    apply_overrides,
    argv_overrides,
    collect_overrides,
    env_overrides,
    normalize_overrides,
)
from hocon_config.parser import BlockParser, ParseContext
from hocon_config.preprocess import preprocess
from hocon_config.resolver import resolve_fallbacks, resolve_references
from hocon_config.values import text_form

__all__ = ["parse_document", "parse_string", "parse_file", "load", "dump_yaml"]


class _ConfigDumper(yaml.SafeDumper):
    """SafeDumper that renders leaked Reference/Fallback markers as text."""


def _represent_deferred(dumper: yaml.SafeDumper, data: Any) -> yaml.Node:
    return dumper.represent_str(text_form(data))


_ConfigDumper.add_representer(Reference, _represent_deferred)
_ConfigDumper.add_representer(Fallback, _represent_deferred)


def parse_document(
    text: str,
    *,
    base_dir: Path | None,
    env: Mapping[str, str],
    source: DocumentSource,
    logger: Logger,
    overrides: Overrides = None,
) -> dict[str, Any]:
    """Run the full pipeline on one document.

    This is the shared worker behind parse_string and include loading.
    All collaborators are explicit; no defaults are filled in. Overrides
    are carried into included documents as well, so an included
    `${path}` sees the overridden value.
    """
    entries = normalize_overrides(overrides)
    ctx = ParseContext(
        base_dir=base_dir,
        env=env,
        source=source,
        logger=logger,
        overrides=tuple(entries),
    )

    lines = preprocess(text)
    logger.debug("PARSE", f"Preprocessed into {len(lines)} logical line(s)")

    root = BlockParser(lines, ctx).parse()

    if entries:
        apply_overrides(root, entries, logger)

    root = resolve_fallbacks(root, logger)
    resolve_references(root, logger)
    return root


def parse_string(
    text: str,
    base_dir: Path | str | None = None,
    *,
    overrides: Overrides = None,
    env: Mapping[str, str] | None = None,
    source: DocumentSource | None = None,
    logger: Logger | None = None,
    strict: bool = False,
) -> dict[str, Any]:
    """Parse configuration text.

    Args:
        text: Document text.
        base_dir: Directory includes are resolved against. Defaults to the
            current directory.
        overrides: Ordered `(dotted_path, value)` pairs or a mapping,
            applied after parsing with last-wins replace semantics.
        env: Environment for `?NAME` lookups. Defaults to os.environ.
        source: Document source for includes. Defaults to the file system.
        logger: Logger for progress messages. Defaults to the global logger.
        strict: If True, raise instead of returning a tree that still holds
            unresolved Reference/Fallback markers.

    Returns:
        The resolved configuration as plain dicts, lists and scalars.

    Raises:
        MissingRequiredIncludeError: If a required include is missing.
        UnresolvedReferenceError: In strict mode, if reference cycles left
            deferred markers in the result.

    Example:
        >>> parse_string("a = 2.0\\nb = 2.5\\nc = \\"42\\"", env={})
        {'a': '2.0', 'b': 2.5, 'c': '42'}
    """
    if logger is None:
        logger = get_global_logger()

    result = parse_document(
        text,
        base_dir=Path(base_dir) if base_dir is not None else None,
        env=os.environ if env is None else env,
        source=source or FileSystemSource(),
        logger=logger,
        overrides=overrides,
    )

    leftovers = find_deferred(result)
    if leftovers:
        logger.verbose("CONFIG", f"Unresolved markers remain at: {', '.join(leftovers)}")
        if strict:
            raise UnresolvedReferenceError(leftovers)

    return result


def parse_file(
    path: Path | str,
    *,
    overrides: Overrides = None,
    env: Mapping[str, str] | None = None,
    source: DocumentSource | None = None,
    logger: Logger | None = None,
    strict: bool = False,
) -> dict[str, Any]:
    """Read and parse a configuration file.

    Includes are resolved relative to the file's directory. See
    parse_string for the meaning of the keyword arguments.

    Raises:
        FileNotFoundError: If the file does not exist.
        MissingRequiredIncludeError: If a required include is missing.
    """
    if logger is None:
        logger = get_global_logger()
    if source is None:
        source = FileSystemSource()

    resolved = source.locate(None, str(path))
    if not source.exists(resolved):
        raise FileNotFoundError(f"file not found: {resolved}")

    logger.verbose("CONFIG", f"Loading: {resolved}")
    return parse_string(
        source.read(resolved),
        resolved.parent,
        overrides=overrides,
        env=env,
        source=source,
        logger=logger,
        strict=strict,
    )


def load(
    path: Path | str,
    *,
    env_prefix: str = "",
    parse_env: bool = True,
    parse_args: bool = True,
    argv: Sequence[str] | None = None,
    overrides: Overrides = None,
    env: Mapping[str, str] | None = None,
    source: DocumentSource | None = None,
    logger: Logger | None = None,
    strict: bool = False,
) -> dict[str, Any]:
    """Parse a file with overrides from the environment and command line.

    Override precedence, lowest to highest: environment variables, then
    `--dotted.key=value` arguments, then the overrides argument.

    Args:
        path: Configuration file.
        env_prefix: Only environment variables with this prefix become
            overrides; the prefix is stripped. Empty means all variables.
        parse_env: Collect overrides from the environment.
        parse_args: Collect overrides from command-line arguments.
        argv: Arguments to scan. Defaults to sys.argv[1:].
        overrides: Programmatic overrides, applied last.
        env: Environment mapping. Defaults to os.environ.
        source: Document source. Defaults to the file system.
        logger: Logger for progress messages.
        strict: See parse_string.

    Returns:
        The resolved configuration.
    """
    environ = os.environ if env is None else env

    entries = collect_overrides(
        env=env_overrides(environ, env_prefix) if parse_env else (),
        argv=argv_overrides(sys.argv[1:] if argv is None else argv) if parse_args else (),
        overrides=overrides,
    )

    return parse_file(
        path,
        overrides=entries,
        env=environ,
        source=source,
        logger=logger,
        strict=strict,
    )


def dump_yaml(config: Any) -> str:
    """Render a resolved configuration as YAML, preserving key order.

    Deferred markers left by reference cycles are rendered as their
    `${path}` text.
    """
    return yaml.dump(config, Dumper=_ConfigDumper, default_flow_style=False, sort_keys=False)
