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

"""Command-line interface for hocon-config.

This module provides the main CLI entry point for the hocon-config tool,
offering commands to resolve a configuration file and print the result.

Commands:

    parse: Resolve a configuration file and print the whole document
    get: Resolve a configuration file and print the value at one path

Example:
    Print a resolved document as JSON:
        ```bash
        $ hocon-config parse conf/app.conf
        ```

    Print as YAML with an override:
        ```bash
        $ hocon-config parse conf/app.conf --set server.port=9999 --format yaml
        ```

    Read one value, with overrides from APP_* environment variables:
        ```bash
        $ APP_server_port=8081 hocon-config get conf/app.conf server.port --env-prefix APP_
        ```

    Enable debug output:
        ```bash
        $ hocon-config parse conf/app.conf --debug
        ```

Exit Codes:

- 0: Success
- 1: Error (missing file, missing required include, unresolved references
  in strict mode, or `get` of a missing path)

Note:
    The CLI uses argparse for command parsing (stdlib, zero dependencies).
    Each command has its own handler function (cmd_<command>).
    Verbose mode shows full tracebacks on errors for debugging.
    Debug mode implies verbose mode and dumps the resolved document.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
import os
from pathlib import Path
import sys
from typing import Any, Sequence

from hocon_config.core import dump_yaml, load
from hocon_config.exceptions import HoconError
from hocon_config.logging import get_logger, set_global_logger
from hocon_config.nodes import get_path
from hocon_config.overrides import OverrideEntry
from hocon_config.values import text_form


def _package_version() -> str:
    try:
        return version("hocon-config")
    except PackageNotFoundError:
        return "unknown"


def _parse_set_options(values: Sequence[str]) -> list[OverrideEntry]:
    """Split repeated `--set KEY=VALUE` options into override pairs."""
    entries: list[OverrideEntry] = []
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"invalid --set value (expected KEY=VALUE): {item}")
        entries.append((key.strip(), value))
    return entries


def _render(value: Any, output_format: str) -> str:
    if not isinstance(value, (dict, list)):
        return text_form(value)
    if output_format == "yaml":
        return dump_yaml(value).rstrip("\n")
    return json.dumps(value, indent=2, default=text_form)


def _load_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Resolve args.file with the overrides requested on the command line."""
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    config = load(
        Path(args.file),
        env_prefix=args.env_prefix or "",
        parse_env=args.env_prefix is not None,
        parse_args=False,
        overrides=_parse_set_options(args.set),
        env=os.environ,
        logger=logger,
        strict=args.strict,
    )

    if args.debug:
        logger.debug("CONFIG", "Resolved document:\n" + dump_yaml(config))
    return config


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        import traceback

        traceback.print_exc()
    return 1


def cmd_parse(args: argparse.Namespace) -> int:
    """Handler for 'hocon-config parse' command.

    Resolves the file (includes, overrides, fallbacks and references) and
    prints the full document to stdout.

    Args:
        args: Parsed command-line arguments containing the file path,
            overrides, output format and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    try:
        config = _load_from_args(args)
    except (HoconError, FileNotFoundError, argparse.ArgumentTypeError) as err:
        return _report_error(err, args)

    print(_render(config, args.format))
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Handler for 'hocon-config get' command.

    Resolves the file like 'parse' and prints only the value at args.path.
    A path that resolves to nothing (missing or null) is an error.

    Args:
        args: Parsed command-line arguments containing the file path, the
            dotted path to print, and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    try:
        config = _load_from_args(args)
    except (HoconError, FileNotFoundError, argparse.ArgumentTypeError) as err:
        return _report_error(err, args)

    value = get_path(config, args.path)
    if value is None:
        print(f"Error: path not found: {args.path}")
        return 1

    print(_render(value, args.format))
    return 0


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "file",
        help="Path to the configuration file",
    )
    subparser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a value by dotted path (repeatable; applied last)",
    )
    subparser.add_argument(
        "--env-prefix",
        default=None,
        metavar="PREFIX",
        help="Apply environment variables starting with PREFIX as overrides "
        "(PREFIXa_b=1 sets a.b; case is kept)",
    )
    subparser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format (default: json)",
    )
    subparser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if reference cycles leave unresolved values",
    )
    subparser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    subparser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="hocon-config",
        description="hocon-config - resolve HOCON-style configuration files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"hocon-config {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'parse' command
    parser_parse = subparsers.add_parser(
        "parse",
        help="Resolve a configuration file and print the document",
        description="Resolve includes, overrides, fallbacks and references, then print the result.",
    )
    _add_common_arguments(parser_parse)
    parser_parse.set_defaults(func=cmd_parse)

    # 'get' command
    parser_get = subparsers.add_parser(
        "get",
        help="Print the resolved value at a dotted path",
        description="Resolve a configuration file and print a single value.",
    )
    _add_common_arguments(parser_get)
    parser_get.add_argument(
        "path",
        help="Dotted path of the value to print (e.g. server.port)",
    )
    parser_get.set_defaults(func=cmd_get)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the hocon-config CLI.

    This function is registered as the 'hocon-config' console script in
    pyproject.toml.
    """
    parser = build_parser()

    # Parse and dispatch
    args = parser.parse_args(argv)

    # Call the appropriate command handler
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
