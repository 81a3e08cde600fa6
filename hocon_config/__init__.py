"""
hocon-config - HOCON-style configuration for Python

A parser and resolver for a human-oriented configuration language in the
spirit of HOCON. Documents are resolved into plain Python data: dicts,
lists, strings, numbers, booleans and None.

hocon-config provides:
  - Nested blocks, dotted keys and inline `{ ... }` mappings
  - Typed literals (true/false, null, integers, decimals)
  - Multi-line arrays and triple-quoted strings
  - Optional and required file includes
  - Environment substitution (`?NAME`, `${?NAME}`)
  - Deferred references (`${path}`) and `X or Y` fallbacks
  - Layered overrides from the environment, argv and code

Quick Start
-----------
Resolve a file and print it:

    $ hocon-config parse conf/app.conf

Read a single value:

    $ hocon-config get conf/app.conf server.port

For full CLI documentation:

    $ hocon-config --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
preprocess, lexer : modules
    Logical line assembly and quote-aware scanning.
parser, values : modules
    Block grammar and value resolution.
merge, overrides : modules
    Deep merge, append and override layering.
includes, resolver : modules
    Include loading and deferred node resolution.

Public API
----------
The library functions are the primary interface:

    from hocon_config import parse_string, parse_file, load
    from hocon_config import merge_into, merge_all
    from hocon_config import Reference, Fallback, find_deferred

For more details, see the individual module docstrings.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "HOCON-style configuration parser and resolver"

# Re-export commonly used functions for convenience
from hocon_config.core import load, parse_file, parse_string
from hocon_config.exceptions import (
    HoconError,
    IncludeError,
    MissingRequiredIncludeError,
    UnresolvedReferenceError,
)
from hocon_config.merge import append_into, assign_into, merge_all, merge_into
from hocon_config.nodes import Fallback, Reference, find_deferred, get_path

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "parse_string",
    "parse_file",
    "load",
    "merge_into",
    "merge_all",
    "assign_into",
    "append_into",
    "Reference",
    "Fallback",
    "find_deferred",
    "get_path",
    "HoconError",
    "IncludeError",
    "MissingRequiredIncludeError",
    "UnresolvedReferenceError",
]
