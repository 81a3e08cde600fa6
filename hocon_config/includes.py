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

"""Include directive handling.

Two directive forms are recognized:

- `include "other.conf"`: optional; a missing target is skipped
- `include required("other.conf")`: a missing target raises
  MissingRequiredIncludeError and aborts the whole parse

Paths are located relative to the directory of the including document.
The included document is parsed on its own: its includes, fallbacks and
references are resolved against its own root before the result is merged
into the including mapping. The top-level overrides are applied to the
included document before its references are resolved, so an included
`${port}` sees an overridden `port`.

Include cycles (a.conf includes b.conf includes a.conf) are not detected;
they recurse until Python raises RecursionError.

Documents are read through a DocumentSource so callers can parse from
something other than the local file system.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import TYPE_CHECKING, Any, Protocol

from hocon_config.exceptions import MissingRequiredIncludeError

if TYPE_CHECKING:
    from hocon_config.parser import ParseContext

__all__ = [
    "DocumentSource",
    "FileSystemSource",
    "IncludeDirective",
    "parse_include",
    "load_include",
]

_INCLUDE_REQUIRED = re.compile(r'^include\s+required\(\s*"(.+)"\s*\)$')
_INCLUDE_OPTIONAL = re.compile(r'^include\s+"(.+)"$')


class DocumentSource(Protocol):
    """Protocol for fetching documents by path."""

    def locate(self, base_dir: Path | None, name: str) -> Path:
        """Turn an include name into a path, relative to base_dir."""
        ...

    def exists(self, path: Path) -> bool:
        """Return True if a document exists at path."""
        ...

    def read(self, path: Path) -> str:
        """Return the text of the document at path."""
        ...


class FileSystemSource:
    """Reads documents from the local file system as UTF-8 text."""

    def locate(self, base_dir: Path | None, name: str) -> Path:
        return ((base_dir or Path.cwd()) / name).resolve()

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class IncludeDirective:
    """A parsed include line.

    Attributes:
        name: Path as written in the document.
        required: True for the `required("...")` form.
    """

    name: str
    required: bool


def parse_include(line: str) -> IncludeDirective | None:
    """Recognize an include directive.

    Returns:
        The directive, or None if line is not an include.
    """
    match = _INCLUDE_REQUIRED.match(line)
    if match:
        return IncludeDirective(match.group(1), required=True)
    match = _INCLUDE_OPTIONAL.match(line)
    if match:
        return IncludeDirective(match.group(1), required=False)
    return None


def load_include(directive: IncludeDirective, ctx: ParseContext) -> dict[str, Any] | None:
    """Load and fully resolve an included document.

    Args:
        directive: The include to load.
        ctx: Context of the including document.

    Returns:
        The resolved mapping, or None when an optional include is missing.

    Raises:
        MissingRequiredIncludeError: If a required include is missing.
    """
    from hocon_config.core import parse_document

    path = ctx.source.locate(ctx.base_dir, directive.name)
    if not ctx.source.exists(path):
        if directive.required:
            raise MissingRequiredIncludeError(path)
        ctx.logger.debug("INCLUDE", f"Optional include missing => skip => {path}")
        return None

    ctx.logger.verbose("INCLUDE", f"Loading: {path}")
    return parse_document(
        ctx.source.read(path),
        base_dir=path.parent,
        env=ctx.env,
        source=ctx.source,
        logger=ctx.logger,
        overrides=ctx.overrides,
    )
