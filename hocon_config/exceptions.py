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

"""Exception hierarchy for hocon-config.

The parser is deliberately permissive: malformed lines, unset environment
variables, dangling references and missing optional includes never raise.
Only a small set of conditions surface as exceptions:

- MissingRequiredIncludeError: an `include required("...")` target is absent
- UnresolvedReferenceError: strict mode found deferred markers left behind
  after resolution (structural reference cycles)

All exceptions inherit from HoconError, allowing users to catch every
hocon-config error with a single except clause.

Example:
    Catching a missing required include:
        ```python
        from pathlib import Path
        from hocon_config import parse_file
        from hocon_config.exceptions import MissingRequiredIncludeError

        try:
            config = parse_file(Path("app.conf"))
        except MissingRequiredIncludeError as e:
            print(f"Missing include: {e.path}")
        ```
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "HoconError",
    "IncludeError",
    "MissingRequiredIncludeError",
    "UnresolvedReferenceError",
]


class HoconError(Exception):
    """Base exception for all hocon-config errors."""

    pass


class IncludeError(HoconError):
    """Raised for problems resolving `include` directives."""

    pass


class MissingRequiredIncludeError(IncludeError):
    """Raised when an `include required("...")` target does not exist.

    This error aborts the entire top-level parse, including parses of the
    documents that transitively included the missing one.

    Attributes:
        path: The resolved location that was looked up.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"required include file missing: {self.path}")


class UnresolvedReferenceError(HoconError):
    """Raised in strict mode when deferred markers survive resolution.

    Without strict mode the markers are left in the returned tree as
    Reference/Fallback instances.

    Attributes:
        paths: Dotted paths of every surviving deferred node.
    """

    def __init__(self, paths: list[str]) -> None:
        self.paths = list(paths)
        joined = ", ".join(self.paths)
        super().__init__(f"unresolved references remain at: {joined}")
