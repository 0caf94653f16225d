# Copyright 2026 Google LLC
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
#
# SPDX-License-Identifier: Apache-2.0

"""Categorized change entries of a single release."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from changelogkit.errors import E, ParseError


class ChangeKind(str, Enum):
    """The six change categories, in display order."""

    ADDED = 'Added'
    CHANGED = 'Changed'
    DEPRECATED = 'Deprecated'
    REMOVED = 'Removed'
    FIXED = 'Fixed'
    SECURITY = 'Security'

    @classmethod
    def parse(cls, text: str, *, line: int | None = None) -> ChangeKind:
        """Look up a kind by name, ignoring case and surrounding whitespace.

        Raises:
            ParseError: If ``text`` names no known kind.
        """
        wanted = text.strip().lower()
        for kind in cls:
            if kind.value.lower() == wanted:
                return kind
        raise ParseError(
            code=E.PARSE_UNKNOWN_CHANGE_KIND,
            message=f'Unknown change kind {text!r}',
            hint='Use one of: ' + ', '.join(k.value for k in cls),
            line=line,
        )


@dataclass
class Changes:
    """Free-text entries grouped by :class:`ChangeKind`.

    Entries keep their encounter order. A multi-line entry is stored with
    its continuation lines unindented.
    """

    added: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    deprecated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    fixed: list[str] = field(default_factory=list)
    security: list[str] = field(default_factory=list)

    def get(self, kind: ChangeKind) -> list[str]:
        """Return the (mutable) entry list for ``kind``."""
        return getattr(self, kind.name.lower())

    def add(self, kind: ChangeKind, text: str) -> None:
        """Append one entry to the list for ``kind``."""
        self.get(kind).append(text)

    def items(self) -> Iterator[tuple[ChangeKind, list[str]]]:
        """Yield ``(kind, entries)`` for non-empty kinds in display order."""
        for kind in ChangeKind:
            entries = self.get(kind)
            if entries:
                yield kind, entries

    def is_empty(self) -> bool:
        """Whether no kind has any entry."""
        return not any(self.get(kind) for kind in ChangeKind)

    def clear(self) -> None:
        """Remove every entry of every kind."""
        for kind in ChangeKind:
            self.get(kind).clear()

    def __len__(self) -> int:
        return sum(len(self.get(kind)) for kind in ChangeKind)


__all__ = [
    'ChangeKind',
    'Changes',
]
