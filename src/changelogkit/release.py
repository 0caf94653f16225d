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

"""A single changelog entry: one ``## [x.y.z] - YYYY-MM-DD`` section."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

from changelogkit.changes import Changes
from changelogkit.semver import SemVer


@dataclass
class Release:
    """One release of the project, or the pending ``[Unreleased]`` section.

    Equality is structural. Ordering (``<``) looks at :attr:`date`, with a
    missing date sorting before every real date, and breaks ties on the
    same day by :attr:`version`.

    Attributes:
        version: Released version, ``None`` for the Unreleased section.
        date: Release date, ``None`` for the Unreleased section.
        yanked: Whether the heading carries ``[YANKED]``.
        description: Free text between the heading and the first change kind.
        changes: Categorized change entries.
    """

    version: SemVer | None = None
    date: datetime.date | None = None
    yanked: bool = False
    description: str | None = None
    changes: Changes = field(default_factory=Changes)

    @property
    def is_unreleased(self) -> bool:
        """Whether this is the pending section (no version and no date)."""
        return self.version is None and self.date is None

    @property
    def is_released(self) -> bool:
        """Whether both a version and a date are present."""
        return self.version is not None and self.date is not None

    def _date_key(self) -> datetime.date:
        return self.date or datetime.date.min

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Release):
            return NotImplemented
        if self._date_key() != other._date_key():
            return self._date_key() < other._date_key()
        # Same day: a missing version sorts lowest.
        if self.version is None or other.version is None:
            return self.version is None and other.version is not None
        return self.version < other.version


__all__ = [
    'Release',
]
