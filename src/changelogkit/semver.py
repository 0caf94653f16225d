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

"""Semantic versions as defined by https://semver.org.

Parsing is strict: ``1.2``, ``v1.2.3`` and ``01.2.3`` are rejected.
Comparison follows semver precedence, so ``1.0.0-rc.1 < 1.0.0`` and
build metadata is ignored when ordering (but not for equality).

Usage::

    >>> SemVer.parse('1.2.3-rc.1+build.5')
    SemVer(major=1, minor=2, patch=3, prerelease=('rc', '1'), build=('build', '5'))
    >>> str(SemVer.parse('1.2.3-rc.1'))
    '1.2.3-rc.1'
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from changelogkit.errors import E, ChangelogKitError

# Official regex from semver.org, with named groups.
_SEMVER_RE = re.compile(
    r'^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)'
    r'(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)'
    r'(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?'
    r'(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$'
)


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    """Sort key for one prerelease identifier (numeric < alphanumeric)."""
    if identifier.isdigit():
        return (0, int(identifier), '')
    return (1, 0, identifier)


@functools.total_ordering
@dataclass(frozen=True)
class SemVer:
    """An immutable semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated prerelease identifiers (``('rc', '1')``).
        build: Dot-separated build metadata identifiers.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SemVer:
        """Parse a version string.

        Raises:
            ChangelogKitError: If ``text`` is not a valid semantic version.
        """
        m = _SEMVER_RE.match(text)
        if m is None:
            raise ChangelogKitError(
                code=E.VERSION_INVALID,
                message=f'{text!r} is not a valid semantic version',
                hint='Use a version string like "1.2.3" or "1.2.3-rc.1".',
            )
        prerelease = m.group('prerelease')
        build = m.group('build')
        return cls(
            major=int(m.group('major')),
            minor=int(m.group('minor')),
            patch=int(m.group('patch')),
            prerelease=tuple(prerelease.split('.')) if prerelease else (),
            build=tuple(build.split('.')) if build else (),
        )

    @classmethod
    def try_parse(cls, text: str) -> SemVer | None:
        """Like :meth:`parse`, but return ``None`` instead of raising."""
        try:
            return cls.parse(text)
        except ChangelogKitError:
            return None

    def _precedence(self) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
        # A release sorts after all of its prereleases.
        return (
            self.major,
            self.minor,
            self.patch,
            0 if self.prerelease else 1,
            tuple(_identifier_key(i) for i in self.prerelease),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __str__(self) -> str:
        text = f'{self.major}.{self.minor}.{self.patch}'
        if self.prerelease:
            text += '-' + '.'.join(self.prerelease)
        if self.build:
            text += '+' + '.'.join(self.build)
        return text


__all__ = [
    'SemVer',
]
