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

"""The Keep a Changelog document model.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Changelog               │ The whole file: title, intro text, every    │
    │                         │ release, the links at the bottom, footer.   │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Unreleased              │ The one release with no version and no      │
    │                         │ date. Always listed first.                  │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Cutting a release       │ Moving everything under [Unreleased] into a │
    │                         │ new, dated, versioned release.              │
    └─────────────────────────┴─────────────────────────────────────────────┘

Release order invariant::

    [Unreleased]            ← at most one, always index 0
    [1.2.0] - 2024-03-01    ┐
    [1.1.0] - 2024-02-01    ├ newest date first
    [1.0.0] - 2024-01-01    ┘ (same day: highest version first)

Usage::

    from changelogkit import parse

    changelog = parse(text)
    changelog.cut_release('1.3.0')
    print(changelog.render())
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

from changelogkit.changes import Changes
from changelogkit.errors import E, ChangelogKitError
from changelogkit.links import DEFAULT_HEAD, Link, derive_link
from changelogkit.logging import get_logger
from changelogkit.release import Release
from changelogkit.render import render_changelog
from changelogkit.semver import SemVer

logger = get_logger(__name__)


@dataclass
class Changelog:
    """A parsed (or freshly created) changelog document.

    Attributes:
        flag: Text of a leading ``<!-- ... -->`` marker comment.
        title: Text of the ``#`` heading; rendered as ``Changelog`` if unset.
        description: Intro text below the title; a standard Keep a
            Changelog blurb is rendered if unset.
        head: Ref the Unreleased section is compared against.
        footer: Text after a trailing ``---`` rule.
        url: Repository base URL used to derive compare links.
        tag_prefix: Prefix that turns a version into a tag name.
        releases: Releases, Unreleased first, then newest first.
        links: Link definitions found in the source file.
    """

    flag: str | None = None
    title: str | None = None
    description: str | None = None
    head: str = DEFAULT_HEAD
    footer: str | None = None
    url: str | None = None
    tag_prefix: str | None = None
    releases: list[Release] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Bring releases passed to the constructor into canonical order."""
        if sum(1 for r in self.releases if r.is_unreleased) > 1:
            raise ChangelogKitError(
                code=E.RELEASE_DUPLICATE_UNRELEASED,
                message='A changelog can hold only one [Unreleased] section',
            )
        self._sort_releases()

    def _sort_releases(self) -> None:
        unreleased = self.get_unreleased()
        rest = [r for r in self.releases if r is not unreleased]
        rest.sort(reverse=True)
        self.releases = [unreleased, *rest] if unreleased is not None else rest

    def add_release(self, release: Release) -> None:
        """Insert ``release`` and restore the release order.

        Raises:
            ChangelogKitError: If ``release`` is a second Unreleased section.
        """
        if release.is_unreleased and self.get_unreleased() is not None:
            raise ChangelogKitError(
                code=E.RELEASE_DUPLICATE_UNRELEASED,
                message='A changelog can hold only one [Unreleased] section',
                hint='Merge the entries into the existing [Unreleased] section.',
            )
        self.releases.append(release)
        self._sort_releases()

    def get_unreleased(self) -> Release | None:
        """Return the Unreleased section, if any. The result is live, not a copy."""
        return next((r for r in self.releases if r.is_unreleased), None)

    def find_release(self, version: str | SemVer) -> Release | None:
        """Return the release with exactly ``version``, or ``None``.

        Raises:
            ChangelogKitError: If ``version`` is not a semantic version.
        """
        wanted = SemVer.parse(version) if isinstance(version, str) else version
        return next((r for r in self.releases if r.version == wanted), None)

    def latest_release(self) -> Release | None:
        """Return the newest release that has both a version and a date."""
        return next((r for r in self.releases if r.is_released), None)

    def cut_release(self, version: str | SemVer, *, today: datetime.date | None = None) -> Release:
        """Move the Unreleased changes into a new release.

        Args:
            version: Version of the new release.
            today: Release date. Defaults to the local current date.

        Returns:
            The new release, already inserted into :attr:`releases`.

        Raises:
            ChangelogKitError: If there is no Unreleased section, it has no
                changes, ``version`` is invalid, or ``version`` already exists.
        """
        unreleased = self.get_unreleased()
        if unreleased is None:
            raise ChangelogKitError(
                code=E.RELEASE_NO_UNRELEASED,
                message='The changelog has no [Unreleased] section',
                hint='Add a "## [Unreleased]" section with the pending changes.',
            )
        if unreleased.changes.is_empty():
            raise ChangelogKitError(
                code=E.RELEASE_NO_CHANGES,
                message='The [Unreleased] section has no changes to release',
                hint='Add entries under "## [Unreleased]" before cutting a release.',
            )

        new_version = SemVer.parse(version) if isinstance(version, str) else version
        if self.find_release(new_version) is not None:
            raise ChangelogKitError(
                code=E.RELEASE_VERSION_EXISTS,
                message=f'Release [{new_version}] already exists',
                hint='Pick a version that is not in the changelog yet.',
            )

        release_date = today or datetime.date.today()
        release = Release(
            version=new_version,
            date=release_date,
            changes=unreleased.changes,
        )
        unreleased.changes = Changes()
        self.add_release(release)
        logger.info('release_cut', version=str(new_version), date=release_date.isoformat(), entries=len(release.changes))
        return release

    @property
    def authored_links(self) -> list[Link]:
        """Links from the source file that are not derivable release links."""
        return [link for link in self.links if not link.is_compare_link]

    def derived_links(self) -> list[Link]:
        """Compute the compare/release link of every release, in release order.

        Raises:
            RenderError: If a link is needed but :attr:`url` is unset.
        """
        derived: list[Link] = []
        for index in range(len(self.releases)):
            link = derive_link(self.releases, index, url=self.url, tag_prefix=self.tag_prefix, head=self.head)
            if link is not None:
                derived.append(link)
        logger.debug('links_derived', count=len(derived), url=self.url)
        return derived

    def link_mismatches(self) -> list[tuple[Link, Link | None]]:
        """Return authored release links that disagree with the derived ones.

        Each item pairs the link found in the file with the derived link of
        the same anchor (``None`` when no release produces that anchor).
        """
        derived = {link.anchor: link for link in self.derived_links()}
        mismatches: list[tuple[Link, Link | None]] = []
        for link in self.links:
            if not link.is_compare_link:
                continue
            expected = derived.get(link.anchor)
            if expected is None or expected.url != link.url:
                mismatches.append((link, expected))
        return mismatches

    def render(self) -> str:
        """Render the changelog as canonical markdown.

        Raises:
            RenderError: If a release is half-dated or a needed URL is missing.
        """
        return render_changelog(self)


__all__ = [
    'Changelog',
]
