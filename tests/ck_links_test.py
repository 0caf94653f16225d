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

"""Tests for changelogkit.links module."""

from __future__ import annotations

import datetime

import pytest
from changelogkit.errors import E, ParseError, RenderError
from changelogkit.links import (
    Link,
    compare_base_url,
    compare_url,
    derive_link,
    release_url,
    tag_name,
)
from changelogkit.release import Release
from changelogkit.semver import SemVer

REPO = 'https://github.com/org/repo'


def _released(version: str, day: str) -> Release:
    return Release(version=SemVer.parse(version), date=datetime.date.fromisoformat(day))


def _history() -> list[Release]:
    return [
        Release(),
        _released('1.1.0', '2024-02-01'),
        _released('1.0.0', '2024-01-01'),
    ]


def _derive_all(releases: list[Release], **kwargs: str) -> list[str]:
    links = [derive_link(releases, i, url=REPO, **kwargs) for i in range(len(releases))]
    return [str(link) for link in links if link is not None]


class TestLink:
    """Tests for the Link value type."""

    def test_parse_single_line(self) -> None:
        """Anchor and URL are split at the colon."""
        link = Link.parse('[docs]: https://example.com/docs')
        assert link == Link(anchor='docs', url='https://example.com/docs')

    def test_parse_split_line(self) -> None:
        """A URL on the following line is accepted."""
        link = Link.parse('[1.0.0]:\n  https://github.com/org/repo/releases/tag/1.0.0')
        assert link.url == 'https://github.com/org/repo/releases/tag/1.0.0'

    def test_parse_malformed(self) -> None:
        """Text without the [anchor]: form is rejected."""
        with pytest.raises(ParseError) as exc_info:
            Link.parse('not a link', line=3)
        assert exc_info.value.code is E.PARSE_INVALID_LINK
        assert exc_info.value.line == 3

    def test_str(self) -> None:
        """str() renders the markdown definition."""
        assert str(Link('Unreleased', 'https://x/compare/1.0.0...HEAD')) == '[Unreleased]: https://x/compare/1.0.0...HEAD'

    @pytest.mark.parametrize(
        ('anchor', 'expected'),
        [
            ('Unreleased', True),
            ('unreleased', True),
            ('1.2.3', True),
            ('v1.2.3-rc.1', True),
            ('docs', False),
            ('Keep a Changelog', False),
        ],
    )
    def test_is_compare_link(self, anchor: str, expected: bool) -> None:
        """Version-like and Unreleased anchors are derivable links."""
        assert Link(anchor, 'https://example.com').is_compare_link is expected


class TestUrlHelpers:
    """Tests for the URL building helpers."""

    def test_compare_base_url_github(self) -> None:
        """The repository URL is the part before /compare/."""
        text = '[1.1.0]: https://github.com/org/repo/compare/1.0.0...1.1.0'
        assert compare_base_url(text) == REPO

    def test_compare_base_url_gitlab(self) -> None:
        """GitLab's /-/compare/ form is understood."""
        text = '[1.1.0]: https://gitlab.com/group/proj/-/compare/1.0.0...1.1.0'
        assert compare_base_url(text) == 'https://gitlab.com/group/proj'

    def test_compare_base_url_non_compare(self) -> None:
        """Release-tag and arbitrary links carry no compare base."""
        assert compare_base_url('[1.0.0]: https://github.com/org/repo/releases/tag/1.0.0') is None
        assert compare_base_url('[docs]: https://example.com') is None

    def test_tag_name(self) -> None:
        """The prefix, if any, goes in front of the version."""
        assert tag_name(SemVer(1, 2, 3)) == '1.2.3'
        assert tag_name(SemVer(1, 2, 3), 'v') == 'v1.2.3'

    def test_release_url_github(self) -> None:
        """GitHub uses /releases/tag/."""
        assert release_url(REPO, '1.0.0') == f'{REPO}/releases/tag/1.0.0'

    def test_release_url_other_host(self) -> None:
        """Other forges use /-/tags/."""
        assert release_url('https://gitlab.com/g/p', '1.0.0') == 'https://gitlab.com/g/p/-/tags/1.0.0'

    def test_trailing_slash_stripped(self) -> None:
        """A trailing slash on the repository URL does not double up."""
        assert release_url(f'{REPO}/', '1.0.0') == f'{REPO}/releases/tag/1.0.0'
        assert compare_url(f'{REPO}/', '1.0.0', 'HEAD') == f'{REPO}/compare/1.0.0...HEAD'


class TestDeriveLink:
    """Tests for derive_link()."""

    def test_full_history(self) -> None:
        """Unreleased compares to HEAD, the oldest release links to its tag."""
        assert _derive_all(_history()) == [
            '[Unreleased]: https://github.com/org/repo/compare/1.1.0...HEAD',
            '[1.1.0]: https://github.com/org/repo/compare/1.0.0...1.1.0',
            '[1.0.0]: https://github.com/org/repo/releases/tag/1.0.0',
        ]

    def test_tag_prefix(self) -> None:
        """Tag names carry the configured prefix."""
        assert _derive_all(_history(), tag_prefix='v') == [
            '[Unreleased]: https://github.com/org/repo/compare/v1.1.0...HEAD',
            '[1.1.0]: https://github.com/org/repo/compare/v1.0.0...v1.1.0',
            '[1.0.0]: https://github.com/org/repo/releases/tag/v1.0.0',
        ]

    def test_custom_head(self) -> None:
        """The Unreleased link compares against the configured head ref."""
        links = _derive_all(_history(), head='main')
        assert links[0] == '[Unreleased]: https://github.com/org/repo/compare/1.1.0...main'

    def test_lone_unreleased_has_no_link(self) -> None:
        """With nothing released there is nothing to compare against."""
        assert derive_link([Release()], 0, url=REPO) is None

    def test_lone_unreleased_needs_no_url(self) -> None:
        """No URL is required when no link is produced."""
        assert derive_link([Release()], 0, url=None) is None

    def test_missing_url(self) -> None:
        """A release that needs a link fails without a repository URL."""
        with pytest.raises(RenderError) as exc_info:
            derive_link(_history(), 2, url=None)
        assert exc_info.value.code is E.RENDER_MISSING_URL

    def test_undated_entries_are_skipped_when_looking_back(self) -> None:
        """The previous release is the nearest one that has a date."""
        releases = [
            _released('2.0.0', '2024-03-01'),
            Release(version=SemVer(1, 5, 0)),
            _released('1.0.0', '2024-01-01'),
        ]
        link = derive_link(releases, 0, url=REPO)
        assert link == Link('2.0.0', f'{REPO}/compare/1.0.0...2.0.0')
