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

"""Tests for changelogkit.parser module."""

from __future__ import annotations

import datetime

import pytest
from changelogkit.changes import Changes
from changelogkit.errors import E, ParseError, TokenizeError
from changelogkit.links import Link
from changelogkit.logging import configure_logging
from changelogkit.parser import ParseOptions, parse
from changelogkit.semver import SemVer

configure_logging(quiet=True)

SAMPLE = """\
# Changelog

All notable changes to this project will be documented in this file.

## [Unreleased]

### Added

- Dark mode

## [1.1.0] - 2024-02-01

### Fixed

- Crash on startup
  when the config is empty

## [1.0.0] - 2024-01-01

First stable release.

### Added

- Initial release
- Plugin API

[docs]: https://example.com/docs
[Unreleased]: https://github.com/org/repo/compare/1.1.0...HEAD
[1.1.0]: https://github.com/org/repo/compare/1.0.0...1.1.0
[1.0.0]: https://github.com/org/repo/releases/tag/1.0.0
"""


class TestParseDocument:
    """Tests for parsing a complete changelog."""

    def test_metadata(self) -> None:
        """Title and description are read from the top of the file."""
        changelog = parse(SAMPLE)
        assert changelog.title == 'Changelog'
        assert changelog.description == 'All notable changes to this project will be documented in this file.'
        assert changelog.flag is None
        assert changelog.footer is None

    def test_releases(self) -> None:
        """Release headings, descriptions and changes are parsed."""
        unreleased, minor, major = parse(SAMPLE).releases

        assert unreleased.is_unreleased
        assert unreleased.changes == Changes(added=['Dark mode'])

        assert minor.version == SemVer(1, 1, 0)
        assert minor.date == datetime.date(2024, 2, 1)
        assert minor.changes.fixed == ['Crash on startup\nwhen the config is empty']

        assert major.description == 'First stable release.'
        assert major.changes.added == ['Initial release', 'Plugin API']

    def test_links(self) -> None:
        """Every link definition is kept in file order."""
        links = parse(SAMPLE).links
        assert [link.anchor for link in links] == ['docs', 'Unreleased', '1.1.0', '1.0.0']
        assert links[0] == Link('docs', 'https://example.com/docs')

    def test_url_inferred_from_compare_link(self) -> None:
        """Without a configured URL, the first compare link supplies it."""
        assert parse(SAMPLE).url == 'https://github.com/org/repo'

    def test_configured_url_wins(self) -> None:
        """A URL passed in the options is never replaced."""
        changelog = parse(SAMPLE, ParseOptions(url='https://gitlab.com/g/p'))
        assert changelog.url == 'https://gitlab.com/g/p'

    def test_options_carried_over(self) -> None:
        """Tag prefix and head ref come from the options."""
        changelog = parse(SAMPLE, ParseOptions(tag_prefix='v', head='main'))
        assert changelog.tag_prefix == 'v'
        assert changelog.head == 'main'

    def test_head_defaults_to_head(self) -> None:
        """The head ref defaults to HEAD."""
        assert parse('# Changelog').head == 'HEAD'

    def test_minimal(self) -> None:
        """A title alone is a valid changelog."""
        changelog = parse('# Changelog\n')
        assert changelog.title == 'Changelog'
        assert changelog.description is None
        assert changelog.releases == []
        assert changelog.links == []

    def test_out_of_order_releases_sorted(self) -> None:
        """Releases are returned newest first whatever the file order."""
        text = '# C\n\n## [1.0.0] - 2024-01-01\n\n## [Unreleased]\n\n## [1.1.0] - 2024-02-01\n'
        versions = [str(r.version) if r.version else None for r in parse(text).releases]
        assert versions == [None, '1.1.0', '1.0.0']

    def test_same_day_releases_keep_order(self) -> None:
        """Two releases on one date stay newest version first across formatting."""
        text = (
            '# Changelog\n\nNotes.\n\n'
            '## [1.0.1] - 2024-01-01\n\n### Fixed\n\n- Typo\n\n'
            '## [1.0.0] - 2024-01-01\n\n### Added\n\n- First\n\n'
            '[1.0.1]: https://github.com/org/repo/compare/1.0.0...1.0.1\n'
            '[1.0.0]: https://github.com/org/repo/releases/tag/1.0.0\n'
        )
        changelog = parse(text)
        assert [str(r.version) for r in changelog.releases] == ['1.0.1', '1.0.0']
        rendered = changelog.render()
        assert rendered == text
        assert parse(rendered).render() == rendered

    def test_description_with_list_items(self) -> None:
        """List items in the description keep their bullets."""
        changelog = parse('# C\n\nIntro\n- point one\n- point two\n')
        assert changelog.description == 'Intro\n- point one\n- point two'


class TestReleaseHeadings:
    """Tests for the release heading forms."""

    def test_yanked(self) -> None:
        """A [YANKED] suffix marks the release yanked."""
        release = parse('# C\n\n## [1.0.0] - 2024-01-01 [YANKED]').releases[0]
        assert release.yanked
        assert release.version == SemVer(1, 0, 0)

    def test_lowercase_unreleased(self) -> None:
        """The Unreleased heading is matched case-insensitively."""
        assert parse('# C\n\n## [unreleased]').releases[0].is_unreleased

    def test_unbracketed_version(self) -> None:
        """Brackets around the version are optional."""
        release = parse('# C\n\n## 1.0.0 - 2024-01-01').releases[0]
        assert release.version == SemVer(1, 0, 0)

    def test_prerelease_version(self) -> None:
        """Prerelease versions are accepted."""
        release = parse('# C\n\n## [2.0.0-rc.1] - 2024-05-01').releases[0]
        assert release.version == SemVer(2, 0, 0, prerelease=('rc', '1'))

    def test_single_digit_month_and_day(self) -> None:
        """Dates may omit leading zeros."""
        release = parse('# C\n\n## [1.0.0] - 2024-3-7').releases[0]
        assert release.date == datetime.date(2024, 3, 7)

    def test_planned_version_on_unreleased(self) -> None:
        """A version in an Unreleased heading is kept, without a date."""
        release = parse('# C\n\n## [1.3.0] - Unreleased').releases[0]
        assert release.version == SemVer(1, 3, 0)
        assert release.date is None

    def test_label_on_unreleased_ignored(self) -> None:
        """A non-version label in an Unreleased heading is dropped."""
        release = parse('# C\n\n## [next] - Unreleased').releases[0]
        assert release.is_unreleased


class TestRejections:
    """Tests for malformed input."""

    def test_missing_title(self) -> None:
        """The first element must be a level-one heading."""
        with pytest.raises(ParseError) as exc_info:
            parse('Just some text\n\n## [Unreleased]')
        assert exc_info.value.code is E.PARSE_MISSING_TOKEN
        assert exc_info.value.line == 1

    def test_empty_document(self) -> None:
        """An empty file has no title."""
        with pytest.raises(ParseError) as exc_info:
            parse('')
        assert exc_info.value.code is E.PARSE_MISSING_TOKEN
        assert exc_info.value.line is None

    def test_invalid_date(self) -> None:
        """A date that does not exist is a date error."""
        with pytest.raises(ParseError) as exc_info:
            parse('# C\n\n## 1.0.0 - 2024-13-40')
        assert exc_info.value.code is E.PARSE_INVALID_DATE
        assert exc_info.value.line == 3

    def test_invalid_version(self) -> None:
        """A version that is not semver is a version error."""
        with pytest.raises(ParseError) as exc_info:
            parse('# C\n\n## [1.0] - 2024-01-01')
        assert exc_info.value.code is E.PARSE_INVALID_VERSION

    def test_invalid_heading(self) -> None:
        """A heading that is neither released nor Unreleased is rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse('# C\n\n## Roadmap')
        assert exc_info.value.code is E.PARSE_INVALID_HEADING

    def test_unknown_change_kind(self) -> None:
        """An unknown ### heading is rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse('# C\n\n## [Unreleased]\n\n### Unknown\n\n- thing')
        assert exc_info.value.code is E.PARSE_UNKNOWN_CHANGE_KIND
        assert exc_info.value.line == 5

    def test_duplicate_unreleased(self) -> None:
        """A second Unreleased section is rejected at its heading."""
        with pytest.raises(ParseError) as exc_info:
            parse('# C\n\n## [Unreleased]\n\n## [Unreleased]')
        assert exc_info.value.code is E.RELEASE_DUPLICATE_UNRELEASED
        assert exc_info.value.line == 5

    def test_text_after_links(self) -> None:
        """Content after the link block is unexpected."""
        text = '# C\n\n## [1.0.0] - 2024-01-01\n\n[1.0.0]: https://github.com/o/r/releases/tag/1.0.0\n\nstray text'
        with pytest.raises(ParseError) as exc_info:
            parse(text)
        assert exc_info.value.code is E.PARSE_UNEXPECTED_TOKENS
        assert exc_info.value.line == 7
        assert 'stray text' in str(exc_info.value)

    def test_text_between_change_lists(self) -> None:
        """A paragraph after a change list is unexpected."""
        text = '# C\n\n## [Unreleased]\n\n### Added\n\n- thing\n\nloose paragraph\n'
        with pytest.raises(ParseError) as exc_info:
            parse(text)
        assert exc_info.value.code is E.PARSE_UNEXPECTED_TOKENS

    def test_dangling_link_label(self) -> None:
        """Tokenizer errors surface from parse()."""
        with pytest.raises(TokenizeError):
            parse('# C\n\n[1.0.0]:\n')


class TestFlagAndFooter:
    """Tests for the leading flag comment and trailing footer."""

    def test_flag(self) -> None:
        """A comment before the title is kept as the flag."""
        assert parse('<!-- generated -->\n# Changelog').flag == 'generated'

    def test_footer(self) -> None:
        """Text after a horizontal rule is the footer."""
        changelog = parse('# C\n\n## [Unreleased]\n\n---\n\nMaintained by the release team.\n')
        assert changelog.footer == 'Maintained by the release team.'

    def test_empty_footer(self) -> None:
        """A rule with nothing after it gives an empty footer."""
        assert parse('# C\n\n---\n').footer == ''

    def test_footer_after_links(self) -> None:
        """The footer follows the link block."""
        text = '# C\n\n[docs]: https://example.com\n\n---\nfin'
        changelog = parse(text)
        assert changelog.links == [Link('docs', 'https://example.com')]
        assert changelog.footer == 'fin'
