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

"""Tests for changelogkit.semver module."""

from __future__ import annotations

import pytest
from changelogkit.errors import E, ChangelogKitError
from changelogkit.semver import SemVer


class TestParse:
    """Tests for SemVer.parse()."""

    def test_plain_version(self) -> None:
        """MAJOR.MINOR.PATCH parses into its three numbers."""
        assert SemVer.parse('1.2.3') == SemVer(1, 2, 3)

    def test_prerelease_and_build(self) -> None:
        """Prerelease and build identifiers are split on dots."""
        v = SemVer.parse('2.0.0-rc.1+build.5')
        assert v.prerelease == ('rc', '1')
        assert v.build == ('build', '5')

    @pytest.mark.parametrize('text', ['1.0', 'v1.0.0', '01.0.0', '1.0.0-', '', 'latest'])
    def test_invalid(self, text: str) -> None:
        """Strings that are not semantic versions are rejected."""
        with pytest.raises(ChangelogKitError) as exc_info:
            SemVer.parse(text)
        assert exc_info.value.code is E.VERSION_INVALID

    def test_try_parse_returns_none(self) -> None:
        """try_parse swallows the error and returns None."""
        assert SemVer.try_parse('nope') is None
        assert SemVer.try_parse('0.1.0') == SemVer(0, 1, 0)


class TestFormat:
    """Tests for str(SemVer)."""

    def test_str_matches_input(self) -> None:
        """Formatting gives back the canonical text."""
        for text in ('0.0.1', '1.2.3-alpha.1', '1.2.3+sha.abc', '1.2.3-beta+exp.sha.5114f85'):
            assert str(SemVer.parse(text)) == text


class TestOrdering:
    """Tests for SemVer precedence."""

    def test_numeric_components(self) -> None:
        """Major, minor and patch compare numerically, not as text."""
        assert SemVer.parse('1.9.0') < SemVer.parse('1.10.0')
        assert SemVer.parse('2.0.0') > SemVer.parse('1.99.99')

    def test_prerelease_precedence(self) -> None:
        """Prereleases follow the semver.org precedence example."""
        ordered = [
            '1.0.0-alpha',
            '1.0.0-alpha.1',
            '1.0.0-alpha.beta',
            '1.0.0-beta',
            '1.0.0-beta.2',
            '1.0.0-beta.11',
            '1.0.0-rc.1',
            '1.0.0',
        ]
        versions = [SemVer.parse(v) for v in ordered]
        assert sorted(reversed(versions)) == versions

    def test_build_metadata_ignored_for_precedence(self) -> None:
        """Build metadata does not make one version newer than another."""
        a = SemVer.parse('1.0.0+a')
        b = SemVer.parse('1.0.0+b')
        assert not a < b
        assert not b < a
