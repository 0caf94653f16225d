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

"""Parse, model and render Keep a Changelog files.

Usage::

    from changelogkit import ParseOptions, parse

    changelog = parse(text, ParseOptions(tag_prefix='v'))
    changelog.cut_release('1.4.0')
    text = changelog.render()
"""

__version__ = '0.1.0'

from changelogkit.changelog import Changelog
from changelogkit.changes import ChangeKind, Changes
from changelogkit.errors import ChangelogKitError, ErrorCode, ParseError, RenderError, TokenizeError
from changelogkit.links import Link
from changelogkit.parser import ParseOptions, parse
from changelogkit.release import Release
from changelogkit.semver import SemVer

__all__ = [
    'ChangeKind',
    'Changelog',
    'ChangelogKitError',
    'Changes',
    'ErrorCode',
    'Link',
    'ParseError',
    'ParseOptions',
    'Release',
    'RenderError',
    'SemVer',
    'TokenizeError',
    '__version__',
    'parse',
]
