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

"""Reading and writing changelog files on disk."""

from __future__ import annotations

from pathlib import Path

from changelogkit.changelog import Changelog
from changelogkit.errors import E, ChangelogKitError
from changelogkit.logging import get_logger
from changelogkit.parser import ParseOptions, parse

logger = get_logger(__name__)


def read_changelog(path: Path, options: ParseOptions | None = None) -> Changelog:
    """Read and parse the changelog at ``path``.

    Raises:
        ChangelogKitError: If the file cannot be read.
        TokenizeError: If the file cannot be tokenized.
        ParseError: If the file is not a valid changelog.
    """
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise ChangelogKitError(
            code=E.IO_READ_FAILED,
            message=f'Failed to read {path}: {exc}',
            hint='Check the path, or run "changelogkit new" to create the file.',
        ) from exc
    logger.debug('changelog_read', path=str(path), size=len(text))
    return parse(text, options)


def write_changelog(path: Path, changelog: Changelog, *, dry_run: bool = False) -> str:
    """Render ``changelog`` and write it to ``path``.

    The text is rendered before the file is touched, so a render error
    never leaves a truncated file behind.

    Returns:
        The rendered markdown.

    Raises:
        RenderError: If the changelog cannot be rendered.
        ChangelogKitError: If the file cannot be written.
    """
    text = changelog.render()
    if dry_run:
        logger.info('changelog_write_skipped', path=str(path), dry_run=True)
        return text

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as exc:
        raise ChangelogKitError(
            code=E.IO_WRITE_FAILED,
            message=f'Failed to write {path}: {exc}',
        ) from exc
    logger.info('changelog_written', path=str(path), releases=len(changelog.releases))
    return text


__all__ = [
    'read_changelog',
    'write_changelog',
]
