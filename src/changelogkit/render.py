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

"""Canonical markdown rendering of a changelog model.

Output layout (blocks separated by one blank line)::

    <!-- flag -->                       optional
    # Changelog
    <description or default blurb>
    ## [Unreleased]                     one block per release
    ### Added                           one block per non-empty kind
    - entry
      continuation line
    [custom]: https://...               authored, non-release links
    [Unreleased]: .../compare/1.0.0...HEAD
    [1.0.0]: .../releases/tag/1.0.0     derived links, release order
    ---                                 optional footer
    footer text

Rendering the result of parsing rendered output gives the same text
back, so ``format`` is idempotent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from changelogkit.changes import Changes
from changelogkit.errors import E, RenderError
from changelogkit.release import Release

if TYPE_CHECKING:
    from changelogkit.changelog import Changelog

DEFAULT_TITLE = 'Changelog'

DEFAULT_DESCRIPTION = (
    'All notable changes to this project will be documented in this file.\n'
    'The format is based on [Keep a Changelog](https://keepachangelog.com/)\n'
    'and this project adheres to [Semantic Versioning](https://semver.org/).'
)

_YANKED = ' [YANKED]'


def _render_entry(text: str) -> str:
    """Render one entry as a bullet, indenting continuation lines by two spaces."""
    first, *rest = text.split('\n')
    lines = [f'- {first.strip()}']
    lines.extend(f'  {line}'.rstrip() for line in rest)
    return '\n'.join(lines)


def _render_heading(release: Release) -> str:
    yanked = _YANKED if release.yanked else ''
    if release.version is not None and release.date is not None:
        return f'## [{release.version}] - {release.date.isoformat()}{yanked}'
    if release.version is None and release.date is None:
        return f'## [Unreleased]{yanked}'
    if release.version is not None:
        message = f'Release [{release.version}] has a version but no date'
    else:
        message = f'Release dated {release.date} has a date but no version'
    raise RenderError(
        code=E.RENDER_INCONSISTENT_RELEASE,
        message=message,
        hint='Give the release both a version and a date, or neither to make it [Unreleased].',
    )


def render_changes(changes: Changes) -> str:
    """Render the ``###`` blocks of every non-empty kind, in display order."""
    blocks = []
    for kind, entries in changes.items():
        bullets = '\n'.join(_render_entry(entry) for entry in entries)
        blocks.append(f'### {kind.value}\n\n{bullets}')
    return '\n\n'.join(blocks)


def render_release(release: Release) -> str:
    """Render a single release section.

    Raises:
        RenderError: If the release has a version without a date or the
            other way round.
    """
    blocks = [_render_heading(release)]
    if release.description and release.description.strip():
        blocks.append(release.description.strip())
    changes = render_changes(release.changes)
    if changes:
        blocks.append(changes)
    return '\n\n'.join(blocks) + '\n'


def render_changelog(changelog: Changelog) -> str:
    """Render a whole changelog, derived links included.

    Raises:
        RenderError: If a release is inconsistent or the repository URL
            needed for the derived links is missing.
    """
    top = f'# {changelog.title or DEFAULT_TITLE}'
    if changelog.flag is not None:
        top = f'<!-- {changelog.flag} -->\n{top}'

    description = (changelog.description or '').strip() or DEFAULT_DESCRIPTION
    blocks = [top, description]
    blocks.extend(render_release(release).rstrip('\n') for release in changelog.releases)

    authored = changelog.authored_links
    if authored:
        blocks.append('\n'.join(str(link) for link in authored))

    derived = changelog.derived_links()
    if derived:
        blocks.append('\n'.join(str(link) for link in derived))

    if changelog.footer is not None:
        blocks.append(f'---\n{changelog.footer.strip()}'.rstrip())

    return '\n\n'.join(blocks) + '\n'


__all__ = [
    'DEFAULT_DESCRIPTION',
    'DEFAULT_TITLE',
    'render_changelog',
    'render_changes',
    'render_release',
]
