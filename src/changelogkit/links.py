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

"""Reference-style links and compare-link derivation.

Every release heading in a Keep a Changelog file is a reference link
(``## [1.1.0] - ...``) whose target is defined at the bottom of the file.
Those targets are not stored; they are derived from the release order
and the repository URL each time the changelog is rendered.

Derivation rules for the release at index ``i``::

    previous = first release after i that has a date

    ┌──────────────────────┬───────────────────┬──────────────────────────────────┐
    │ previous             │ current           │ link                             │
    ├──────────────────────┼───────────────────┼──────────────────────────────────┤
    │ none                 │ no version/date   │ (no link)                        │
    │ none                 │ released          │ [v]: <url>/releases/tag/<tag>    │
    │ found                │ no version/date   │ [Unreleased]: compare prev...HEAD│
    │ found                │ released          │ [v]: compare prev...current      │
    └──────────────────────┴───────────────────┴──────────────────────────────────┘

Non-GitHub hosts (GitLab and friends) use ``/-/tags/<tag>`` instead of
``/releases/tag/<tag>``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import urlparse

from changelogkit.errors import E, ParseError, RenderError
from changelogkit.release import Release
from changelogkit.semver import SemVer

UNRELEASED_ANCHOR = 'Unreleased'
DEFAULT_HEAD = 'HEAD'

_GITHUB_HOSTS: frozenset[str] = frozenset({'github.com', 'www.github.com'})

_LINK_RE = re.compile(r'^\[(?P<anchor>[^\]]*)\]:\s*(?P<url>\S.*)$', re.DOTALL)
_COMPARE_LINK_RE = re.compile(r'^\[.*\]:\s*(?P<base>http.*?)/(?:-/)?compare/.*$', re.DOTALL)
# Anchors that look like a version are compare links, not authored links.
_VERSION_ANCHOR_RE = re.compile(r'\d+\.\d+\.\d+')


@dataclass(frozen=True)
class Link:
    """A reference link definition: ``[anchor]: url``."""

    anchor: str
    url: str

    @classmethod
    def parse(cls, text: str, *, line: int | None = None) -> Link:
        """Parse a ``[anchor]: url`` definition (the URL may be on the next line).

        Raises:
            ParseError: If ``text`` is not a link definition.
        """
        m = _LINK_RE.match(text.strip())
        if m is None:
            raise ParseError(
                code=E.PARSE_INVALID_LINK,
                message=f'Malformed link definition {text!r}',
                hint='Write links as "[anchor]: https://...".',
                line=line,
            )
        return cls(anchor=m.group('anchor').strip(), url=m.group('url').strip())

    @property
    def is_compare_link(self) -> bool:
        """Whether the anchor names a release (so the link is derivable)."""
        return UNRELEASED_ANCHOR.lower() in self.anchor.lower() or bool(_VERSION_ANCHOR_RE.search(self.anchor))

    def __str__(self) -> str:
        return f'[{self.anchor}]: {self.url}'


def compare_base_url(text: str) -> str | None:
    """Return the repository URL embedded in a compare link definition.

    ``[1.1.0]: https://github.com/org/repo/compare/1.0.0...1.1.0`` yields
    ``https://github.com/org/repo``; GitLab's ``/-/compare/`` form is
    understood too. Other links yield ``None``.
    """
    m = _COMPARE_LINK_RE.match(text.strip())
    return m.group('base') if m else None


def tag_name(version: SemVer, tag_prefix: str | None = None) -> str:
    """Return the VCS tag for ``version`` (e.g. ``v1.2.3`` with prefix ``v``)."""
    return f'{tag_prefix or ""}{version}'


def release_url(repo_url: str, tag: str) -> str:
    """URL of the release/tag page for ``tag``."""
    repo_url = repo_url.rstrip('/')
    host = (urlparse(repo_url).hostname or '').lower()
    path = '/releases/tag/' if host in _GITHUB_HOSTS else '/-/tags/'
    return f'{repo_url}{path}{tag}'


def compare_url(repo_url: str, previous: str, current: str) -> str:
    """URL of the diff between two refs."""
    return f'{repo_url.rstrip("/")}/compare/{previous}...{current}'


def _require_url(url: str | None, release: Release) -> str:
    if not url:
        heading = str(release.version) if release.version else UNRELEASED_ANCHOR
        raise RenderError(
            code=E.RENDER_MISSING_URL,
            message=f'No repository URL to build the [{heading}] link',
            hint='Pass --remote-url, set remote_url in changelogkit.toml, or add a compare link to the file.',
        )
    return url


def derive_link(
    releases: Sequence[Release],
    index: int,
    *,
    url: str | None,
    tag_prefix: str | None = None,
    head: str = DEFAULT_HEAD,
) -> Link | None:
    """Derive the reference link for ``releases[index]``.

    Args:
        releases: Releases in changelog order (newest first).
        index: Position of the release to link.
        url: Repository base URL.
        tag_prefix: Prefix prepended to versions to form tag names.
        head: Ref the Unreleased section is compared against.

    Returns:
        The derived link, or ``None`` for a lone Unreleased section.

    Raises:
        RenderError: If a link is needed but ``url`` is missing.
    """
    current = releases[index]
    previous = next((r for r in releases[index + 1 :] if r.date is not None), None)

    if previous is None:
        if current.version is None or current.date is None:
            return None
        return Link(
            anchor=str(current.version),
            url=release_url(_require_url(url, current), tag_name(current.version, tag_prefix)),
        )

    repo_url = _require_url(url, current)
    if previous.version is None:
        raise RenderError(
            code=E.RENDER_INCONSISTENT_RELEASE,
            message=f'Release dated {previous.date} has no version',
        )
    previous_tag = tag_name(previous.version, tag_prefix)

    if current.version is None or current.date is None:
        return Link(anchor=UNRELEASED_ANCHOR, url=compare_url(repo_url, previous_tag, head))

    return Link(
        anchor=str(current.version),
        url=compare_url(repo_url, previous_tag, tag_name(current.version, tag_prefix)),
    )


__all__ = [
    'DEFAULT_HEAD',
    'UNRELEASED_ANCHOR',
    'Link',
    'compare_base_url',
    'compare_url',
    'derive_link',
    'release_url',
    'tag_name',
]
