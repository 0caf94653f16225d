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

"""Recursive-descent parser for Keep a Changelog markdown.

The parser walks the token list once, left to right, with no
backtracking. Each grammar step either consumes the token kinds it
expects or leaves the cursor where it is.

Grammar::

    changelog   := FLAG? H1 text? release* LINK* footer?
    text        := (P | LI)+
    release     := H2 text? (H3 LI*)*
    footer      := HR text?

Release headings (matched case-insensitively)::

    ## [1.2.3] - 2024-01-31            released
    ## [1.2.3] - 2024-01-31 [YANKED]   released, yanked
    ## [Unreleased]                    pending changes
    ## [1.3.0] - Unreleased            pending changes, planned version

Parse flow::

    text ──tokenize()──► [Token, ...] ──Parser──► Changelog
                                          │
                                          ├─ _parse_meta()      FLAG? H1 text?
                                          ├─ _parse_releases()  H2 ...
                                          ├─ _parse_links()     LINK*
                                          ├─ _parse_footer()    HR text?
                                          └─ _finish()          nothing left?
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from changelogkit.changelog import Changelog
from changelogkit.changes import ChangeKind
from changelogkit.errors import E, ChangelogKitError, ParseError
from changelogkit.links import DEFAULT_HEAD, Link, compare_base_url
from changelogkit.logging import get_logger
from changelogkit.release import Release
from changelogkit.semver import SemVer
from changelogkit.tokens import Token, TokenKind, tokenize

logger = get_logger(__name__)

_RELEASED_RE = re.compile(r'\[?([^\]]+)\]?\s*-\s*(\d{4})-(\d{1,2})-(\d{1,2})(\s+\[yanked\])?$')
_UNRELEASED_RE = re.compile(r'\[?([^\]]+)\]?\s*-\s*unreleased(\s+\[yanked\])?$')
_YANKED_MARKER = '[yanked]'
_UNRELEASED = 'unreleased'
_TEXT_KINDS = (TokenKind.P, TokenKind.LI)


@dataclass(frozen=True)
class ParseOptions:
    """Settings supplied by the caller rather than read from the file.

    Attributes:
        url: Repository base URL. When unset, it is inferred from the
            first compare link in the file.
        tag_prefix: Prefix that turns a version into a tag name (``v``).
        head: Ref the Unreleased section is compared against.
    """

    url: str | None = None
    tag_prefix: str | None = None
    head: str | None = None


class Parser:
    """Single-use cursor over a token list that builds a :class:`Changelog`."""

    def __init__(self, tokens: list[Token], options: ParseOptions) -> None:
        """Initialize with the tokens to consume and caller options."""
        self._tokens = tuple(tokens)
        self._idx = 0
        self._options = options
        self._changelog = Changelog(
            url=options.url,
            tag_prefix=options.tag_prefix,
            head=options.head or DEFAULT_HEAD,
        )

    def parse(self) -> Changelog:
        """Run every grammar step and return the finished changelog."""
        self._parse_meta()
        self._parse_releases()
        self._parse_links()
        self._parse_footer()
        self._finish()
        logger.debug(
            'changelog_parsed',
            releases=len(self._changelog.releases),
            links=len(self._changelog.links),
            url=self._changelog.url,
        )
        return self._changelog

    def _peek(self) -> Token | None:
        return self._tokens[self._idx] if self._idx < len(self._tokens) else None

    def _take(self, *kinds: TokenKind) -> Token | None:
        """Consume and return the next token if it is one of ``kinds``."""
        token = self._peek()
        if token is None or token.kind not in kinds:
            return None
        self._idx += 1
        return token

    def _take_text(self) -> str | None:
        """Consume a run of paragraphs and list items as one block of text."""
        lines: list[str] = []
        while True:
            token = self._take(*_TEXT_KINDS)
            if token is None:
                break
            lines.append(f'- {token.text}' if token.kind is TokenKind.LI else token.text)
        return '\n'.join(lines) if lines else None

    def _parse_meta(self) -> None:
        flag = self._take(TokenKind.FLAG)
        title = self._take(TokenKind.H1)
        if title is None:
            found = self._peek()
            raise ParseError(
                code=E.PARSE_MISSING_TOKEN,
                message=f'Expected a "# Title" heading, found {found.kind.value if found else "end of file"}',
                hint='Every changelog must start with a level-one heading, e.g. "# Changelog".',
                line=found.line if found else None,
            )
        self._changelog.flag = flag.text if flag else None
        self._changelog.title = title.text
        self._changelog.description = self._take_text()

    def _parse_releases(self) -> None:
        while True:
            heading = self._take(TokenKind.H2)
            if heading is None:
                break
            release = self._parse_release_heading(heading)
            release.description = self._take_text()

            while True:
                kind_heading = self._take(TokenKind.H3)
                if kind_heading is None:
                    break
                kind = ChangeKind.parse(kind_heading.text, line=kind_heading.line)
                while True:
                    item = self._take(TokenKind.LI)
                    if item is None:
                        break
                    release.changes.add(kind, item.text)

            if release.is_unreleased and self._changelog.get_unreleased() is not None:
                raise ParseError(
                    code=E.RELEASE_DUPLICATE_UNRELEASED,
                    message='Found a second [Unreleased] section',
                    hint='Merge the entries into the first [Unreleased] section.',
                    line=heading.line,
                )
            self._changelog.add_release(release)

    def _parse_release_heading(self, heading: Token) -> Release:
        text = heading.text.lower()
        yanked = _YANKED_MARKER in text

        released = _RELEASED_RE.search(text)
        if released is not None:
            version = self._parse_version(released.group(1).strip(), heading)
            try:
                date = datetime.date(int(released.group(2)), int(released.group(3)), int(released.group(4)))
            except ValueError as exc:
                raise ParseError(
                    code=E.PARSE_INVALID_DATE,
                    message=f'Invalid date in release heading {heading.text!r}: {exc}',
                    hint='Dates are written as YYYY-MM-DD.',
                    line=heading.line,
                ) from exc
            return Release(version=version, date=date, yanked=yanked)

        if _UNRELEASED in text:
            planned = _UNRELEASED_RE.search(text)
            token = planned.group(1).strip() if planned else ''
            version = SemVer.try_parse(token) if token else None
            return Release(version=version, yanked=yanked)

        raise ParseError(
            code=E.PARSE_INVALID_HEADING,
            message=f'Cannot parse release heading {heading.text!r}',
            hint='Use "## [1.2.3] - 2024-01-31" or "## [Unreleased]".',
            line=heading.line,
        )

    @staticmethod
    def _parse_version(text: str, heading: Token) -> SemVer:
        try:
            return SemVer.parse(text)
        except ChangelogKitError as exc:
            raise ParseError(
                code=E.PARSE_INVALID_VERSION,
                message=f'Invalid version {text!r} in release heading {heading.text!r}',
                hint=exc.hint,
                line=heading.line,
            ) from exc

    def _parse_links(self) -> None:
        while True:
            token = self._take(TokenKind.LINK)
            if token is None:
                break
            self._changelog.links.append(Link.parse(token.text, line=token.line))
            if self._options.url is not None or self._changelog.url is not None:
                continue
            inferred = compare_base_url(token.text)
            if inferred is not None:
                self._changelog.url = inferred
                logger.debug('url_inferred', url=inferred, line=token.line)

    def _parse_footer(self) -> None:
        if self._take(TokenKind.HR) is None:
            return
        self._changelog.footer = self._take_text() or ''

    def _finish(self) -> None:
        leftover = self._tokens[self._idx :]
        if not leftover:
            return
        preview = ', '.join(f'{t.kind.value} {t.text.splitlines()[0]!r}' for t in leftover[:3])
        if len(leftover) > 3:
            preview += f', ... ({len(leftover) - 3} more)'
        raise ParseError(
            code=E.PARSE_UNEXPECTED_TOKENS,
            message=f'Unexpected content: {preview}',
            hint='Text between change lists, or links before the last release, are not allowed.',
            line=leftover[0].line,
        )


def parse(markdown: str, options: ParseOptions | None = None) -> Changelog:
    """Parse Keep a Changelog markdown into a :class:`Changelog`.

    Args:
        markdown: Raw changelog text.
        options: Repository URL, tag prefix and head ref overrides.

    Returns:
        The parsed changelog. Releases are in canonical order even if the
        source headings were not.

    Raises:
        TokenizeError: If the text cannot be tokenized.
        ParseError: If the tokens do not follow the changelog grammar.
    """
    return Parser(tokenize(markdown), options or ParseOptions()).parse()


__all__ = [
    'ParseOptions',
    'Parser',
    'parse',
]
