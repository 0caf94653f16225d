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

"""Line-oriented tokenizer for Keep a Changelog markdown.

Only the small markdown subset used by the convention is recognized.
Each physical line becomes one token, then a merge pass glues
paragraph runs and list-item continuation lines together.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ TokenKind               │ What a line is: heading, list item, link    │
    │                         │ definition, comment, rule or plain text.    │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Token                   │ One kind + the text lines it covers + the   │
    │                         │ line number it started on.                  │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Continuation            │ A line indented by two spaces right after   │
    │                         │ a list item belongs to that list item.      │
    └─────────────────────────┴─────────────────────────────────────────────┘

Tokenization flow::

    "## [1.0.0] - 2024-01-01\\n### Added\\n- New\\n  thing"
         │
         ▼  _classify_lines()
    H2('[1.0.0] - 2024-01-01')  H3('Added')  LI('New')  P('  thing')
         │
         ▼  _merge()
    H2('[1.0.0] - 2024-01-01')  H3('Added')  LI('New', 'thing')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from changelogkit.errors import E, TokenizeError
from changelogkit.logging import get_logger

logger = get_logger(__name__)

PREFIX_HR = '---'
PREFIX_H1 = '# '
PREFIX_H2 = '## '
PREFIX_H3 = '### '
PREFIXES_LI = ('-', '*')

# "[anchor]: http..." on a single line.
_LINK_RE = re.compile(r'^\[.*\]:\s*http.*$')
# "[anchor]:" with the URL expected on the next line.
_LINK_LABEL_RE = re.compile(r'^\[.*\]:$')
# The URL line following a bare link label.
_LINK_CONTINUATION_RE = re.compile(r'\s+http.*$')
_COMMENT_RE = re.compile(r'^<!--(.*)-->$')
_CONTINUATION_INDENT_RE = re.compile(r'^\s\s')


class TokenKind(str, Enum):
    """The structural element a token represents."""

    H1 = 'h1'
    H2 = 'h2'
    H3 = 'h3'
    LI = 'li'
    P = 'p'
    LINK = 'link'
    FLAG = 'flag'
    HR = 'hr'


@dataclass(frozen=True)
class Token:
    """A single structural token.

    Attributes:
        line: 1-based line number where the token starts.
        kind: The token kind.
        content: Text lines covered by the token, prefixes removed.
    """

    line: int
    kind: TokenKind
    content: tuple[str, ...]

    @property
    def text(self) -> str:
        """Content lines joined with newlines."""
        return '\n'.join(self.content)


def _is_blank(text: str) -> bool:
    return not text.strip()


def _strip_prefix(line: str, width: int) -> str:
    return line[width:].strip()


def _classify_lines(markdown: str) -> list[Token]:
    """Turn each physical line into a single-line token."""
    lines = markdown.replace('\r\n', '\n').split('\n')
    tokens: list[Token] = []
    skip_next = False

    for idx, line in enumerate(lines):
        ln = idx + 1
        if skip_next:
            # Already consumed as the URL half of a split link definition.
            skip_next = False
            tokens.append(Token(ln, TokenKind.P, ('',)))
            continue

        comment = _COMMENT_RE.match(line)
        if line.startswith(PREFIX_HR):
            tokens.append(Token(ln, TokenKind.HR, (PREFIX_HR,)))
        elif line.startswith(PREFIX_H1):
            tokens.append(Token(ln, TokenKind.H1, (_strip_prefix(line, 1),)))
        elif line.startswith(PREFIX_H2):
            tokens.append(Token(ln, TokenKind.H2, (_strip_prefix(line, 2),)))
        elif line.startswith(PREFIX_H3):
            tokens.append(Token(ln, TokenKind.H3, (_strip_prefix(line, 3),)))
        elif line.startswith(PREFIXES_LI):
            tokens.append(Token(ln, TokenKind.LI, (_strip_prefix(line, 1),)))
        elif _LINK_RE.match(line):
            tokens.append(Token(ln, TokenKind.LINK, (line.strip(),)))
        elif _LINK_LABEL_RE.match(line):
            next_line = lines[idx + 1] if idx + 1 < len(lines) else None
            if next_line is None or not _LINK_CONTINUATION_RE.search(next_line):
                raise TokenizeError(
                    code=E.TOKENIZE_DANGLING_LINK,
                    message=f'Link label {line.strip()!r} is not followed by a URL',
                    hint='Put the URL on the same line, or indent it on the line below.',
                    line=ln,
                )
            skip_next = True
            tokens.append(Token(ln, TokenKind.LINK, (f'{line.strip()}\n{next_line.rstrip()}',)))
        elif comment is not None:
            tokens.append(Token(ln, TokenKind.FLAG, (comment.group(1).strip(),)))
        else:
            tokens.append(Token(ln, TokenKind.P, (line.rstrip(),)))

    return tokens


def _merge(tokens: list[Token]) -> list[Token]:
    """Merge paragraph runs and list-item continuation lines."""
    merged: list[Token] = []
    for token in tokens:
        prev = merged[-1] if merged else None
        if token.kind is TokenKind.P and prev is not None:
            line = token.content[0]
            if prev.kind is TokenKind.P:
                merged[-1] = Token(prev.line, prev.kind, (*prev.content, line))
                continue
            # Blank lines stay attached so multi-paragraph entries survive.
            if prev.kind is TokenKind.LI and (_is_blank(line) or _CONTINUATION_INDENT_RE.match(line)):
                line = _CONTINUATION_INDENT_RE.sub('', line, count=1)
                merged[-1] = Token(prev.line, prev.kind, (*prev.content, line))
                continue
        merged.append(token)
    return merged


def _trim(token: Token) -> Token:
    """Drop blank lines at both ends of a token's content."""
    content = list(token.content)
    while content and _is_blank(content[-1]):
        content.pop()
    line = token.line
    while content and _is_blank(content[0]):
        content.pop(0)
        line += 1
    return Token(line, token.kind, tuple(content))


def tokenize(markdown: str) -> list[Token]:
    """Split Keep a Changelog markdown into structural tokens.

    Args:
        markdown: Raw changelog text.

    Returns:
        Tokens in source order. Tokens with blank content are dropped.

    Raises:
        TokenizeError: If a ``[anchor]:`` line is not followed by a URL.
    """
    tokens = [_trim(t) for t in _merge(_classify_lines(markdown)) if not _is_blank(''.join(t.content))]
    logger.debug('tokenized', count=len(tokens))
    return tokens


__all__ = [
    'Token',
    'TokenKind',
    'tokenize',
]
