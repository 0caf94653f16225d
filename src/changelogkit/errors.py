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

"""Structured error system for changelogkit.

Every error has a unique ``CK-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorCode           │ A unique named ID like "CK-PARSE-INVALID-DATE" │
    │                     │ for each error. Readable at a glance.          │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ChangelogKitError   │ An exception you can raise. Carries the        │
    │                     │ error card so renderers can display it.        │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ TokenizeError /     │ The same card, raised by a specific stage and  │
    │ ParseError /        │ pointing at the line of the changelog that     │
    │ RenderError         │ caused it.                                     │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ explain()           │ Looks up an error code and prints details.     │
    └─────────────────────┴────────────────────────────────────────────────┘

Code categories::

    CK-TOKENIZE-*     Tokenizer errors
    CK-PARSE-*        Grammar errors
    CK-RENDER-*       Rendering / link derivation errors
    CK-RELEASE-*      Model mutation errors
    CK-VERSION-*      Version parsing errors
    CK-IO-*           File read/write errors
    CK-CONFIG-*       Configuration errors
    CK-GIT-*          Git remote discovery errors

Usage::

    from changelogkit.errors import E, ParseError

    raise ParseError(
        code=E.PARSE_INVALID_DATE,
        message="Invalid date '2024-13-40' in release heading",
        line=7,
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all changelogkit diagnostic codes."""

    # Tokenizer
    TOKENIZE_DANGLING_LINK = 'CK-TOKENIZE-DANGLING-LINK'

    # Parser
    PARSE_MISSING_TOKEN = 'CK-PARSE-MISSING-TOKEN'
    PARSE_INVALID_HEADING = 'CK-PARSE-INVALID-HEADING'
    PARSE_INVALID_VERSION = 'CK-PARSE-INVALID-VERSION'
    PARSE_INVALID_DATE = 'CK-PARSE-INVALID-DATE'
    PARSE_UNKNOWN_CHANGE_KIND = 'CK-PARSE-UNKNOWN-CHANGE-KIND'
    PARSE_INVALID_LINK = 'CK-PARSE-INVALID-LINK'
    PARSE_UNEXPECTED_TOKENS = 'CK-PARSE-UNEXPECTED-TOKENS'

    # Renderer
    RENDER_MISSING_URL = 'CK-RENDER-MISSING-URL'
    RENDER_INCONSISTENT_RELEASE = 'CK-RENDER-INCONSISTENT-RELEASE'

    # Model mutation
    RELEASE_DUPLICATE_UNRELEASED = 'CK-RELEASE-DUPLICATE-UNRELEASED'
    RELEASE_NO_UNRELEASED = 'CK-RELEASE-NO-UNRELEASED'
    RELEASE_NO_CHANGES = 'CK-RELEASE-NO-CHANGES'
    RELEASE_VERSION_EXISTS = 'CK-RELEASE-VERSION-EXISTS'
    RELEASE_NOT_FOUND = 'CK-RELEASE-NOT-FOUND'
    VERSION_INVALID = 'CK-VERSION-INVALID'

    # I/O
    IO_READ_FAILED = 'CK-IO-READ-FAILED'
    IO_WRITE_FAILED = 'CK-IO-WRITE-FAILED'

    # Configuration
    CONFIG_INVALID_KEY = 'CK-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'CK-CONFIG-INVALID-VALUE'
    CONFIG_PARSE_ERROR = 'CK-CONFIG-PARSE-ERROR'

    # Git
    GIT_REMOTE_NOT_FOUND = 'CK-GIT-REMOTE-NOT-FOUND'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``CK-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class ChangelogKitError(Exception):
    """Base exception for all changelogkit errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class _LocatedError(ChangelogKitError):
    """An error tied to a (1-based) line of the changelog source."""

    def __init__(self, code: ErrorCode, message: str, hint: str = '', *, line: int | None = None) -> None:
        """Initialize with an error code, message, hint, and source line."""
        self.line = line
        if line is not None:
            message = f'{message} (line {line})'
        super().__init__(code, message, hint)


class TokenizeError(_LocatedError):
    """Raised when raw markdown cannot be split into tokens."""


class ParseError(_LocatedError):
    """Raised when the token stream does not follow the changelog grammar."""


class RenderError(ChangelogKitError):
    """Raised when a changelog model cannot be rendered back to markdown."""


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.TOKENIZE_DANGLING_LINK: ErrorInfo(
        code=E.TOKENIZE_DANGLING_LINK,
        message='A reference link label has no URL on the same or the next line.',
        hint='Write link definitions as "[anchor]: https://..." on a single line.',
    ),
    E.PARSE_MISSING_TOKEN: ErrorInfo(
        code=E.PARSE_MISSING_TOKEN,
        message='A required element (such as the "# Title" heading) is missing.',
        hint='Every changelog must start with a level-one heading, e.g. "# Changelog".',
    ),
    E.PARSE_INVALID_HEADING: ErrorInfo(
        code=E.PARSE_INVALID_HEADING,
        message='A release heading is neither "[x.y.z] - YYYY-MM-DD" nor "[Unreleased]".',
        hint='Use "## [1.2.3] - 2024-01-31" or "## [Unreleased]".',
    ),
    E.PARSE_INVALID_VERSION: ErrorInfo(
        code=E.PARSE_INVALID_VERSION,
        message='A release heading contains a version that is not a semantic version.',
        hint='Versions must follow https://semver.org (MAJOR.MINOR.PATCH).',
    ),
    E.PARSE_INVALID_DATE: ErrorInfo(
        code=E.PARSE_INVALID_DATE,
        message='A release heading contains a date that does not exist.',
        hint='Dates are written as YYYY-MM-DD.',
    ),
    E.PARSE_UNKNOWN_CHANGE_KIND: ErrorInfo(
        code=E.PARSE_UNKNOWN_CHANGE_KIND,
        message='A "###" heading is not one of the six change kinds.',
        hint='Use Added, Changed, Deprecated, Removed, Fixed, or Security.',
    ),
    E.PARSE_UNEXPECTED_TOKENS: ErrorInfo(
        code=E.PARSE_UNEXPECTED_TOKENS,
        message='Content was found where the changelog grammar does not allow it.',
        hint='Check for text between change lists, or links that are not at the end of the file.',
    ),
    E.RENDER_MISSING_URL: ErrorInfo(
        code=E.RENDER_MISSING_URL,
        message='Compare links cannot be generated without a repository URL.',
        hint='Pass --remote-url, set remote_url in changelogkit.toml, or add a compare link to the file.',
    ),
    E.RENDER_INCONSISTENT_RELEASE: ErrorInfo(
        code=E.RENDER_INCONSISTENT_RELEASE,
        message='A release has a version without a date, or a date without a version.',
        hint='Released entries need both a version and a date; pending changes belong under [Unreleased].',
    ),
    E.RELEASE_NO_CHANGES: ErrorInfo(
        code=E.RELEASE_NO_CHANGES,
        message='The [Unreleased] section has no changes to release.',
        hint='Add entries under "## [Unreleased]" before cutting a release.',
    ),
    E.PARSE_INVALID_LINK: ErrorInfo(
        code=E.PARSE_INVALID_LINK,
        message='A reference link definition is not of the form "[anchor]: url".',
        hint='Link definitions belong at the end of the file, one per line.',
    ),
    E.RELEASE_DUPLICATE_UNRELEASED: ErrorInfo(
        code=E.RELEASE_DUPLICATE_UNRELEASED,
        message='The changelog has more than one [Unreleased] section.',
        hint='Merge the entries into a single "## [Unreleased]" section at the top.',
    ),
    E.RELEASE_NO_UNRELEASED: ErrorInfo(
        code=E.RELEASE_NO_UNRELEASED,
        message='A release was requested but the changelog has no [Unreleased] section.',
        hint='Add a "## [Unreleased]" section with the pending changes.',
    ),
    E.RELEASE_VERSION_EXISTS: ErrorInfo(
        code=E.RELEASE_VERSION_EXISTS,
        message='The requested release version is already in the changelog.',
        hint='Pick a version that is not in the changelog yet.',
    ),
    E.RELEASE_NOT_FOUND: ErrorInfo(
        code=E.RELEASE_NOT_FOUND,
        message='No release with the requested version exists.',
        hint='Run "changelogkit get latest" or check the release headings.',
    ),
    E.VERSION_INVALID: ErrorInfo(
        code=E.VERSION_INVALID,
        message='A version string is not a semantic version.',
        hint='Versions look like 1.2.3, 1.2.3-rc.1 or 1.2.3+build.5.',
    ),
    E.IO_READ_FAILED: ErrorInfo(
        code=E.IO_READ_FAILED,
        message='The changelog file could not be read.',
        hint='Check the path (--changelog-path or changelog_path) and that the file is UTF-8.',
    ),
    E.IO_WRITE_FAILED: ErrorInfo(
        code=E.IO_WRITE_FAILED,
        message='The changelog file could not be written.',
        hint='Check directory permissions; "changelogkit new" needs --force to replace a file.',
    ),
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='changelogkit.toml or a CHANGELOGKIT_* variable names an unknown setting.',
        hint='Valid keys: changelog_path, remote_url, tag_prefix, head, remote, debug.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A setting has a value of the wrong type.',
        hint='debug is a boolean; every other setting is a string.',
    ),
    E.CONFIG_PARSE_ERROR: ErrorInfo(
        code=E.CONFIG_PARSE_ERROR,
        message='changelogkit.toml is not valid TOML.',
        hint='Settings are flat top-level keys, e.g. tag_prefix = "v".',
    ),
    E.GIT_REMOTE_NOT_FOUND: ErrorInfo(
        code=E.GIT_REMOTE_NOT_FOUND,
        message='The repository URL could not be read from the git remote.',
        hint='Pass --remote-url, or set remote_url or remote in changelogkit.toml.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"CK-PARSE-INVALID-DATE"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: ChangelogKitError, *, file: TextIO | None = None) -> None:
    """Render an error in compiler style, with color on a terminal.

    Output format::

        error[CK-PARSE-INVALID-DATE]: Invalid date '2024-13-40' (line 7)
          |
          = hint: Dates are written as YYYY-MM-DD.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {rich_escape(exc.hint)}')
        console.print()
    else:
        print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ChangelogKitError',
    'ErrorCode',
    'ErrorInfo',
    'ParseError',
    'RenderError',
    'TokenizeError',
    'explain',
    'render_error',
]
