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

"""CLI entry point for changelogkit.

Subcommands::

    changelogkit validate          Check that the changelog parses
    changelogkit get <version>     Print one release ("latest" for the newest)
    changelogkit release <version> Turn [Unreleased] into a dated release
    changelogkit format            Rewrite the changelog in canonical form
    changelogkit new               Create an empty changelog
    changelogkit explain <code>    Explain an error code

Usage::

    # Release notes for the newest version, for a GitHub release body:
    changelogkit get latest > notes.md

    # Cut 1.4.0 from the pending changes:
    changelogkit release 1.4.0

    # Use v-prefixed tags in compare links:
    changelogkit --tag-prefix v format
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

from rich_argparse import RichHelpFormatter

from changelogkit import __version__
from changelogkit.changelog import Changelog
from changelogkit.config import ChangelogKitConfig, load_config
from changelogkit.errors import E, ChangelogKitError, explain, render_error
from changelogkit.files import read_changelog, write_changelog
from changelogkit.git import remote_url
from changelogkit.logging import changelog_context, configure_logging, get_logger
from changelogkit.release import Release
from changelogkit.render import render_release

logger = get_logger(__name__)

_LATEST = 'latest'


def _load_settings(args: argparse.Namespace) -> ChangelogKitConfig:
    """Load file and environment settings, then apply command-line flags."""
    config = load_config()
    overrides = {
        key: getattr(args, key)
        for key in ('changelog_path', 'remote_url', 'tag_prefix', 'head')
        if getattr(args, key, None) is not None
    }
    return dataclasses.replace(config, **overrides) if overrides else config


def _discover_url(config: ChangelogKitConfig) -> str | None:
    """Ask git for the repository URL, or return ``None`` if it cannot tell."""
    try:
        return remote_url(config.root, config.remote)
    except ChangelogKitError as exc:
        logger.debug('remote_url_unavailable', remote=config.remote, reason=exc.info.message)
        return None


def _read(config: ChangelogKitConfig) -> Changelog:
    """Read the configured changelog, filling in the repository URL from git if needed."""
    changelog = read_changelog(config.resolve_changelog_path(), config.parse_options())
    if changelog.url is None:
        changelog.url = _discover_url(config)
    return changelog


def _cmd_validate(config: ChangelogKitConfig, args: argparse.Namespace) -> int:
    """Handle the ``validate`` subcommand."""
    changelog = _read(config)
    if changelog.url is None:
        logger.warning('links_not_checked', reason='no repository URL')
    else:
        for found, expected in changelog.link_mismatches():
            logger.warning(
                'link_mismatch',
                anchor=found.anchor,
                found=found.url,
                expected=expected.url if expected else None,
            )
    print(f'Changelog is valid ({len(changelog.releases)} releases)')  # noqa: T201 - CLI output
    return 0


def _find(changelog: Changelog, version: str) -> Release:
    if version.lower() == _LATEST:
        release = changelog.latest_release()
        if release is None:
            raise ChangelogKitError(
                code=E.RELEASE_NOT_FOUND,
                message='The changelog has no released versions yet',
                hint='Run "changelogkit release <version>" to cut the first release.',
            )
        return release

    release = changelog.find_release(version[1:] if version[:1] in ('v', 'V') else version)
    if release is None:
        raise ChangelogKitError(
            code=E.RELEASE_NOT_FOUND,
            message=f'Release [{version}] not found',
            hint='Run "changelogkit get latest" or check the release headings.',
        )
    return release


def _cmd_get(config: ChangelogKitConfig, args: argparse.Namespace) -> int:
    """Handle the ``get`` subcommand."""
    changelog = read_changelog(config.resolve_changelog_path(), config.parse_options())
    print(render_release(_find(changelog, args.version)), end='')  # noqa: T201 - CLI output
    return 0


def _cmd_release(config: ChangelogKitConfig, args: argparse.Namespace) -> int:
    """Handle the ``release`` subcommand."""
    changelog = _read(config)
    release = changelog.cut_release(args.version)
    write_changelog(config.resolve_changelog_path(), changelog, dry_run=args.dry_run)
    print(f'Release [{release.version}] added')  # noqa: T201 - CLI output
    return 0


def _cmd_format(config: ChangelogKitConfig, args: argparse.Namespace) -> int:
    """Handle the ``format`` subcommand."""
    changelog = _read(config)
    text = write_changelog(config.resolve_changelog_path(), changelog, dry_run=args.dry_run)
    if args.dry_run:
        print(text, end='')  # noqa: T201 - CLI output
    else:
        print('Changelog formatted')  # noqa: T201 - CLI output
    return 0


def _cmd_new(config: ChangelogKitConfig, args: argparse.Namespace) -> int:
    """Handle the ``new`` subcommand.

    The new file holds a title, the standard description and an empty
    ``[Unreleased]`` section.
    """
    path = config.resolve_changelog_path()
    if path.exists() and not args.force:
        raise ChangelogKitError(
            code=E.IO_WRITE_FAILED,
            message=f'{path} already exists',
            hint='Pass --force to overwrite it.',
        )
    changelog = Changelog(
        url=config.remote_url or _discover_url(config),
        tag_prefix=config.tag_prefix,
        head=config.head,
        releases=[Release()],
    )
    write_changelog(path, changelog)
    print(f'Created {path}')  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


_COMMANDS = {
    'validate': _cmd_validate,
    'get': _cmd_get,
    'release': _cmd_release,
    'format': _cmd_format,
    'new': _cmd_new,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='changelogkit',
        description='Parse, validate and update Keep a Changelog files.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--changelog-path',
        '-p',
        metavar='PATH',
        default=None,
        help='Changelog file (default: CHANGELOG.md, or changelog_path in changelogkit.toml).',
    )
    parser.add_argument(
        '--remote-url',
        metavar='URL',
        default=None,
        help='Repository URL for compare links. Discovered from the changelog or git when omitted.',
    )
    parser.add_argument(
        '--tag-prefix',
        metavar='PREFIX',
        default=None,
        help='Prefix that turns a version into a tag name (e.g. v).',
    )
    parser.add_argument(
        '--head',
        metavar='REF',
        default=None,
        help='Ref the [Unreleased] section is compared against (default: HEAD).',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log JSON lines instead of console output.')

    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser(
        'validate',
        help='Check that the changelog parses and its links are up to date.',
    )

    get_parser = subparsers.add_parser(
        'get',
        help='Print the notes of one release.',
    )
    get_parser.add_argument(
        'version',
        help='Version to print (a leading "v" is accepted), or "latest".',
    )

    release_parser = subparsers.add_parser(
        'release',
        help='Move the [Unreleased] changes into a new release dated today.',
    )
    release_parser.add_argument('version', help='Version of the new release (e.g. 1.4.0).')
    release_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Compute the new changelog without writing it.',
    )

    format_parser = subparsers.add_parser(
        'format',
        help='Rewrite the changelog in canonical form.',
    )
    format_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the formatted changelog instead of writing it.',
    )

    new_parser = subparsers.add_parser(
        'new',
        help='Create a changelog with an empty [Unreleased] section.',
    )
    new_parser.add_argument('--force', action='store_true', help='Overwrite an existing file.')

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
    )
    explain_parser.add_argument(
        'code',
        help='Error code to explain (e.g., CK-PARSE-INVALID-DATE).',
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments to parse (defaults to ``sys.argv[1:]``).

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_settings(args)
        configure_logging(
            verbose=args.verbose or config.debug,
            quiet=args.quiet,
            json_log=args.json_log,
        )

        command = args.command
        if command == 'explain':
            return _cmd_explain(args)
        handler = _COMMANDS.get(command)
        if handler is not None:
            with changelog_context(config.resolve_changelog_path()):
                return handler(config, args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except ChangelogKitError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
