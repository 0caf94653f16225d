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

"""Configuration loading for changelogkit.

Settings come from three layers; later layers win::

    changelogkit.toml  ──►  CHANGELOGKIT_* env vars  ──►  CLI flags
    (nearest ancestor)      (CI overrides)                (one-off runs)

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ changelogkit.toml   │ A small file next to your CHANGELOG.md that    │
    │                     │ says where the repo lives and how tags look.   │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ remote_url          │ The web address of the repo. Compare links     │
    │                     │ at the bottom of the changelog point there.    │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ tag_prefix          │ What goes in front of the version in a tag,    │
    │                     │ e.g. "v" turns 1.2.3 into v1.2.3.              │
    └─────────────────────┴────────────────────────────────────────────────┘

Example ``changelogkit.toml``::

    changelog_path = "CHANGELOG.md"
    remote_url = "https://github.com/org/repo"
    tag_prefix = "v"
"""

from __future__ import annotations

import difflib
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from changelogkit.errors import E, ChangelogKitError
from changelogkit.links import DEFAULT_HEAD
from changelogkit.logging import get_logger
from changelogkit.parser import ParseOptions

logger = get_logger(__name__)

CONFIG_FILENAME = 'changelogkit.toml'
ENV_PREFIX = 'CHANGELOGKIT_'
DEFAULT_CHANGELOG_PATH = 'CHANGELOG.md'
DEFAULT_REMOTE = 'origin'

_TYPE_MAP: dict[str, type] = {
    'changelog_path': str,
    'remote_url': str,
    'tag_prefix': str,
    'head': str,
    'remote': str,
    'debug': bool,
}

VALID_KEYS: frozenset[str] = frozenset(_TYPE_MAP)

_TRUE = frozenset({'1', 'true', 'yes', 'on'})
_FALSE = frozenset({'0', 'false', 'no', 'off', ''})


@dataclass(frozen=True)
class ChangelogKitConfig:
    """Resolved changelogkit settings.

    Attributes:
        changelog_path: Changelog location, relative to the config file's
            directory (or the working directory when there is no file).
        remote_url: Repository URL for compare links. Discovered from git
            when unset.
        tag_prefix: Prefix that turns a version into a tag name.
        head: Ref the Unreleased section is compared against.
        remote: Git remote consulted when ``remote_url`` is unset.
        debug: Enable debug logging.
        config_path: The file these settings were read from, if any.
    """

    changelog_path: str = DEFAULT_CHANGELOG_PATH
    remote_url: str | None = None
    tag_prefix: str | None = None
    head: str = DEFAULT_HEAD
    remote: str = DEFAULT_REMOTE
    debug: bool = False
    config_path: Path | None = None

    @property
    def root(self) -> Path:
        """Directory relative paths are resolved against."""
        return self.config_path.parent if self.config_path is not None else Path.cwd()

    def resolve_changelog_path(self) -> Path:
        """Return the absolute changelog path."""
        path = Path(self.changelog_path)
        return path if path.is_absolute() else self.root / path

    def parse_options(self) -> ParseOptions:
        """Return the parser options these settings imply."""
        return ParseOptions(url=self.remote_url, tag_prefix=self.tag_prefix, head=self.head)


def _suggest_key(unknown: str) -> str | None:
    """Return the closest valid key for a typo, or None."""
    matches = difflib.get_close_matches(unknown, VALID_KEYS, n=1, cutoff=0.6)
    return matches[0] if matches else None


def _validate_value_type(key: str, value: Any, *, context: str) -> None:  # noqa: ANN401 - dynamic config values
    """Raise if a config value has the wrong type."""
    expected = _TYPE_MAP[key]
    if not isinstance(value, expected):
        raise ChangelogKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be {expected.__name__}, got {type(value).__name__}",
            hint=f'Check the value of {key} in {context}.',
        )


def _check_keys(keys: list[str], *, context: str) -> None:
    for key in keys:
        if key in VALID_KEYS:
            continue
        suggestion = _suggest_key(key)
        raise ChangelogKitError(
            code=E.CONFIG_INVALID_KEY,
            message=f"Unknown key '{key}' in {context}",
            hint=f"Did you mean '{suggestion}'?" if suggestion else f'Valid keys: {", ".join(sorted(VALID_KEYS))}.',
        )


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: the working directory) to the nearest config file."""
    cwd = (start or Path.cwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _read_file(config_path: Path) -> dict[str, Any]:
    try:
        text = config_path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ChangelogKitError(
            code=E.IO_READ_FAILED,
            message=f'Failed to read {config_path}: {exc}',
        ) from exc

    try:
        doc = tomlkit.parse(text)
    except tomlkit.exceptions.TOMLKitError as exc:
        raise ChangelogKitError(
            code=E.CONFIG_PARSE_ERROR,
            message=f'Failed to parse {config_path}: {exc}',
            hint='Check the file for TOML syntax errors.',
        ) from exc

    raw: dict[str, Any] = doc.unwrap()
    _check_keys(list(raw), context=CONFIG_FILENAME)
    for key, value in raw.items():
        _validate_value_type(key, value, context=CONFIG_FILENAME)
    return raw


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ChangelogKitError(
        code=E.CONFIG_INVALID_VALUE,
        message=f"{name}={value!r} is not a boolean",
        hint='Use one of 1, true, yes, on (or 0, false, no, off).',
    )


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect ``CHANGELOGKIT_<KEY>`` settings from the environment.

    Raises:
        ChangelogKitError: For an unknown key or a malformed boolean.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for name, value in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        key = name[len(ENV_PREFIX) :].lower()
        _check_keys([key], context='the environment')
        overrides[key] = _parse_bool(name, value) if _TYPE_MAP[key] is bool else value
    return overrides


def load_config(start: Path | None = None, *, environ: Mapping[str, str] | None = None) -> ChangelogKitConfig:
    """Load settings from the nearest ``changelogkit.toml`` and the environment.

    Args:
        start: Directory to start the config file search from.
        environ: Environment mapping (defaults to :data:`os.environ`).

    Returns:
        A validated :class:`ChangelogKitConfig`. Defaults apply when there
        is no config file.

    Raises:
        ChangelogKitError: If the file or an environment variable holds an
            unknown key or a value of the wrong type.
    """
    config_path = find_config(start)
    values: dict[str, Any] = {}
    if config_path is None:
        logger.debug('no_changelogkit_config', start=str(start or Path.cwd()))
    else:
        values.update(_read_file(config_path))
        logger.debug('config_loaded', path=str(config_path), keys=sorted(values))

    values.update(env_overrides(environ))
    return ChangelogKitConfig(**values, config_path=config_path)


__all__ = [
    'CONFIG_FILENAME',
    'ENV_PREFIX',
    'VALID_KEYS',
    'ChangelogKitConfig',
    'env_overrides',
    'find_config',
    'load_config',
]
