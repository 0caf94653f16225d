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

"""Repository URL discovery from the local ``git`` remote.

Remote URLs come in several shapes; compare links need the browsable
https form::

    git@github.com:org/repo.git         ─┐
    ssh://git@github.com/org/repo.git   ─┼─► https://github.com/org/repo
    https://github.com/org/repo.git     ─┘
"""

from __future__ import annotations

import re
from pathlib import Path

from changelogkit._run import TimeoutExpired, run_command
from changelogkit.errors import E, ChangelogKitError
from changelogkit.logging import get_logger

log = get_logger(__name__)

# git@host:owner/repo(.git)
_SCP_RE = re.compile(r'^[\w.-]+@(?P<host>[^:/]+):(?P<path>.+)$')
# ssh://[user@]host[:port]/owner/repo(.git)
_SSH_RE = re.compile(r'^ssh://(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?/(?P<path>.+)$')


def normalize_remote_url(url: str) -> str:
    """Turn a git remote URL into the https URL of the repository page."""
    url = url.strip()
    m = _SCP_RE.match(url) or _SSH_RE.match(url)
    if m is not None:
        url = f'https://{m.group("host")}/{m.group("path")}'
    url = url.rstrip('/')
    if url.endswith('.git'):
        url = url[: -len('.git')]
    return url


def remote_url(repo_root: Path, remote: str = 'origin') -> str:
    """Return the normalized URL of ``remote`` in the repository at ``repo_root``.

    Raises:
        ChangelogKitError: If git is unavailable or the remote does not exist.
    """
    cmd = ['git', 'remote', 'get-url', remote]
    try:
        result = run_command(cmd, cwd=repo_root)
    except (FileNotFoundError, TimeoutExpired) as exc:
        raise ChangelogKitError(
            code=E.GIT_REMOTE_NOT_FOUND,
            message=f'Could not run {" ".join(cmd)}: {exc}',
            hint='Install git, or pass --remote-url explicitly.',
        ) from exc

    if not result.ok or not result.stdout.strip():
        raise ChangelogKitError(
            code=E.GIT_REMOTE_NOT_FOUND,
            message=f"Git remote '{remote}' not found in {repo_root}",
            hint='Pass --remote-url, or set remote_url in changelogkit.toml.',
        )

    url = normalize_remote_url(result.stdout)
    log.debug('remote_url', remote=remote, url=url)
    return url


__all__ = [
    'normalize_remote_url',
    'remote_url',
]
