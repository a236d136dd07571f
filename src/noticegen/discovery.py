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

"""Locate a dependency's license file by its name.

The walk is top-down: every entry of a directory is checked (in sorted
order) before any subdirectory is entered, so a top-level ``LICENSE``
always wins over one buried in ``third_party/``. A directory whose name
matches (e.g. ``licenses/``) is not descended into.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

from noticegen.errors import LicenseNotFoundError
from noticegen.logging import get_logger

__all__ = [
    'LICENSE_FILE_RE',
    'find_license_file',
    'is_license_file_name',
]

logger = get_logger(__name__)

LICENSE_FILE_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    (?:
        licen[cs]es?
      | legal
      | copy(?:left|right|ing)
      | unlicense
      | [la]?gpl[-_]?v?\d+(?:\.\d+)*
      | bsd
      | mit
      | apache
    )
    (?:\.(?:txt|md|rst))?
    """,
    re.IGNORECASE | re.VERBOSE,
)


def is_license_file_name(name: str) -> bool:
    """Return ``True`` if the base name *name* looks like a license file."""
    return LICENSE_FILE_RE.fullmatch(name) is not None


def find_license_file(root: Path) -> Path:
    """Return the first license file found under *root*.

    Args:
        root: Dependency source directory.

    Returns:
        Path of the license file.

    Raises:
        LicenseNotFoundError: If *root* is not a directory or holds no
            regular file with a license-like name. Broken symlinks and
            other special files are skipped.
    """
    if not root.is_dir():
        raise LicenseNotFoundError(root)

    for dirpath, dirnames, filenames in os.walk(root):
        subdirs = set(dirnames)
        for name in sorted(dirnames + filenames):
            if not is_license_file_name(name):
                continue
            if name in subdirs:
                dirnames.remove(name)
                continue
            found = Path(dirpath) / name
            if not found.is_file():
                logger.debug('license_file_skipped', path=str(found))
                continue
            logger.debug('license_file_found', path=str(found))
            return found
        dirnames.sort()

    raise LicenseNotFoundError(root)
