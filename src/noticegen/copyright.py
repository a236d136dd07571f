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

"""Extract the copyright line from a license file."""

from __future__ import annotations

import re
from collections.abc import Collection
from pathlib import Path
from typing import Final

__all__ = [
    'COPYRIGHT_RE',
    'DEFAULT_SKIP_LICENSES',
    'detect_copyright',
]

COPYRIGHT_RE: Final[re.Pattern[str]] = re.compile(r'[Cc]opyright\s+\(\s*[Cc]\s*\)')

# The Apache-2.0 text is a template with no per-project holder line.
DEFAULT_SKIP_LICENSES: Final[tuple[str, ...]] = ('Apache-2.0',)


def detect_copyright(
    license_id: str,
    path: Path,
    *,
    skip: Collection[str] = DEFAULT_SKIP_LICENSES,
) -> str:
    """Return the first ``Copyright (c)`` line of *path*.

    Args:
        license_id: License the file was classified as.
        path: The license file.
        skip: Licenses whose files are not searched.

    Returns:
        The matching line without trailing whitespace, or ``''``.

    Raises:
        OSError: If the file cannot be read.
    """
    if license_id in skip:
        return ''
    with path.open(encoding='utf-8', errors='replace') as f:
        for line in f:
            if COPYRIGHT_RE.search(line):
                return line.rstrip()
    return ''
