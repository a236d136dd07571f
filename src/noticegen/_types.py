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

"""Shared leaf-level types used across noticegen.

This module must have **zero** imports from other ``noticegen``
modules to avoid circular-import chains.  It is safe to import
from any module in the project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    'UNKNOWN_LICENSE',
    'Dependency',
    'LicenseInfo',
    'LicenseMatch',
    'NoticeData',
]

#: Group key for dependencies whose license could not be detected.
UNKNOWN_LICENSE = 'unknown'


@dataclass(frozen=True)
class Dependency:
    """An external package or module taken from a dependency listing.

    Attributes:
        path: Import path (packages) or module path (modules).
        root: Directory holding the dependency's sources.
        version: Version string, empty when the listing carries none.
        indirect: ``True`` for modules only needed transitively.
    """

    path: str
    root: Path
    version: str = ''
    indirect: bool = False


@dataclass(frozen=True)
class LicenseMatch:
    """A candidate license reported by a classifier.

    Attributes:
        confidence: Overall confidence for this license, 0.0 to 1.0.
        files: Supporting files (relative to the dependency root)
            mapped to the confidence of each file's match.
    """

    confidence: float
    files: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LicenseInfo:
    """One dependency's entry inside a license group of the NOTICE."""

    package: str
    root: Path
    version: str = ''
    copyright: str = ''


@dataclass(frozen=True)
class NoticeData:
    """A license and every dependency distributed under it.

    Attributes:
        license_id: SPDX identifier, or ``"unknown"``.
        license_name: Human-readable license name.
        license_text: Full canonical license text (empty for unknown).
        dependencies: Dependencies under this license, in detection order.
    """

    license_id: str
    license_name: str
    license_text: str
    dependencies: list[LicenseInfo] = field(default_factory=list)
