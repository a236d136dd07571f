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

"""Exception hierarchy for noticegen.

Library code raises these; only :mod:`noticegen.cli` turns them into an
exit status. :class:`LicenseNotFoundError` is the one recoverable
condition: the detection driver files the dependency under ``unknown``
and carries on.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    'ClassifierError',
    'ConfigError',
    'DependencyParseError',
    'LicenseLookupError',
    'LicenseNotFoundError',
    'NoticeGenError',
    'TemplateRenderError',
]


class NoticeGenError(Exception):
    """Base class for every error raised by noticegen."""


class ConfigError(NoticeGenError):
    """Raised when configuration values are missing or invalid."""


class DependencyParseError(NoticeGenError):
    """Raised when the dependency stream cannot be decoded.

    Attributes:
        offset: Character offset in the stream where decoding failed, or
            ``None`` when the stream could not be read at all.
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        self.offset = offset
        if offset is not None:
            message = f'{message} (at offset {offset})'
        super().__init__(message)


class LicenseNotFoundError(NoticeGenError):
    """Raised when no license can be found for a directory.

    Attributes:
        root: The directory that was searched.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        super().__init__(f'no license found under {root}' if root is not None else 'no license found')


class ClassifierError(NoticeGenError):
    """Raised when a license classifier fails to run."""


class LicenseLookupError(NoticeGenError):
    """Raised when a license identifier has no known name or text.

    Attributes:
        license_id: The identifier that failed to resolve.
    """

    def __init__(self, license_id: str, reason: str = '') -> None:
        self.license_id = license_id
        detail = f': {reason}' if reason else ''
        super().__init__(f'failed to look up license [{license_id}]{detail}')


class TemplateRenderError(NoticeGenError):
    """Raised when the NOTICE template cannot be loaded or rendered."""
