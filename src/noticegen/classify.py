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

r"""Classify a dependency directory into candidate licenses.

A classifier maps a directory to ``{spdx_id: LicenseMatch}``. Two
implementations ship:

    ┌───────────────────┬──────────────────────────────────────────────────┐
    │ Classifier        │ How it scores                                    │
    ├───────────────────┼──────────────────────────────────────────────────┤
    │ PatternClassifier │ Finds the license file by name, then matches    │
    │ (``patterns``)    │ well-known phrases; each phrase has a fixed     │
    │                   │ confidence reflecting how specific it is.       │
    ├───────────────────┼──────────────────────────────────────────────────┤
    │ ScancodeClassifier│ Runs the ScanCode toolkit CLI over the whole    │
    │ (``scancode``)    │ directory and keeps its per-match scores.       │
    └───────────────────┴──────────────────────────────────────────────────┘

:func:`select_best_license` then picks one license and one file out of
the candidates, deterministically.

Usage::

    from noticegen.classify import PatternClassifier, select_best_license

    matches = PatternClassifier().classify(Path('vendor/github.com/pkg/errors'))
    license_id, license_file = select_best_license(matches)
"""

from __future__ import annotations

import enum
import json
import os
import re
import shutil
import subprocess  # noqa: S404 - runs the scancode CLI
import tempfile
from pathlib import Path
from typing import Any, Final, Protocol

from noticegen._types import LicenseMatch
from noticegen.discovery import find_license_file
from noticegen.errors import ClassifierError, LicenseNotFoundError
from noticegen.logging import get_logger
from noticegen.spdx import split_license_expression

__all__ = [
    'ClassifierKind',
    'LicenseClassifier',
    'PatternClassifier',
    'ScancodeClassifier',
    'make_classifier',
    'matches_from_scancode',
    'select_best_license',
]

logger = get_logger(__name__)


class ClassifierKind(str, enum.Enum):
    """Available license classifiers."""

    PATTERNS = 'patterns'
    SCANCODE = 'scancode'


class LicenseClassifier(Protocol):
    """Maps a directory to candidate licenses."""

    def classify(self, root: Path) -> dict[str, LicenseMatch]:
        """Return candidate licenses for the sources under *root*.

        Raises:
            LicenseNotFoundError: If no candidate license exists.
            ClassifierError: If the classifier itself failed.
        """
        ...


# ── Best-license selection ───────────────────────────────────────────


def select_best_license(matches: dict[str, LicenseMatch]) -> tuple[str, str]:
    """Pick the most likely license and the file that supports it.

    The identifier with the strictly highest confidence wins; ties go to
    the lexicographically smallest identifier. The file is the smallest
    path whose confidence equals the winner's, else the most confident
    file, else ``''``.

    Raises:
        LicenseNotFoundError: If no candidate has a positive confidence.
    """
    candidates = [(license_id, match) for license_id, match in matches.items() if match.confidence > 0]
    if not candidates:
        raise LicenseNotFoundError()

    best_id, best = min(candidates, key=lambda item: (-item[1].confidence, item[0]))

    exact = sorted(path for path, confidence in best.files.items() if confidence == best.confidence)
    if exact:
        return best_id, exact[0]
    if best.files:
        path, _ = min(best.files.items(), key=lambda item: (-item[1], item[0]))
        return best_id, path
    return best_id, ''


# ── Pattern classifier ───────────────────────────────────────────────

# Only the head of a license file is inspected.
_HEAD_CHARS: Final[int] = 2000

# (phrase, SPDX ID, confidence). Phrases shared by several licenses get
# a lower confidence than the phrase that tells them apart.
_LICENSE_PHRASES: Final[list[tuple[re.Pattern[str], str, float]]] = [
    (re.compile(r'Apache License[\s\S]*?Version 2\.0', re.IGNORECASE), 'Apache-2.0', 0.95),
    (re.compile(r'Apache License', re.IGNORECASE), 'Apache-2.0', 0.7),
    (re.compile(r'Permission is hereby granted, free of charge', re.IGNORECASE), 'MIT', 0.9),
    (re.compile(r'MIT License', re.IGNORECASE), 'MIT', 0.8),
    (re.compile(r'BSD 3-Clause', re.IGNORECASE), 'BSD-3-Clause', 0.9),
    (re.compile(r'BSD 2-Clause', re.IGNORECASE), 'BSD-2-Clause', 0.9),
    (re.compile(r'Neither the name of', re.IGNORECASE), 'BSD-3-Clause', 0.85),
    (re.compile(r'Redistribution and use in source and binary forms', re.IGNORECASE), 'BSD-2-Clause', 0.75),
    (re.compile(r'GNU LESSER GENERAL PUBLIC LICENSE[\s\S]*?Version 3', re.IGNORECASE), 'LGPL-3.0-only', 0.95),
    (re.compile(r'GNU LESSER GENERAL PUBLIC LICENSE[\s\S]*?Version 2\.1', re.IGNORECASE), 'LGPL-2.1-only', 0.95),
    (re.compile(r'GNU AFFERO GENERAL PUBLIC LICENSE[\s\S]*?Version 3', re.IGNORECASE), 'AGPL-3.0-only', 0.95),
    (re.compile(r'GNU GENERAL PUBLIC LICENSE[\s\S]*?Version 3', re.IGNORECASE), 'GPL-3.0-only', 0.9),
    (re.compile(r'GNU GENERAL PUBLIC LICENSE[\s\S]*?Version 2', re.IGNORECASE), 'GPL-2.0-only', 0.9),
    (re.compile(r'Mozilla Public License[\s\S]*?2\.0', re.IGNORECASE), 'MPL-2.0', 0.95),
    (re.compile(r'Eclipse Public License[\s\S]*?2\.0', re.IGNORECASE), 'EPL-2.0', 0.95),
    (re.compile(r'Eclipse Public License[\s\S]*?1\.0', re.IGNORECASE), 'EPL-1.0', 0.95),
    (re.compile(r'ISC License', re.IGNORECASE), 'ISC', 0.9),
    (
        re.compile(r'Permission to use, copy, modify, and(?:/or)? distribute this software for any purpose', re.I),
        'ISC',
        0.8,
    ),
    (re.compile(r'The Unlicense', re.IGNORECASE), 'Unlicense', 0.9),
    (re.compile(r'This is free and unencumbered software released into the public domain', re.I), 'Unlicense', 0.9),
    (re.compile(r'Boost Software License', re.IGNORECASE), 'BSL-1.0', 0.9),
    (re.compile(r'Creative Commons.*CC0', re.IGNORECASE), 'CC0-1.0', 0.9),
    (re.compile(r'zlib License', re.IGNORECASE), 'Zlib', 0.9),
]

# Weak evidence from the file name alone, used when no phrase matches.
_NAME_HINTS: Final[dict[str, str]] = {
    'apache': 'Apache-2.0',
    'mit': 'MIT',
    'unlicense': 'Unlicense',
}
_NAME_HINT_CONFIDENCE: Final[float] = 0.5


def _score_text(text: str) -> dict[str, float]:
    scores: dict[str, float] = {}
    for pattern, spdx_id, confidence in _LICENSE_PHRASES:
        if confidence > scores.get(spdx_id, 0.0) and pattern.search(text):
            scores[spdx_id] = confidence
    return scores


class PatternClassifier:
    """Phrase-matching classifier over the discovered license file."""

    def classify(self, root: Path) -> dict[str, LicenseMatch]:
        """Classify the license file found under *root*."""
        license_file = find_license_file(root)
        try:
            head = license_file.read_text(encoding='utf-8', errors='replace')[:_HEAD_CHARS]
        except OSError as exc:
            logger.warning('license_file_unreadable', path=str(license_file), error=str(exc))
            raise LicenseNotFoundError(root) from exc

        scores = _score_text(head)
        if not scores:
            stem = license_file.name.split('.', 1)[0].lower()
            hint = _NAME_HINTS.get(stem)
            if hint is not None:
                scores[hint] = _NAME_HINT_CONFIDENCE
        if not scores:
            logger.debug('license_text_unrecognized', path=str(license_file))
            raise LicenseNotFoundError(root)

        relative = license_file.relative_to(root).as_posix()
        return {spdx_id: LicenseMatch(confidence, {relative: confidence}) for spdx_id, confidence in scores.items()}


# ── ScanCode classifier ──────────────────────────────────────────────


def _add_match(
    found: dict[str, dict[str, float]],
    expression: str,
    path: str,
    score: float,
) -> None:
    for key in split_license_expression(expression):
        files = found.setdefault(key, {})
        if score > files.get(path, 0.0):
            files[path] = score


def matches_from_scancode(report: dict[str, Any]) -> dict[str, LicenseMatch]:
    """Convert a ScanCode JSON report into license matches.

    Both the current ``license_detections`` layout (ScanCode 32+) and the
    older per-file ``licenses`` list are understood. Scores are scaled
    from 0–100 to 0.0–1.0; each license keeps its best score per file and
    its overall confidence is the best score over all files.
    """
    found: dict[str, dict[str, float]] = {}
    for entry in report.get('files', []):
        if not isinstance(entry, dict) or entry.get('type', 'file') != 'file':
            continue
        path = str(entry.get('path', ''))
        for detection in entry.get('license_detections') or []:
            for match in detection.get('matches') or []:
                expression = (
                    match.get('license_expression_spdx')
                    or match.get('spdx_license_expression')
                    or detection.get('license_expression_spdx')
                    or ''
                )
                _add_match(found, expression, path, float(match.get('score', 0)) / 100)
        for legacy in entry.get('licenses') or []:
            _add_match(found, legacy.get('spdx_license_key') or '', path, float(legacy.get('score', 0)) / 100)

    return {key: LicenseMatch(max(files.values()), files) for key, files in found.items() if files}


class ScancodeClassifier:
    """Classifier backed by the ScanCode toolkit CLI.

    Args:
        executable: Path to the ``scancode`` executable. Falls back to
            ``$SCANCODE_BIN`` and then to ``scancode`` on ``PATH``.
        processes: Worker processes passed to ``scancode -n``.
        timeout: Seconds to wait for a single scan, ``None`` for no limit.
    """

    def __init__(self, executable: str = '', *, processes: int = 1, timeout: float | None = None) -> None:
        self._executable = executable
        self._processes = processes
        self._timeout = timeout

    def _resolve_executable(self) -> str:
        candidate = self._executable or os.environ.get('SCANCODE_BIN', '') or shutil.which('scancode')
        if not candidate:
            raise ClassifierError('scancode executable not found; set scancode_bin or SCANCODE_BIN')
        return candidate

    def classify(self, root: Path) -> dict[str, LicenseMatch]:
        """Scan *root* with ScanCode and return its license matches."""
        if not root.is_dir():
            raise LicenseNotFoundError(root)
        executable = self._resolve_executable()

        with tempfile.TemporaryDirectory(prefix='noticegen-') as tmp:
            report_path = Path(tmp) / 'scan.json'
            cmd = [
                executable,
                '--license',
                '--strip-root',
                '--quiet',
                '-n',
                str(self._processes),
                '--json',
                str(report_path),
                str(root),
            ]
            logger.debug('scancode_run', root=str(root))
            try:
                proc = subprocess.run(  # noqa: S603 - arguments are not shell-interpreted
                    cmd,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=self._timeout,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                raise ClassifierError(f'failed to run scancode on {root}: {exc}') from exc
            if proc.returncode != 0:
                raise ClassifierError(f'scancode exited with {proc.returncode} on {root}: {proc.stderr.strip()}')
            try:
                report = json.loads(report_path.read_text(encoding='utf-8'))
            except (OSError, json.JSONDecodeError) as exc:
                raise ClassifierError(f'unreadable scancode report for {root}: {exc}') from exc

        matches = matches_from_scancode(report)
        if not matches:
            raise LicenseNotFoundError(root)
        return matches


def make_classifier(kind: ClassifierKind | str, *, scancode_bin: str = '') -> LicenseClassifier:
    """Build the classifier named by *kind*."""
    if ClassifierKind(kind) is ClassifierKind.SCANCODE:
        return ScancodeClassifier(scancode_bin)
    return PatternClassifier()
