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

"""Detect each dependency's license and assemble the NOTICE data.

Detection is best effort: a dependency whose license cannot be found is
filed under ``unknown`` and an unreadable copyright line is logged and
left empty. A classifier failure or an unknown license identifier ends
the run.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from noticegen._types import UNKNOWN_LICENSE, Dependency, LicenseInfo, NoticeData
from noticegen.classify import LicenseClassifier, select_best_license
from noticegen.copyright import DEFAULT_SKIP_LICENSES, detect_copyright
from noticegen.errors import LicenseNotFoundError
from noticegen.logging import get_logger
from noticegen.spdx import LicenseTextStore, canonical_license_id

__all__ = [
    'UNKNOWN_LICENSE_NAME',
    'detect_licenses',
    'generate_notice_data',
]

logger = get_logger(__name__)

UNKNOWN_LICENSE_NAME = 'Licence Unknown'


def detect_licenses(
    deps: Iterable[Dependency],
    classifier: LicenseClassifier,
    *,
    skip_copyright: Collection[str] = DEFAULT_SKIP_LICENSES,
) -> dict[str, list[LicenseInfo]]:
    """Group *deps* by detected license.

    Args:
        deps: Dependencies to inspect.
        classifier: Produces candidate licenses for a directory.
        skip_copyright: Licenses whose files are not searched for a
            copyright line.

    Returns:
        SPDX identifier (or ``"unknown"``) to the dependencies under it,
        both in first-seen order.

    Raises:
        ClassifierError: If the classifier fails for a dependency.
    """
    groups: dict[str, list[LicenseInfo]] = {}
    for dep in deps:
        try:
            license_id, license_file = select_best_license(classifier.classify(dep.root))
        except LicenseNotFoundError:
            logger.warning('license_not_found', package=dep.path, root=str(dep.root))
            groups.setdefault(UNKNOWN_LICENSE, []).append(
                LicenseInfo(package=dep.path, root=dep.root, version=dep.version)
            )
            continue

        license_id = canonical_license_id(license_id)
        copyright_line = ''
        if license_file:
            try:
                copyright_line = detect_copyright(license_id, dep.root / license_file, skip=skip_copyright)
            except OSError as exc:
                logger.warning('copyright_read_failed', package=dep.path, path=license_file, error=str(exc))

        logger.debug('license_detected', package=dep.path, license=license_id, file=license_file)
        groups.setdefault(license_id, []).append(
            LicenseInfo(package=dep.path, root=dep.root, version=dep.version, copyright=copyright_line)
        )
    return groups


def generate_notice_data(
    groups: dict[str, list[LicenseInfo]],
    store: LicenseTextStore,
) -> list[NoticeData]:
    """Attach license names and texts to each group.

    Returns:
        One :class:`NoticeData` per license, sorted by license name.

    Raises:
        LicenseLookupError: If a license identifier cannot be looked up.
    """
    notices: list[NoticeData] = []
    for license_id, infos in groups.items():
        if license_id == UNKNOWN_LICENSE:
            notices.append(NoticeData(UNKNOWN_LICENSE, UNKNOWN_LICENSE_NAME, '', list(infos)))
            continue
        lic = store.lookup(license_id)
        notices.append(NoticeData(license_id, lic.name, lic.text, list(infos)))

    notices.sort(key=lambda n: (n.license_name, n.license_id))
    return notices
