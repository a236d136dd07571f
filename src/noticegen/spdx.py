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

r"""Offline lookup of canonical license names and texts.

Texts come from a local checkout of the SPDX
`license-list-data <https://github.com/spdx/license-list-data>`_
repository. No network access is ever attempted.

Data Flow::

    ┌──────────────┐     ┌───────────────────────────┐     ┌──────────────┐
    │ SPDX ID      │────→│ extra texts dir/<id>.txt  │────→│ LicenseText  │
    │ e.g. mit     │     │ json/details/<id>.json    │     │ (name, text) │
    │  → MIT       │     │ text/<id>.txt + name from │     │              │
    │              │     │ json/licenses.json        │     │              │
    └──────────────┘     └───────────────────────────┘     └──────────────┘

Identifiers are normalized with the SPDX licensing index bundled in
``license-expression`` before the lookup, so ``mit`` finds ``MIT.json``.
``<license> WITH <exception>`` identifiers combine the license text with
the exception text from ``json/exceptions/<id>.json``.

Usage::

    from noticegen.spdx import SpdxLicenseStore

    store = SpdxLicenseStore(Path('license-list-data'))
    lic = store.lookup('Apache-2.0')
    # lic.name == 'Apache License 2.0'
"""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from license_expression import ExpressionError, Licensing, get_spdx_licensing

from noticegen.errors import LicenseLookupError
from noticegen.logging import get_logger

__all__ = [
    'LicenseText',
    'LicenseTextStore',
    'SpdxLicenseStore',
    'canonical_license_id',
    'split_license_expression',
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class LicenseText:
    """Canonical name and full text of a license.

    Attributes:
        license_id: The SPDX identifier.
        name: Human-readable license name.
        text: Full license text.
    """

    license_id: str
    name: str
    text: str


class LicenseTextStore(Protocol):
    """Maps a license identifier to its canonical name and text."""

    def lookup(self, license_id: str) -> LicenseText:
        """Return the name and text of *license_id*.

        Raises:
            LicenseLookupError: If the identifier is unknown.
        """
        ...


@functools.cache
def _spdx_licensing() -> Licensing:
    return get_spdx_licensing()


def canonical_license_id(license_id: str) -> str:
    """Normalize *license_id* to canonical SPDX casing.

    Identifiers unknown to the SPDX index are returned stripped but
    otherwise unchanged.
    """
    raw = license_id.strip()
    if not raw:
        return raw
    try:
        parsed = _spdx_licensing().parse(raw)
    except ExpressionError:
        return raw
    if parsed is None:
        return raw
    return parsed.render()


def split_license_expression(expression: str) -> list[str]:
    """Return the license keys of an SPDX expression, in order.

    ``"MIT OR Apache-2.0"`` gives ``["MIT", "Apache-2.0"]``. A ``WITH``
    clause stays attached to its license, so
    ``"GPL-2.0-only WITH Classpath-exception-2.0"`` is a single key. A
    string that does not parse is returned as its own single key.
    """
    raw = expression.strip()
    if not raw:
        return []
    try:
        symbols = Licensing().license_symbols(raw, unique=True, decompose=False)
    except ExpressionError:
        return [raw]
    return [symbol.render('{symbol.key}') for symbol in symbols]


class SpdxLicenseStore:
    """License texts backed by an SPDX ``license-list-data`` checkout.

    Args:
        data_dir: Root of the checkout (holding ``json/`` and ``text/``).
            ``None`` means only *extra_texts_dir* is consulted.
        extra_texts_dir: Directory of ``<id>.txt`` files that take
            precedence over the SPDX data. Useful for ``LicenseRef-*``
            identifiers; the identifier doubles as the name.
    """

    def __init__(self, data_dir: Path | None, *, extra_texts_dir: Path | None = None) -> None:
        self._data_dir = data_dir
        self._extra_texts_dir = extra_texts_dir

    @functools.cached_property
    def _names(self) -> dict[str, str]:
        if self._data_dir is None:
            return {}
        index = self._data_dir / 'json' / 'licenses.json'
        if not index.is_file():
            return {}
        try:
            data = json.loads(index.read_text(encoding='utf-8'))
        except (json.JSONDecodeError, OSError):
            logger.warning('spdx_index_load_failed', path=str(index))
            return {}
        return {
            str(entry['licenseId']): str(entry.get('name', entry['licenseId']))
            for entry in data.get('licenses', [])
            if isinstance(entry, dict) and 'licenseId' in entry
        }

    def _from_extra(self, license_id: str) -> LicenseText | None:
        if self._extra_texts_dir is None:
            return None
        path = self._extra_texts_dir / f'{license_id}.txt'
        if not path.is_file():
            return None
        text = path.read_text(encoding='utf-8')
        return LicenseText(license_id=license_id, name=self._names.get(license_id, license_id), text=text)

    def _from_details(self, license_id: str) -> LicenseText | None:
        if self._data_dir is None:
            return None
        path = self._data_dir / 'json' / 'details' / f'{license_id}.json'
        if not path.is_file():
            return None
        try:
            data: dict[str, Any] = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as exc:
            raise LicenseLookupError(license_id, f'malformed {path}: {exc.msg}') from exc
        text = data.get('licenseText')
        if not isinstance(text, str) or not text:
            return None
        return LicenseText(
            license_id=str(data.get('licenseId', license_id)),
            name=str(data.get('name', license_id)),
            text=text,
        )

    def _from_text(self, license_id: str) -> LicenseText | None:
        if self._data_dir is None:
            return None
        path = self._data_dir / 'text' / f'{license_id}.txt'
        if not path.is_file():
            return None
        return LicenseText(
            license_id=license_id,
            name=self._names.get(license_id, license_id),
            text=path.read_text(encoding='utf-8'),
        )

    def _exception(self, exception_id: str) -> tuple[str, str] | None:
        """Return ``(name, text)`` of a license exception, if known."""
        if self._extra_texts_dir is not None:
            path = self._extra_texts_dir / f'{exception_id}.txt'
            if path.is_file():
                return exception_id, path.read_text(encoding='utf-8')
        if self._data_dir is None:
            return None
        details = self._data_dir / 'json' / 'exceptions' / f'{exception_id}.json'
        if details.is_file():
            try:
                data: dict[str, Any] = json.loads(details.read_text(encoding='utf-8'))
            except json.JSONDecodeError as exc:
                raise LicenseLookupError(exception_id, f'malformed {details}: {exc.msg}') from exc
            text = data.get('licenseExceptionText')
            if isinstance(text, str) and text:
                return str(data.get('name', exception_id)), text
        path = self._data_dir / 'text' / f'{exception_id}.txt'
        if path.is_file():
            return exception_id, path.read_text(encoding='utf-8')
        return None

    def _find(self, *candidates: str) -> LicenseText | None:
        for candidate in dict.fromkeys(candidates):
            for source in (self._from_extra, self._from_details, self._from_text):
                found = source(candidate)
                if found is not None:
                    logger.debug('license_text_found', license=candidate, source=source.__name__)
                    return found
        return None

    def _find_with_exception(self, expression: str) -> LicenseText | None:
        license_part, _, exception_id = expression.partition(' WITH ')
        base = self._find(license_part)
        if base is None:
            return None
        exception = self._exception(exception_id)
        if exception is None:
            raise LicenseLookupError(expression, f'exception {exception_id} not in the SPDX license list data')
        exception_name, exception_text = exception
        return LicenseText(
            license_id=expression,
            name=f'{base.name} with {exception_name}',
            text=f'{base.text.rstrip()}\n\n{exception_text}',
        )

    def lookup(self, license_id: str) -> LicenseText:
        """Return the name and text of *license_id*.

        ``<license> WITH <exception>`` identifiers resolve to the license
        text followed by the exception text, unless the extra texts dir
        holds a file for the whole identifier.

        Raises:
            LicenseLookupError: If no source knows the identifier.
        """
        canonical = canonical_license_id(license_id)
        if not canonical:
            raise LicenseLookupError(license_id, 'empty identifier')
        try:
            found = self._find(canonical, license_id.strip())
            if found is None and ' WITH ' in canonical:
                found = self._find_with_exception(canonical)
        except OSError as exc:
            raise LicenseLookupError(license_id, str(exc)) from exc
        if found is None:
            raise LicenseLookupError(license_id, 'not in the SPDX license list data')
        return found
