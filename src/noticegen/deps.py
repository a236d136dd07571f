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

r"""Parse dependency listings into :class:`Dependency` records.

Two listing formats are understood, both emitted by the Go toolchain as
a stream of JSON objects (concatenated, usually pretty-printed, with no
enclosing array):

    ┌──────────┬──────────────────────────────┬─────────────────────────────┐
    │ Format   │ Producer                     │ Kept records                │
    ├──────────┼──────────────────────────────┼─────────────────────────────┤
    │ packages │ ``go list -deps -json ./...``│ not stdlib and ``DepOnly``  │
    ├──────────┼──────────────────────────────┼─────────────────────────────┤
    │ modules  │ ``go list -m -json all``     │ not ``Main``; ``Indirect``  │
    │          │                              │ only when asked for         │
    └──────────┴──────────────────────────────┴─────────────────────────────┘

Usage::

    from noticegen.deps import InputFormat, open_input, parse_dependencies

    with open_input('-') as stream:
        deps = parse_dependencies(stream, InputFormat.MODULES)
"""

from __future__ import annotations

import contextlib
import enum
import json
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import IO, Any

from noticegen._types import Dependency
from noticegen.errors import DependencyParseError
from noticegen.logging import get_logger

__all__ = [
    'InputFormat',
    'iter_json_values',
    'open_input',
    'parse_dependencies',
    'parse_modules',
    'parse_packages',
]

logger = get_logger(__name__)

_DECODER = json.JSONDecoder()
_WHITESPACE_RE = re.compile(r'\s*')


class InputFormat(str, enum.Enum):
    """Supported dependency listing formats."""

    PACKAGES = 'packages'
    MODULES = 'modules'


def open_input(path: str | Path) -> contextlib.AbstractContextManager[IO[str]]:
    """Open a dependency listing for reading.

    ``'-'`` selects stdin, which is left open when the context exits. Files
    may start with a UTF-8 byte order mark.

    Raises:
        DependencyParseError: If the file cannot be opened.
    """
    if str(path) == '-':
        return contextlib.nullcontext(sys.stdin)
    try:
        return Path(path).open(encoding='utf-8-sig')
    except OSError as exc:
        raise DependencyParseError(f'failed to open dependency listing {path}: {exc.strerror}') from exc


def iter_json_values(text: str) -> Iterator[Any]:
    """Yield each JSON value from a stream of concatenated values.

    Values may be separated by any amount of whitespace (newline-delimited
    JSON is a special case).

    Raises:
        DependencyParseError: If a value is malformed.
    """
    pos = _WHITESPACE_RE.match(text, 0).end()  # type: ignore[union-attr]  # \s* always matches
    end = len(text)
    while pos < end:
        try:
            value, pos = _DECODER.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            raise DependencyParseError(f'failed to parse dependencies: {exc.msg}', offset=exc.pos) from exc
        yield value
        pos = _WHITESPACE_RE.match(text, pos).end()  # type: ignore[union-attr]


def _iter_records(stream: IO[str]) -> Iterator[dict[str, Any]]:
    for value in iter_json_values(stream.read()):
        if not isinstance(value, dict):
            raise DependencyParseError(f'expected a JSON object, got {type(value).__name__}')
        yield value


def parse_packages(stream: IO[str]) -> list[Dependency]:
    """Parse ``go list -deps -json`` output.

    Keeps packages that are outside the standard library and are
    dependencies of the listed packages rather than the packages
    themselves.

    Args:
        stream: Text stream holding the listing.

    Returns:
        Kept dependencies in input order.
    """
    deps: list[Dependency] = []
    for record in _iter_records(stream):
        if record.get('GoRoot') or record.get('Standard') or not record.get('DepOnly'):
            continue
        import_path = str(record.get('ImportPath', ''))
        root = record.get('Root') or ''
        if not root:
            logger.warning('dependency_without_root', package=import_path)
            continue
        module = record.get('Module') or {}
        deps.append(
            Dependency(
                path=import_path,
                root=Path(root),
                version=str(module.get('Version', '') or ''),
            )
        )
    logger.debug('parsed_packages', count=len(deps))
    return deps


def parse_modules(stream: IO[str], *, include_indirect: bool = False) -> list[Dependency]:
    """Parse ``go list -m -json all`` output.

    The main module is always dropped. When a module is replaced, the
    replacement's directory and version are used; a local-path
    replacement (no version) keeps the original version.

    Args:
        stream: Text stream holding the listing.
        include_indirect: Keep modules marked ``Indirect``.

    Returns:
        Kept dependencies in input order.
    """
    deps: list[Dependency] = []
    for record in _iter_records(stream):
        if record.get('Main'):
            continue
        indirect = bool(record.get('Indirect'))
        if indirect and not include_indirect:
            continue
        path = str(record.get('Path', ''))
        version = str(record.get('Version', '') or '')
        root = record.get('Dir') or ''
        replace = record.get('Replace')
        if isinstance(replace, dict):
            root = replace.get('Dir') or root
            version = replace.get('Version') or version
        if not root:
            logger.warning('module_not_downloaded', module=path, version=version)
            continue
        deps.append(Dependency(path=path, root=Path(root), version=version, indirect=indirect))
    logger.debug('parsed_modules', count=len(deps), include_indirect=include_indirect)
    return deps


def parse_dependencies(
    stream: IO[str],
    input_format: InputFormat = InputFormat.PACKAGES,
    *,
    include_indirect: bool = False,
) -> list[Dependency]:
    """Parse a listing in *input_format*."""
    if input_format is InputFormat.MODULES:
        return parse_modules(stream, include_indirect=include_indirect)
    return parse_packages(stream)
