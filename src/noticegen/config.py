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

r"""Configuration for noticegen.

Settings are merged from four layers, highest first::

    ┌────────────┬──────────────────────────────────────────────────────┐
    │ Layer      │ Source                                               │
    ├────────────┼──────────────────────────────────────────────────────┤
    │ CLI        │ ``--in``, ``--format``, ``--license-data``, ...      │
    │ Env        │ ``NOTICEGEN_LICENSE_DATA``, ``NOTICEGEN_TEMPLATE``,  │
    │            │ ``SCANCODE_BIN``                                     │
    │ TOML file  │ ``--config``, else ``noticegen.toml``, else          │
    │            │ ``[tool.noticegen]`` in ``pyproject.toml``           │
    │ Defaults   │ :class:`NoticeConfig` field defaults                 │
    └────────────┴──────────────────────────────────────────────────────┘

Relative paths in a TOML file are resolved against the file's directory.

Example ``noticegen.toml``::

    format = "modules"
    include_indirect = true
    license_data_dir = "third_party/license-list-data"
    template = "NOTICE.txt.j2"
    output = "NOTICE.txt"
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from noticegen.classify import ClassifierKind
from noticegen.copyright import DEFAULT_SKIP_LICENSES
from noticegen.deps import InputFormat
from noticegen.errors import ConfigError
from noticegen.logging import get_logger
from noticegen.spdx import canonical_license_id

__all__ = [
    'CONFIG_FILE_NAME',
    'NoticeConfig',
    'find_config_file',
    'load_config_file',
    'resolve_config',
]

logger = get_logger(__name__)

CONFIG_FILE_NAME: Final[str] = 'noticegen.toml'

_KEYS: Final[frozenset[str]] = frozenset({
    'classifier',
    'format',
    'include_indirect',
    'input',
    'license_data_dir',
    'license_texts_dir',
    'output',
    'scancode_bin',
    'skip_copyright',
    'template',
})

_PATH_KEYS: Final[tuple[str, ...]] = ('input', 'output', 'template', 'license_data_dir', 'license_texts_dir')

_ENV_KEYS: Final[dict[str, str]] = {
    'NOTICEGEN_LICENSE_DATA': 'license_data_dir',
    'NOTICEGEN_TEMPLATE': 'template',
    'SCANCODE_BIN': 'scancode_bin',
}


@dataclass(frozen=True)
class NoticeConfig:
    """Resolved settings for one noticegen run.

    Attributes:
        input: Dependency listing path, ``'-'`` for stdin.
        output: NOTICE output path, ``'-'`` for stdout.
        template: Template file, ``None`` for the built-in template.
        input_format: Listing format (``format`` in TOML).
        include_indirect: Keep indirect modules (module listings only).
        classifier: Which license classifier to run.
        license_data_dir: SPDX ``license-list-data`` checkout.
        license_texts_dir: Extra ``<id>.txt`` license texts.
        skip_copyright: Licenses whose files carry no copyright line.
        scancode_bin: ScanCode executable for the ``scancode`` classifier.
    """

    input: str = '-'
    output: str = '-'
    template: Path | None = None
    input_format: InputFormat = InputFormat.PACKAGES
    include_indirect: bool = False
    classifier: ClassifierKind = ClassifierKind.PATTERNS
    license_data_dir: Path | None = None
    license_texts_dir: Path | None = None
    skip_copyright: tuple[str, ...] = DEFAULT_SKIP_LICENSES
    scancode_bin: str = ''


def find_config_file(cwd: Path) -> Path | None:
    """Return the config file that applies in *cwd*, if any.

    ``noticegen.toml`` wins; a ``pyproject.toml`` only counts when it has
    a ``[tool.noticegen]`` table.
    """
    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    pyproject = cwd / 'pyproject.toml'
    if pyproject.is_file() and 'noticegen' in _read_toml(pyproject).get('tool', {}):
        return pyproject
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open('rb') as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f'failed to read config {path}: {exc}') from exc


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the noticegen settings from *path*.

    Raises:
        ConfigError: If the file is unreadable or has unknown keys.
    """
    data = _read_toml(path)
    if path.name == 'pyproject.toml':
        data = data.get('tool', {}).get('noticegen', {})

    unknown = sorted(set(data) - _KEYS)
    if unknown:
        raise ConfigError(f'unknown key(s) in {path}: {", ".join(unknown)}')

    values = dict(data)
    for key in _PATH_KEYS:
        raw = values.get(key)
        if isinstance(raw, str) and raw and raw != '-':
            values[key] = str(path.parent / raw)
    return values


def _optional_path(values: Mapping[str, Any], key: str) -> Path | None:
    raw = values.get(key)
    if raw is None or raw == '':
        return None
    if not isinstance(raw, (str, Path)):
        raise ConfigError(f'{key} must be a path, got {raw!r}')
    return Path(raw)


def _build(values: Mapping[str, Any]) -> NoticeConfig:
    try:
        input_format = InputFormat(values.get('format', InputFormat.PACKAGES))
    except ValueError:
        choices = ', '.join(f.value for f in InputFormat)
        raise ConfigError(f'invalid format {values.get("format")!r}; expected one of: {choices}') from None
    try:
        classifier = ClassifierKind(values.get('classifier', ClassifierKind.PATTERNS))
    except ValueError:
        choices = ', '.join(c.value for c in ClassifierKind)
        raise ConfigError(f'invalid classifier {values.get("classifier")!r}; expected one of: {choices}') from None

    include_indirect = values.get('include_indirect', False)
    if not isinstance(include_indirect, bool):
        raise ConfigError(f'include_indirect must be a boolean, got {include_indirect!r}')

    skip = values.get('skip_copyright', DEFAULT_SKIP_LICENSES)
    if not isinstance(skip, (list, tuple)) or not all(isinstance(s, str) for s in skip):
        raise ConfigError(f'skip_copyright must be a list of license ids, got {skip!r}')

    return NoticeConfig(
        input=str(values.get('input', '-')),
        output=str(values.get('output', '-')),
        template=_optional_path(values, 'template'),
        input_format=input_format,
        include_indirect=include_indirect,
        classifier=classifier,
        license_data_dir=_optional_path(values, 'license_data_dir'),
        license_texts_dir=_optional_path(values, 'license_texts_dir'),
        skip_copyright=tuple(canonical_license_id(s) for s in skip),
        scancode_bin=str(values.get('scancode_bin', '')),
    )


def resolve_config(
    cli: Mapping[str, Any] | None = None,
    *,
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> NoticeConfig:
    """Merge CLI values, environment and TOML file into a config.

    Args:
        cli: Values from command-line flags; ``None`` entries are unset.
        config_path: Explicit config file (must exist).
        env: Environment mapping, defaults to :data:`os.environ`.
        cwd: Directory searched for a config file, defaults to the
            working directory.

    Raises:
        ConfigError: On a missing explicit file, unknown keys or invalid
            values.
    """
    env = os.environ if env is None else env
    cwd = Path.cwd() if cwd is None else cwd

    if config_path is not None and not config_path.is_file():
        raise ConfigError(f'config file not found: {config_path}')
    path = config_path or find_config_file(cwd)

    values: dict[str, Any] = {}
    if path is not None:
        values.update(load_config_file(path))
        logger.debug('config_loaded', path=str(path))

    for var, key in _ENV_KEYS.items():
        if env.get(var):
            values[key] = env[var]

    cli_values = {k: v for k, v in (cli or {}).items() if v is not None}
    unknown = sorted(set(cli_values) - _KEYS)
    if unknown:
        raise ConfigError(f'unknown option(s): {", ".join(unknown)}')
    values.update(cli_values)

    return _build(values)
