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

"""Render NOTICE data through a Jinja2 template.

Templates receive ``notices``, the list of
:class:`~noticegen._types.NoticeData` sorted by license name, and two
helpers:

``current_year()``
    The current year as a string.

``header(text)`` (also a filter: ``{{ name | header }}``)
    *text* framed above and below by a line of ``-`` of equal length.

The built-in template lives at ``templates/NOTICE.txt.j2`` beside this
module and is used when no template path is given.
"""

from __future__ import annotations

import datetime
import sys
from collections.abc import Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError

from noticegen._types import NoticeData
from noticegen.errors import TemplateRenderError
from noticegen.logging import get_logger

__all__ = [
    'DEFAULT_TEMPLATE',
    'TEMPLATES_DIR',
    'current_year',
    'header',
    'load_template',
    'render_notice',
    'render_text',
]

logger = get_logger(__name__)

TEMPLATES_DIR: Path = Path(__file__).resolve().parent / 'templates'
"""Absolute path to the directory holding the built-in templates."""

DEFAULT_TEMPLATE: Path = TEMPLATES_DIR / 'NOTICE.txt.j2'


def current_year() -> str:
    """Return the current year, e.g. ``"2026"``."""
    return str(datetime.date.today().year)


def header(text: str) -> str:
    """Frame *text* between two dashed lines of the same length."""
    line = '-' * len(text)
    return '\n'.join([line, text, line])


def _environment(search_dir: Path) -> Environment:
    env = Environment(  # noqa: S701 - renders plain text, not HTML
        loader=FileSystemLoader(str(search_dir)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals['current_year'] = current_year
    env.globals['header'] = header
    env.filters['header'] = header
    return env


def load_template(path: Path | None = None) -> Template:
    """Load the template at *path*, or the built-in one.

    Raises:
        TemplateRenderError: If the file is missing or does not parse.
    """
    path = path or DEFAULT_TEMPLATE
    if not path.is_file():
        raise TemplateRenderError(f'template not found: {path}')
    try:
        return _environment(path.parent).get_template(path.name)
    except TemplateError as exc:
        raise TemplateRenderError(f'failed to parse template at {path}: {exc}') from exc


def render_text(notices: Sequence[NoticeData], template: Template) -> str:
    """Render *notices* with *template* and return the text."""
    try:
        return template.render(notices=list(notices))
    except TemplateError as exc:
        raise TemplateRenderError(f'failed to render template: {exc}') from exc


def render_notice(
    notices: Sequence[NoticeData],
    template_path: Path | None,
    output_path: str | Path,
) -> None:
    """Render *notices* and write the result to *output_path*.

    The whole document is rendered before the output is opened, so a
    template error leaves an existing output file untouched.

    Args:
        notices: NOTICE data, one entry per license.
        template_path: Template file, ``None`` for the built-in one.
        output_path: Destination file, ``'-'`` for stdout.
    """
    text = render_text(notices, load_template(template_path))
    if str(output_path) == '-':
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    try:
        Path(output_path).write_text(text, encoding='utf-8')
    except OSError as exc:
        raise TemplateRenderError(f'failed to write output file {output_path}: {exc}') from exc
    logger.info('notice_written', path=str(output_path), licenses=len(notices))
