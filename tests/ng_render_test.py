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

"""Tests for NOTICE template rendering."""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from noticegen._types import LicenseInfo, NoticeData
from noticegen.errors import TemplateRenderError
from noticegen.render import (
    DEFAULT_TEMPLATE,
    current_year,
    header,
    load_template,
    render_notice,
    render_text,
)


def _notices(tmp_path: Path) -> list[NoticeData]:
    return [
        NoticeData(
            'MIT',
            'MIT License',
            'Permission is hereby granted...\n',
            [
                LicenseInfo('github.com/pkg/errors', tmp_path, 'v0.9.1', 'Copyright (c) 2015 Dave Cheney'),
                LicenseInfo('github.com/google/uuid', tmp_path),
            ],
        ),
    ]


class TestHelpers:
    """Tests for the template helpers."""

    def test_header(self) -> None:
        """The text is framed by dashes of equal length."""
        assert header('MIT License') == '-----------\nMIT License\n-----------'

    def test_header_empty(self) -> None:
        """An empty header is three empty lines."""
        assert header('') == '\n\n'

    def test_current_year(self) -> None:
        """The current year is returned as a string."""
        assert current_year() == str(datetime.date.today().year)


class TestLoadTemplate:
    """Tests for load_template()."""

    def test_default_template_exists(self) -> None:
        """The built-in template ships with the package."""
        assert DEFAULT_TEMPLATE.is_file()
        assert load_template(None) is not None

    def test_missing_template(self, tmp_path: Path) -> None:
        """A missing file raises TemplateRenderError."""
        with pytest.raises(TemplateRenderError, match='not found'):
            load_template(tmp_path / 'nope.tmpl')

    def test_syntax_error(self, tmp_path: Path) -> None:
        """A template that does not parse raises TemplateRenderError."""
        bad = tmp_path / 'bad.tmpl'
        bad.write_text('{% for x in notices %}never closed')
        with pytest.raises(TemplateRenderError, match='failed to parse'):
            load_template(bad)


class TestRenderText:
    """Tests for render_text()."""

    def test_custom_template(self, tmp_path: Path) -> None:
        """Templates see notices and helpers."""
        tmpl = tmp_path / 'NOTICE.tmpl'
        tmpl.write_text(
            '{{ header("Notices " ~ current_year()) }}\n'
            '{% for n in notices %}{{ n.license_name | header }}\n'
            '{% for d in n.dependencies %}{{ d.package }}|{{ d.version }}|{{ d.copyright }}\n{% endfor %}'
            '{% endfor %}'
        )
        out = render_text(_notices(tmp_path), load_template(tmpl))
        year = current_year()
        assert out.startswith(f'{"-" * (8 + len(year))}\nNotices {year}\n')
        assert '-----------\nMIT License\n-----------\n' in out
        assert 'github.com/pkg/errors|v0.9.1|Copyright (c) 2015 Dave Cheney\n' in out
        assert 'github.com/google/uuid||\n' in out

    def test_undefined_field(self, tmp_path: Path) -> None:
        """Referencing a missing field is an error, not silent output."""
        tmpl = tmp_path / 'NOTICE.tmpl'
        tmpl.write_text('{% for n in notices %}{{ n.no_such_field }}{% endfor %}')
        with pytest.raises(TemplateRenderError, match='failed to render'):
            render_text(_notices(tmp_path), load_template(tmpl))

    def test_default_template(self, tmp_path: Path) -> None:
        """The built-in template lists dependencies and license text."""
        out = render_text(_notices(tmp_path), load_template())
        assert 'Third-party software notices' in out
        assert 'MIT License' in out
        assert '* github.com/pkg/errors (v0.9.1)\n' in out
        assert '  Copyright (c) 2015 Dave Cheney\n' in out
        assert '* github.com/google/uuid\n' in out
        assert 'Permission is hereby granted...' in out


class TestRenderNotice:
    """Tests for render_notice()."""

    def test_writes_file(self, tmp_path: Path) -> None:
        """Output goes to the given path."""
        out = tmp_path / 'NOTICE.txt'
        render_notice(_notices(tmp_path), None, out)
        assert 'github.com/pkg/errors' in out.read_text(encoding='utf-8')

    def test_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """'-' writes to stdout."""
        render_notice(_notices(tmp_path), None, '-')
        assert 'github.com/google/uuid' in capsys.readouterr().out

    def test_render_error_keeps_existing_output(self, tmp_path: Path) -> None:
        """A failing template does not truncate the old NOTICE."""
        out = tmp_path / 'NOTICE.txt'
        out.write_text('previous')
        tmpl = tmp_path / 'bad.tmpl'
        tmpl.write_text('{{ notices[0].nope }}')
        with pytest.raises(TemplateRenderError):
            render_notice(_notices(tmp_path), tmpl, out)
        assert out.read_text() == 'previous'
