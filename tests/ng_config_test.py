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

"""Tests for configuration resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from noticegen.classify import ClassifierKind
from noticegen.config import NoticeConfig, find_config_file, load_config_file, resolve_config
from noticegen.deps import InputFormat
from noticegen.errors import ConfigError


class TestDefaults:
    """Tests for default configuration."""

    def test_no_sources(self, tmp_path: Path) -> None:
        """Nothing configured gives the dataclass defaults."""
        assert resolve_config(env={}, cwd=tmp_path) == NoticeConfig()

    def test_default_values(self) -> None:
        """Defaults read stdin, write stdout and skip Apache copyrights."""
        config = NoticeConfig()
        assert config.input == '-'
        assert config.output == '-'
        assert config.input_format is InputFormat.PACKAGES
        assert config.classifier is ClassifierKind.PATTERNS
        assert config.skip_copyright == ('Apache-2.0',)


class TestConfigFile:
    """Tests for TOML config files."""

    def test_noticegen_toml(self, tmp_path: Path) -> None:
        """noticegen.toml in the working directory is picked up."""
        (tmp_path / 'noticegen.toml').write_text(
            'format = "modules"\n'
            'include_indirect = true\n'
            'license_data_dir = "third_party/license-list-data"\n'
            'skip_copyright = ["Apache-2.0", "MPL-2.0"]\n'
        )
        config = resolve_config(env={}, cwd=tmp_path)
        assert config.input_format is InputFormat.MODULES
        assert config.include_indirect is True
        assert config.license_data_dir == tmp_path / 'third_party' / 'license-list-data'
        assert config.skip_copyright == ('Apache-2.0', 'MPL-2.0')

    def test_pyproject_tool_table(self, tmp_path: Path) -> None:
        """[tool.noticegen] in pyproject.toml is used when present."""
        (tmp_path / 'pyproject.toml').write_text('[project]\nname = "x"\n\n[tool.noticegen]\noutput = "NOTICE.txt"\n')
        assert find_config_file(tmp_path) == tmp_path / 'pyproject.toml'
        assert resolve_config(env={}, cwd=tmp_path).output == str(tmp_path / 'NOTICE.txt')

    def test_pyproject_without_table_is_ignored(self, tmp_path: Path) -> None:
        """A pyproject.toml without [tool.noticegen] is not a config file."""
        (tmp_path / 'pyproject.toml').write_text('[project]\nname = "x"\n')
        assert find_config_file(tmp_path) is None

    def test_noticegen_toml_wins_over_pyproject(self, tmp_path: Path) -> None:
        """The dedicated file takes precedence."""
        (tmp_path / 'pyproject.toml').write_text('[tool.noticegen]\nformat = "modules"\n')
        (tmp_path / 'noticegen.toml').write_text('format = "packages"\n')
        assert find_config_file(tmp_path) == tmp_path / 'noticegen.toml'

    def test_dash_paths_are_kept(self, tmp_path: Path) -> None:
        """'-' is not resolved against the config directory."""
        cfg = tmp_path / 'noticegen.toml'
        cfg.write_text('input = "-"\noutput = "-"\n')
        assert load_config_file(cfg) == {'input': '-', 'output': '-'}

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        """Absolute paths survive resolution."""
        cfg = tmp_path / 'noticegen.toml'
        cfg.write_text('template = "/etc/noticegen/NOTICE.j2"\n')
        assert load_config_file(cfg)['template'] == '/etc/noticegen/NOTICE.j2'

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        cfg = tmp_path / 'noticegen.toml'
        cfg.write_text('colour = true\n')
        with pytest.raises(ConfigError, match='colour'):
            load_config_file(cfg)

    def test_malformed_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigError."""
        cfg = tmp_path / 'noticegen.toml'
        cfg.write_text('format = \n')
        with pytest.raises(ConfigError, match='failed to read config'):
            resolve_config(env={}, cwd=tmp_path)

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        """An explicit --config that does not exist is an error."""
        with pytest.raises(ConfigError, match='not found'):
            resolve_config(config_path=tmp_path / 'missing.toml', env={}, cwd=tmp_path)


class TestPrecedence:
    """Tests for layer precedence."""

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        """Environment variables beat the config file."""
        (tmp_path / 'noticegen.toml').write_text('license_data_dir = "from-file"\n')
        config = resolve_config(env={'NOTICEGEN_LICENSE_DATA': '/from/env'}, cwd=tmp_path)
        assert config.license_data_dir == Path('/from/env')

    def test_cli_overrides_env(self, tmp_path: Path) -> None:
        """CLI values beat the environment."""
        config = resolve_config(
            {'license_data_dir': '/from/cli', 'scancode_bin': None},
            env={'NOTICEGEN_LICENSE_DATA': '/from/env', 'SCANCODE_BIN': '/env/scancode'},
            cwd=tmp_path,
        )
        assert config.license_data_dir == Path('/from/cli')
        assert config.scancode_bin == '/env/scancode'

    def test_none_cli_values_are_unset(self, tmp_path: Path) -> None:
        """None from an absent flag does not clobber lower layers."""
        (tmp_path / 'noticegen.toml').write_text('format = "modules"\n')
        config = resolve_config({'format': None, 'include_indirect': None}, env={}, cwd=tmp_path)
        assert config.input_format is InputFormat.MODULES
        assert config.include_indirect is False


class TestValidation:
    """Tests for value validation."""

    def test_invalid_format(self, tmp_path: Path) -> None:
        """An unknown format is rejected with the choices."""
        with pytest.raises(ConfigError, match='packages, modules'):
            resolve_config({'format': 'npm'}, env={}, cwd=tmp_path)

    def test_invalid_classifier(self, tmp_path: Path) -> None:
        """An unknown classifier is rejected."""
        with pytest.raises(ConfigError, match='invalid classifier'):
            resolve_config({'classifier': 'magic'}, env={}, cwd=tmp_path)

    def test_include_indirect_must_be_bool(self, tmp_path: Path) -> None:
        """include_indirect must be a TOML boolean."""
        (tmp_path / 'noticegen.toml').write_text('include_indirect = "yes"\n')
        with pytest.raises(ConfigError, match='boolean'):
            resolve_config(env={}, cwd=tmp_path)

    def test_skip_copyright_must_be_list(self, tmp_path: Path) -> None:
        """skip_copyright must be a list of strings."""
        (tmp_path / 'noticegen.toml').write_text('skip_copyright = "Apache-2.0"\n')
        with pytest.raises(ConfigError, match='skip_copyright'):
            resolve_config(env={}, cwd=tmp_path)

    def test_unknown_cli_key(self, tmp_path: Path) -> None:
        """Unknown CLI keys are rejected."""
        with pytest.raises(ConfigError, match='unknown option'):
            resolve_config({'colour': True}, env={}, cwd=tmp_path)

    def test_skip_copyright_is_canonicalized(self, tmp_path: Path) -> None:
        """Lower-case ids in skip_copyright match detected licenses."""
        (tmp_path / 'noticegen.toml').write_text('skip_copyright = ["apache-2.0", " mit "]\n')
        assert resolve_config(env={}, cwd=tmp_path).skip_copyright == ('Apache-2.0', 'MIT')
