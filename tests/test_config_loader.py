"""Tests for quill.config_loader — quill.yaml / quill.toml merging."""

from pathlib import Path

import pytest

from quill._errors import ConfigError
from quill.config_loader import load_config


class TestLoadConfig:
    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.port == 8080
        assert config.root == tmp_path

    def test_yaml_top_level(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("port: 9001\ndocument: page.html\n")
        config = load_config(tmp_path)
        assert config.port == 9001
        assert config.document == "page.html"

    def test_yaml_quill_section(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yml").write_text("quill:\n  debounce_ms: 500\n")
        assert load_config(tmp_path).debounce_ms == 500

    def test_toml(self, tmp_path: Path) -> None:
        (tmp_path / "quill.toml").write_text('[quill]\nstyle_source = "main.scss"\n')
        assert load_config(tmp_path).style_source == "main.scss"

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("port: 9002\ntheme: dark\n")
        assert load_config(tmp_path).port == 9002

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("port: 9001\nhost: 0.0.0.0\n")
        config = load_config(tmp_path, port=7000)
        assert config.port == 7000
        assert config.host == "0.0.0.0"

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("port: 9001\n")
        assert load_config(tmp_path, port=None, host=None).port == 9001

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="quill.yaml"):
            load_config(tmp_path)

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "quill.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "quill.toml").write_text("port = \n")
        with pytest.raises(ConfigError, match="quill.toml"):
            load_config(tmp_path)
