"""
Tests for metadata configuration loading.
"""
import json

import pytest
from values_metadata.config import ENV_COMMENT_FORMAT, ENV_TAG_PARAM, MetadataConfig, load_config
from values_metadata.errors import ConfigurationError
from values_metadata.patterns import compile_tag_patterns


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (ENV_COMMENT_FORMAT, ENV_TAG_PARAM):
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()
        assert config.comments.format == "##"
        assert config.tags.param == "@param"
        assert config.tags.section == "@section"
        assert config.tags.skip == "@skip"
        assert config.tags.extra == "@extra"

    def test_json_file_with_unknown_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "comments": {"format": "#"},
            "tags": {"param": "@value"},
            "modifiers": {"array": "array"},
        }))
        config = load_config(path)
        assert config.comments.format == "#"
        assert config.tags.param == "@value"
        # Untouched keys keep their defaults
        assert config.tags.section == "@section"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("tags:\n  skip: '@ignore'\n")
        assert load_config(path).tags.skip == "@ignore"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("comments:\n  format: '#'\n")
        monkeypatch.setenv(ENV_COMMENT_FORMAT, "//")
        assert load_config(path).comments.format == "//"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv(ENV_TAG_PARAM, "@env")
        config = load_config(overrides={"tags": {"param": "@override", "extra": "@more"}})
        assert config.tags.param == "@env"
        assert config.tags.extra == "@more"

    def test_null_block_keeps_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("tags:\n")
        assert load_config(path).tags.param == "@param"

    def test_empty_tag_is_invalid(self):
        with pytest.raises(ConfigurationError, match="Invalid metadata config"):
            load_config(overrides={"tags": {"param": ""}})

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(path)


class TestCompileTagPatterns:
    def test_missing_config(self):
        with pytest.raises(ConfigurationError, match="required"):
            compile_tag_patterns(None)

    def test_patterns_match(self):
        patterns = compile_tag_patterns(MetadataConfig())
        match = patterns.param.match("## @param a.b [nullable] Desc")
        assert match.groups() == ("a.b", "[nullable]", "Desc")
        assert patterns.section.match("## @section Title").group(1) == "Title"
