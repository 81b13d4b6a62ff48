"""Tests for codec configuration."""
import json

import pytest

from jsonld_rdf.config import (
    CONFIG_FILENAME,
    CodecConfig,
    NQuadsConfig,
    TurtleConfig,
    get_default_config,
    validation_errors,
)
from jsonld_rdf.errors import ConfigValidationError


# ========== TurtleConfig Tests ==========

class TestTurtleConfig:
    def test_defaults(self):
        config = TurtleConfig()
        assert config.max_line_length == 160
        assert config.indent_width == 4
        assert config.blank_node_prefix == "_:b"
        assert config.include_named_graphs is False
        assert config.default_prefixes == {}

    def test_to_dict(self):
        config = TurtleConfig(max_line_length=80, default_prefixes={"ex": "http://e/"})
        d = config.to_dict()
        assert d["max_line_length"] == 80
        assert d["default_prefixes"] == {"ex": "http://e/"}

    def test_from_dict(self):
        config = TurtleConfig.from_dict({"indent_width": 2})
        assert config.indent_width == 2
        assert config.max_line_length == 160


# ========== NQuadsConfig Tests ==========

class TestNQuadsConfig:
    def test_defaults(self):
        config = NQuadsConfig()
        assert config.sort_output is True
        assert config.deduplicate is False

    def test_from_dict(self):
        config = NQuadsConfig.from_dict({"deduplicate": True})
        assert config.deduplicate is True
        assert config.sort_output is True


# ========== CodecConfig Tests ==========

class TestCodecConfig:
    def test_default_config(self):
        config = get_default_config()
        assert isinstance(config, CodecConfig)
        assert config.turtle.max_line_length == 160
        assert get_default_config() is not config

    def test_round_trip_dict(self):
        config = CodecConfig(turtle=TurtleConfig(indent_width=8), nquads=NQuadsConfig(sort_output=False))
        restored = CodecConfig.from_dict(config.to_dict())
        assert restored == config

    def test_save_and_load_directory(self, tmp_path):
        config = CodecConfig(turtle=TurtleConfig(max_line_length=100))
        path = config.save(tmp_path)
        assert path == tmp_path / CONFIG_FILENAME
        assert json.loads(path.read_text(encoding="utf-8"))["turtle"]["max_line_length"] == 100
        assert CodecConfig.load(tmp_path).turtle.max_line_length == 100

    def test_save_and_load_file(self, tmp_path):
        target = tmp_path / "settings.json"
        CodecConfig(nquads=NQuadsConfig(deduplicate=True)).save(target)
        assert CodecConfig.load(target).nquads.deduplicate is True

    def test_load_missing_returns_defaults(self, tmp_path):
        assert CodecConfig.load(tmp_path) == CodecConfig()

    def test_load_invalid_raises(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"turtle": {"max_line_length": 0}}), encoding="utf-8"
        )
        with pytest.raises(ConfigValidationError):
            CodecConfig.load(tmp_path)


# ========== Validation Tests ==========

class TestValidation:
    def test_default_is_valid(self):
        assert validation_errors(CodecConfig()) == []
        CodecConfig().validate()

    def test_bad_values(self):
        config = CodecConfig(turtle=TurtleConfig(
            max_line_length=-1,
            indent_width=-2,
            blank_node_prefix="b",
            default_prefixes={"ex": ""},
        ))
        errors = validation_errors(config)
        assert len(errors) == 4
        with pytest.raises(ConfigValidationError) as exc_info:
            config.validate()
        assert "max_line_length" in str(exc_info.value)
        assert "indent_width" in str(exc_info.value)

    def test_blank_node_prefix_needs_a_name(self):
        config = CodecConfig(turtle=TurtleConfig(blank_node_prefix="_:"))
        assert len(validation_errors(config)) == 1
