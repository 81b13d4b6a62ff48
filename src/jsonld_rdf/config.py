"""
Codec configuration.

Provides:
- Turtle pretty-printing settings (line length, indent, blank node labels)
- N-Quads output settings (canonical sorting, duplicate handling)
- JSON persistence and validation of the settings
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from jsonld_rdf.constants import BLANK_NODE_PREFIX
from jsonld_rdf.errors import ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "codec_config.json"


@dataclass
class TurtleConfig:
    """Turtle parser and serializer settings."""
    max_line_length: int = 160
    indent_width: int = 4
    blank_node_prefix: str = "_:b"
    include_named_graphs: bool = False
    default_prefixes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_line_length": self.max_line_length,
            "indent_width": self.indent_width,
            "blank_node_prefix": self.blank_node_prefix,
            "include_named_graphs": self.include_named_graphs,
            "default_prefixes": dict(self.default_prefixes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurtleConfig":
        return cls(
            max_line_length=data.get("max_line_length", 160),
            indent_width=data.get("indent_width", 4),
            blank_node_prefix=data.get("blank_node_prefix", "_:b"),
            include_named_graphs=data.get("include_named_graphs", False),
            default_prefixes=dict(data.get("default_prefixes", {})),
        )


@dataclass
class NQuadsConfig:
    """N-Quads codec settings."""
    sort_output: bool = True
    deduplicate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sort_output": self.sort_output,
            "deduplicate": self.deduplicate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NQuadsConfig":
        return cls(
            sort_output=data.get("sort_output", True),
            deduplicate=data.get("deduplicate", False),
        )


@dataclass
class CodecConfig:
    """Complete codec configuration."""
    turtle: TurtleConfig = field(default_factory=TurtleConfig)
    nquads: NQuadsConfig = field(default_factory=NQuadsConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turtle": self.turtle.to_dict(),
            "nquads": self.nquads.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodecConfig":
        return cls(
            turtle=TurtleConfig.from_dict(data.get("turtle", {})),
            nquads=NQuadsConfig.from_dict(data.get("nquads", {})),
        )

    def validate(self) -> None:
        """Raise ConfigValidationError listing every invalid setting."""
        errors = validation_errors(self)
        if errors:
            raise ConfigValidationError("; ".join(errors))

    def save(self, path: Union[str, Path]) -> Path:
        """Save configuration to a directory or file path."""
        path = Path(path)
        config_file = path / CONFIG_FILENAME if path.is_dir() else path
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return config_file

    @classmethod
    def load(cls, path: Union[str, Path]) -> "CodecConfig":
        """Load configuration from a directory or file path, defaults if absent."""
        path = Path(path)
        config_file = path / CONFIG_FILENAME if path.is_dir() else path
        if config_file.exists():
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = cls.from_dict(data)
            config.validate()
            return config
        logger.debug(f"No codec configuration at {config_file}, using defaults")
        return cls()


def validation_errors(config: CodecConfig) -> List[str]:
    """Return a list of problems with the configuration (empty when valid)."""
    errors = []
    turtle = config.turtle
    if turtle.max_line_length <= 0:
        errors.append("turtle.max_line_length must be positive")
    if turtle.indent_width < 0:
        errors.append("turtle.indent_width must not be negative")
    if not turtle.blank_node_prefix.startswith(BLANK_NODE_PREFIX) \
            or len(turtle.blank_node_prefix) <= len(BLANK_NODE_PREFIX):
        errors.append("turtle.blank_node_prefix must look like '_:b'")
    for prefix, iri in turtle.default_prefixes.items():
        if not iri:
            errors.append(f"turtle.default_prefixes[{prefix!r}] is empty")
    return errors


def get_default_config() -> CodecConfig:
    """Create a fresh default configuration."""
    return CodecConfig()
