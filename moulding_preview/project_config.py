"""
JSON-based project configuration for moulding_preview.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (moulding_preview.config)
2. User config (~/.moulding.json)
3. Project config (./.moulding.json or next to the input drawing)
4. CLI arguments

Example .moulding.json:
{
    "store": {"profiles_dir": "data/profiles"},
    "conversion": {"rotation": "cw90", "tolerance": 1e-5},
    "render": {"margin_ratio": 0.05, "edge_pad": 0.02, "painting_fill": "#ffffff"},
    "logging": {"level": "DEBUG", "json_file": "moulding.log.json"}
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from moulding_preview.config import (
    DEFAULT_EDGE_PAD,
    DEFAULT_MARGIN_RATIO,
    DEFAULT_PROFILES_DIR,
    PAINTING_FILL,
    POINT_TOLERANCE,
    RingStyle,
)
from moulding_preview.drawing.svg_renderer import FrameRenderOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".moulding.json"


@dataclass
class StoreConfig:
    """Where profile records live."""
    profiles_dir: str = DEFAULT_PROFILES_DIR


@dataclass
class ConversionConfig:
    """DXF conversion defaults."""
    rotation: str = "none"
    tolerance: float = POINT_TOLERANCE


@dataclass
class RenderConfig:
    """Front-view rendering defaults."""
    margin_ratio: float = DEFAULT_MARGIN_RATIO
    edge_pad: float = DEFAULT_EDGE_PAD
    painting_fill: str = PAINTING_FILL
    background_color: Optional[str] = None
    emphasis_color: str = RingStyle.EMPHASIS.color
    interior_color: str = RingStyle.INTERIOR.color

    def to_options(self) -> FrameRenderOptions:
        return FrameRenderOptions(
            margin_ratio=self.margin_ratio,
            edge_pad=self.edge_pad,
            painting_fill=self.painting_fill,
            background_color=self.background_color,
            emphasis_color=self.emphasis_color,
            interior_color=self.interior_color,
        )


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json_file: Optional[str] = None

    @property
    def level_value(self) -> int:
        return getattr(logging, self.level.upper(), logging.INFO)


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    store: StoreConfig = field(default_factory=StoreConfig)
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Build a configuration; unknown sections and keys are ignored."""
        config = cls()
        for section in fields(cls):
            values = data.get(section.name)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section.name)
            for key, value in values.items():
                if hasattr(target, key) and not key.startswith('_'):
                    setattr(target, key, value)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    input_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find a configuration file.

    Search order: explicit path, the input file's directory, the current
    working directory, the user's home directory.
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if input_path:
        candidates.append(Path(input_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    input_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration, falling back to defaults when none is found or it is unreadable."""
    config_path = find_config_file(input_path, explicit_config)
    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)
    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations; only override values that differ from defaults win."""
    merged = ProjectConfig.from_dict(base.to_dict())
    defaults = ProjectConfig()
    for section in fields(ProjectConfig):
        default_section = getattr(defaults, section.name)
        merged_section = getattr(merged, section.name)
        for key, value in asdict(getattr(override, section.name)).items():
            if value != getattr(default_section, key):
                setattr(merged_section, key, value)
    return merged


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> Path:
    """Write a documented sample configuration file."""
    sample = {"_comment": "Moulding preview configuration", "_version": "1.0"}
    sample.update(ProjectConfig().to_dict())
    sample["conversion"]["_comment"] = "rotation: none | cw90 | ccw90 | 180"

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)
    logger.info("Sample configuration created: %s", path)
    return path
