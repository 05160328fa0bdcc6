"""
Config loader for MouseGest.
Loads YAML configuration with dataclass validation.
"""
import logging
import sys
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .types import GestureRecord, MatchingAlgorithm, MouseButton, SuppressionKey, normalize_pattern

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration value is out of range or unknown."""


@dataclass
class TimeoutConfig:
    active: bool = False
    duration: float = 1.0   # seconds


@dataclass
class GestureConfig:
    mouse_button: MouseButton = MouseButton.RIGHT
    suppression_key: SuppressionKey = SuppressionKey.NONE
    distance_threshold: float = 10.0     # px
    deviation_tolerance: float = 0.15    # 0-1, fraction of pi
    matching_algorithm: MatchingAlgorithm = MatchingAlgorithm.COMBINED
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)


@dataclass
class RockerConfig:
    active: bool = False
    left_mouse_click: str = "NewTab"
    right_mouse_click: str = "CloseTab"


@dataclass
class WheelConfig:
    active: bool = False
    mouse_button: MouseButton = MouseButton.LEFT
    wheel_sensitivity: float = 30.0
    wheel_up: str = "NewTab"
    wheel_down: str = "CloseTab"


@dataclass
class SystemConfig:
    platform: Optional[str] = None   # None = detect from sys.platform


def _default_gestures() -> List[GestureRecord]:
    return [
        GestureRecord(pattern=[(-1.0, 0.0)], identifier="NewTab"),
        GestureRecord(pattern=[(1.0, 0.0)], identifier="CloseTab"),
    ]


@dataclass
class Config:
    gesture: GestureConfig = field(default_factory=GestureConfig)
    rocker: RockerConfig = field(default_factory=RockerConfig)
    wheel: WheelConfig = field(default_factory=WheelConfig)
    system: SystemConfig = field(default_factory=SystemConfig)
    gestures: List[GestureRecord] = field(default_factory=_default_gestures)


def current_platform(config: Optional[SystemConfig] = None) -> str:
    """Platform name as used for context-menu handling ("win", "linux", "mac")."""
    if config is not None and config.platform:
        return config.platform
    if sys.platform.startswith("win"):
        return "win"
    if sys.platform == "darwin":
        return "mac"
    return "linux"


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def _coerce_enum(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Unknown value for {name}: {value!r}") from None


def _coerce_number(value, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _parse_gesture_settings(data: Optional[dict]) -> GestureConfig:
    data = dict(data or {})
    timeout = _dict_to_dataclass(TimeoutConfig, data.pop('timeout', None))
    gesture = _dict_to_dataclass(GestureConfig, data)
    timeout.duration = _coerce_number(timeout.duration, 'gesture.timeout.duration')
    gesture.timeout = timeout
    gesture.distance_threshold = _coerce_number(
        gesture.distance_threshold, 'gesture.distance_threshold')
    gesture.deviation_tolerance = _coerce_number(
        gesture.deviation_tolerance, 'gesture.deviation_tolerance')
    gesture.mouse_button = _coerce_enum(MouseButton, gesture.mouse_button, 'gesture.mouse_button')
    gesture.suppression_key = _coerce_enum(
        SuppressionKey, gesture.suppression_key, 'gesture.suppression_key')
    gesture.matching_algorithm = _coerce_enum(
        MatchingAlgorithm, gesture.matching_algorithm, 'gesture.matching_algorithm')
    return gesture


def _parse_gestures(data: Optional[list]) -> List[GestureRecord]:
    if data is None:
        return _default_gestures()

    records = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or 'pattern' not in entry or 'command' not in entry:
            raise ConfigError(f"Gesture #{index} needs a 'pattern' and a 'command'")
        try:
            pattern = normalize_pattern(entry['pattern'])
        except (TypeError, ValueError, IndexError):
            raise ConfigError(f"Gesture #{index} has a malformed pattern") from None
        records.append(GestureRecord(pattern=pattern, identifier=entry['command'],
                                     label=entry.get('label')))
    return records


def validate_config(config: Config) -> Config:
    """
    Reject settings the recognizer cannot work with.

    Raises:
        ConfigError: on the first invalid value
    """
    gesture = config.gesture
    if gesture.mouse_button not in (MouseButton.LEFT, MouseButton.RIGHT, MouseButton.MIDDLE):
        raise ConfigError(f"gesture.mouse_button must be 1, 2 or 4, got {gesture.mouse_button!r}")
    if gesture.distance_threshold < 0:
        raise ConfigError("gesture.distance_threshold must not be negative")
    if not 0 <= gesture.deviation_tolerance <= 1:
        raise ConfigError("gesture.deviation_tolerance must be within [0, 1]")
    if gesture.timeout.duration <= 0:
        raise ConfigError("gesture.timeout.duration must be positive")

    wheel = config.wheel
    if wheel.mouse_button not in (MouseButton.LEFT, MouseButton.RIGHT, MouseButton.MIDDLE):
        raise ConfigError(f"wheel.mouse_button must be 1, 2 or 4, got {wheel.mouse_button!r}")
    if wheel.wheel_sensitivity <= 0:
        raise ConfigError("wheel.wheel_sensitivity must be positive")

    for record in config.gestures:
        if not record.pattern:
            raise ConfigError(f"Gesture {record} has an empty pattern")
    return config


def parse_config(data: Optional[Dict[str, Any]]) -> Config:
    """Build and validate a Config from an already loaded mapping."""
    data = data or {}
    wheel = _dict_to_dataclass(WheelConfig, data.get('wheel'))
    wheel.mouse_button = _coerce_enum(MouseButton, wheel.mouse_button, 'wheel.mouse_button')
    wheel.wheel_sensitivity = _coerce_number(wheel.wheel_sensitivity, 'wheel.wheel_sensitivity')

    config = Config(
        gesture=_parse_gesture_settings(data.get('gesture')),
        rocker=_dict_to_dataclass(RockerConfig, data.get('rocker')),
        wheel=wheel,
        system=_dict_to_dataclass(SystemConfig, data.get('system')),
        gestures=_parse_gestures(data.get('gestures')),
    )
    return validate_config(config)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: if a setting is invalid
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        logger.info("No config at %s, using defaults", config_path)
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    try:
        config = parse_config(data)
    except ConfigError as e:
        logger.warning("Rejected config %s: %s", config_path, e)
        raise
    logger.info("Loaded config from %s (%d gestures)", config_path, len(config.gestures))
    return config


def _plain(value):
    if is_dataclass(value):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, MouseButton):
        return int(value)
    if isinstance(value, (SuppressionKey, MatchingAlgorithm)):
        return value.value
    return value


def dump_config(config: Config) -> Dict[str, Any]:
    """Render a Config as the mapping load_config() reads back."""
    gestures = []
    for record in config.gestures:
        entry = {'pattern': [list(vector) for vector in record.pattern],
                 'command': record.identifier}
        if record.label is not None:
            entry['label'] = record.label
        gestures.append(entry)

    return {
        'gesture': _plain(config.gesture),
        'rocker': _plain(config.rocker),
        'wheel': _plain(config.wheel),
        'system': _plain(config.system),
        'gestures': gestures,
    }


def save_config(config: Config, config_path: Path) -> None:
    with open(config_path, 'w') as f:
        yaml.safe_dump(dump_config(config), f, sort_keys=False)
