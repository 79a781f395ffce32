from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional, Tuple

import yaml

from .errors import ConfigError

Color = Tuple[int, int, int]

BACKENDS = ("window", "terminal")


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    """Immutable settings resolved once at startup."""

    words_per_minute: int = 240
    font_name: str = "SourceCodePro-Regular"
    font_size: int = 36
    text_path: str = "example.txt"
    fonts_dir: str = "fonts"
    high_quality: bool = True
    poll_interval_ms: int = 100
    warmup_ms: int = 1000
    monitor_period_ms: int = 1000
    window_width: int = 800
    window_height: int = 600
    title: str = "FastBookReader"
    text_color: Color = (0, 128, 50)
    background: Color = (0, 0, 0)
    backend: str = "window"

    def __post_init__(self) -> None:
        if isinstance(self.words_per_minute, bool) or not isinstance(self.words_per_minute, int):
            raise ConfigError(
                f"words_per_minute must be an integer, received {self.words_per_minute!r}"
            )
        if self.words_per_minute <= 0:
            raise ConfigError(
                f"words_per_minute must be positive, received {self.words_per_minute}"
            )
        for name in ("font_size", "window_width", "window_height", "monitor_period_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, received {value!r}")
        for name in ("poll_interval_ms", "warmup_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, received {value!r}")
        if self.backend not in BACKENDS:
            raise ConfigError(f"backend must be one of {BACKENDS}, received {self.backend!r}")
        for name in ("text_color", "background"):
            value = getattr(self, name)
            if len(value) != 3 or any(not isinstance(c, int) or not 0 <= c <= 255 for c in value):
                raise ConfigError(f"{name} must be an RGB triple, received {value!r}")

    @property
    def word_delay_ms(self) -> int:
        return word_delay_ms(self.words_per_minute)

    @property
    def font_path(self) -> Path:
        return Path(self.fonts_dir) / f"{self.font_name}.ttf"

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> "ReaderConfig":
        return from_mapping({**self.to_dict(), **changes})


def word_delay_ms(words_per_minute: int) -> int:
    """Milliseconds each word stays on screen at the given rate."""
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute must be positive, received {words_per_minute}")
    return 60_000 // int(words_per_minute)


_FIELDS = {f.name for f in dataclasses.fields(ReaderConfig)}


def from_mapping(data: Mapping[str, Any]) -> ReaderConfig:
    unknown = sorted(set(data) - _FIELDS)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
    values = dict(data)
    for name in ("text_color", "background"):
        if name in values and isinstance(values[name], list):
            values[name] = tuple(values[name])
    return ReaderConfig(**values)


def load_yaml(path: str | Path) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping, received {type(data)!r}")
    return data


def load_and_merge_cfg(*paths: str | Path | None) -> Dict[str, Any]:
    """Later files replace keys from earlier ones; the layout is flat."""
    cfg: Dict[str, Any] = {}
    for path in paths:
        if path is None:
            continue
        cfg.update(load_yaml(path))
    return cfg


def apply_overrides(cfg: MutableMapping[str, Any], overrides: str | None) -> None:
    if not overrides:
        return
    for item in overrides.split(","):
        if not item:
            continue
        if "=" not in item:
            raise ConfigError(f"Invalid override '{item}', expected key=value")
        key, raw_value = item.split("=", 1)
        key = key.strip()
        if "." in key:
            raise ConfigError(f"Invalid override key '{key}': configuration keys are not nested")
        cfg[key] = _parse_override_value(raw_value.strip())


def _parse_override_value(token: str) -> Any:
    lowered = token.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        if token.startswith("0x"):
            return int(token, 16)
        if "." in token or "e" in lowered:
            return float(token)
        return int(token)
    except ValueError:
        return token


def build_config(
    cfg_paths: Iterable[str | Path] = (),
    overrides: Optional[str] = None,
    **explicit: Any,
) -> ReaderConfig:
    """Resolve defaults < YAML files < key=value overrides < explicit values."""
    try:
        data = load_and_merge_cfg(*cfg_paths)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse configuration: {exc}") from exc
    apply_overrides(data, overrides)
    data.update({k: v for k, v in explicit.items() if v is not None})
    try:
        return from_mapping(data)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
