"""Typed configuration loader for histogram defaults."""

from __future__ import annotations

import math
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError
from .core.reservoir import DEFAULT_RESERVOIR_SIZE


@dataclass
class HistogramDefaults:
    reservoir_size: int = DEFAULT_RESERVOIR_SIZE
    reservoir_seed: int | None = None
    percentiles: list[float] = field(default_factory=list)

    def validate(self) -> None:
        if isinstance(self.reservoir_size, bool) or not isinstance(self.reservoir_size, int):
            raise BadInputError("histogram.reservoir_size must be an integer")
        if self.reservoir_size < 1:
            raise BadInputError("histogram.reservoir_size must be >= 1")
        if self.reservoir_seed is not None and (
            isinstance(self.reservoir_seed, bool) or not isinstance(self.reservoir_seed, int)
        ):
            raise BadInputError("histogram.reservoir_seed must be an integer when set")
        for value in self.percentiles:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise BadInputError(f"histogram.percentiles entries must be numbers, got {value!r}")
            if math.isnan(value):
                raise BadInputError("histogram.percentiles must not contain NaN")


@dataclass
class AppConfig:
    histogram: HistogramDefaults = field(default_factory=HistogramDefaults)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        histogram_data = data.get("histogram", {})
        if not isinstance(histogram_data, dict):
            raise BadInputError("[histogram] section must be a table")
        unknown = set(histogram_data) - {"reservoir_size", "reservoir_seed", "percentiles"}
        if unknown:
            raise BadInputError(f"Unknown [histogram] keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = dict(histogram_data)
        if "percentiles" in kwargs:
            raw = kwargs["percentiles"]
            if not isinstance(raw, list):
                raise BadInputError("histogram.percentiles must be an array of numbers")
            kwargs["percentiles"] = list(raw)
        return cls(histogram=HistogramDefaults(**kwargs))

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        for key, attr in (
            ("HISTOGRAM_RESERVOIR_SIZE", "reservoir_size"),
            ("HISTOGRAM_RESERVOIR_SEED", "reservoir_seed"),
        ):
            raw_value = env.get(key)
            if raw_value is None:
                continue
            if attr == "reservoir_seed" and raw_value.strip().lower() in {"", "none", "random"}:
                self.histogram.reservoir_seed = None
                continue
            try:
                value = int(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self.histogram, attr, value)

        raw_percentiles = env.get("HISTOGRAM_PERCENTILES")
        if raw_percentiles is not None:
            try:
                self.histogram.percentiles = [
                    float(part) for part in raw_percentiles.split(",") if part.strip()
                ]
            except ValueError as exc:
                raise BadInputError(
                    f"Invalid env override HISTOGRAM_PERCENTILES={raw_percentiles!r}",
                    hint="Use a comma separated list such as '90,99.99'",
                ) from exc

    def validate(self) -> None:
        self.histogram.validate()


DEFAULT_CONFIG = AppConfig()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)


__all__ = ["AppConfig", "DEFAULT_CONFIG", "HistogramDefaults", "load_app_config"]
