# uiauto_objrepo/config.py
"""
@file config.py
@brief Load-time configuration for the element store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import yaml

from .exceptions import ConfigError
from .model import DEFAULT_STRATEGY_PRIORITY, StrategyKind

ON_ERROR_MODES = ("abort", "skip")
CONFIG_SECTION = "objrepo"


@dataclass(frozen=True)
class StoreConfig:
    """
    on_error: "abort" raises on the first bad record, "skip" leaves it out and
    reports it on ``ElementStore.issues``.
    """
    on_error: str = "abort"
    strategy_priority: Tuple[StrategyKind, ...] = DEFAULT_STRATEGY_PRIORITY
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.on_error not in ON_ERROR_MODES:
            raise ConfigError(f"on_error must be one of {list(ON_ERROR_MODES)}, got: {self.on_error!r}")
        object.__setattr__(self, "strategy_priority", _parse_priority(self.strategy_priority))
        if len(set(self.strategy_priority)) != len(self.strategy_priority):
            raise ConfigError("strategy_priority must not repeat a strategy kind")

    def with_overrides(
        self,
        on_error: Optional[str] = None,
        strategy_priority: Optional[Sequence[Union[StrategyKind, str]]] = None,
        log_level: Optional[str] = None,
    ) -> StoreConfig:
        """Create a new config with overrides applied."""
        return StoreConfig(
            on_error=on_error if on_error is not None else self.on_error,
            strategy_priority=strategy_priority if strategy_priority is not None else self.strategy_priority,
            log_level=log_level if log_level is not None else self.log_level,
        )


def _parse_priority(value: Any) -> Tuple[StrategyKind, ...]:
    if value is None:
        return DEFAULT_STRATEGY_PRIORITY
    if isinstance(value, str):
        value = [v for v in value.replace(",", " ").split() if v]
    if isinstance(value, tuple):
        value = list(value)
    if not isinstance(value, list):
        raise ConfigError(f"strategy_priority must be a list, got: {type(value).__name__}")
    kinds = []
    for item in value:
        try:
            kinds.append(StrategyKind.parse(item))
        except ValueError:
            raise ConfigError(
                f"strategy_priority: unknown strategy kind '{item}'. Allowed: {[k.value for k in StrategyKind]}"
            ) from None
    return tuple(kinds)


def parse_config(d: Optional[Dict[str, Any]]) -> StoreConfig:
    """Build a StoreConfig from the ``objrepo`` mapping of a config file."""
    d = d or {}
    if not isinstance(d, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' must be a mapping")
    return StoreConfig(
        on_error=str(d.get("on_error", "abort")).lower(),
        strategy_priority=d.get("strategy_priority"),
        log_level=str(d.get("log_level", "INFO")).upper(),
    )


def load_config(path: str) -> StoreConfig:
    """Load a StoreConfig from a YAML file."""
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Config YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return StoreConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config YAML must be a mapping at root.")
    return parse_config(data.get(CONFIG_SECTION))
