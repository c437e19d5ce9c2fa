from dataclasses import dataclass
from typing import Any, Dict
import yaml

from .balancer import STRATEGIES
from .model_bank import MODEL_NAMES


def _check_names(section: str, key: str, names, allowed) -> None:
    if names is None:
        return
    if not names:
        raise ValueError(f"{section}.{key} must list at least one entry")
    unknown = [n for n in names if n not in allowed]
    if unknown:
        raise ValueError(f"{section}.{key} has unknown entries {unknown}; expected a subset of {list(allowed)}")


@dataclass
class Config:
    """Configuration object loaded from YAML."""
    data: Dict[str, Any]
    split: Dict[str, Any]
    resampling: Dict[str, Any]
    models: Dict[str, Any]
    evaluation: Dict[str, Any]
    output: Dict[str, Any]

    def __post_init__(self) -> None:
        _check_names("resampling", "strategies", self.resampling.get("strategies"), STRATEGIES)
        _check_names("models", "enabled", self.models.get("enabled"), MODEL_NAMES)
        _check_names("models", "params", list(self.models.get("params") or {}) or None, MODEL_NAMES)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
        return cls(**cfg)
