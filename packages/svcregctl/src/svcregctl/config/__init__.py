"""Immutable checker configuration and its loaders."""

from .loader import load_config, load_config_mapping, merge_overrides
from .model import EnforcementStrategy, ServiceCheckConfig, parse_strategy

__all__ = [
    "EnforcementStrategy",
    "ServiceCheckConfig",
    "load_config",
    "load_config_mapping",
    "merge_overrides",
    "parse_strategy",
]
