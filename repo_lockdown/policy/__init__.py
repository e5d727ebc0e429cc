"""Moderation policy configuration."""

from .config import (
    CONFIG_FILE_PATH,
    ConfigResolver,
    Policy,
    PolicyError,
    PolicyOverrides,
    load_policy,
    load_policy_file,
)

__all__ = [
    "CONFIG_FILE_PATH",
    "ConfigResolver",
    "Policy",
    "PolicyError",
    "PolicyOverrides",
    "load_policy",
    "load_policy_file",
]
