"""Policy evaluation and action application."""

from .actions import ActionApplier
from .engine import PolicyEngine, SweepError
from .locking import LockTransitionManager

__all__ = ["ActionApplier", "LockTransitionManager", "PolicyEngine", "SweepError"]
