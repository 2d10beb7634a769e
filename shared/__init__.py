"""Shared utility package for cross-layer primitives and interfaces."""

from .cancellation import CancelSignal, CancellableResult  # noqa: F401
from .hooks import Hooks, extend_hooks  # noqa: F401
from .interfaces import Playable  # noqa: F401
