"""OS metric providers."""

from __future__ import annotations

import os

from .base import VOLUME_PLACEHOLDER, SystemProvider
from .psutil_provider import PosixProvider, PsutilProvider, WindowsProvider

__all__ = [
    "VOLUME_PLACEHOLDER",
    "PosixProvider",
    "PsutilProvider",
    "SystemProvider",
    "WindowsProvider",
    "default_provider",
]


def default_provider() -> SystemProvider:
    """Pick the provider for the running platform."""
    if os.name == "nt":
        return WindowsProvider()
    return PosixProvider()
