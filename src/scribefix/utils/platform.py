"""Platform-specific utilities for cross-platform compatibility."""

import platform

from .logger import get_logger

logger = get_logger(__name__)

# Apple Intelligence ships with macOS 26 on Apple silicon
_MIN_APPLE_INTELLIGENCE_MACOS = 26


def get_platform() -> str:
    system = platform.system()
    if system == "Darwin":
        return "macos"
    return system.lower()


def get_macos_major_version() -> int:
    release = platform.mac_ver()[0]
    if not release:
        return 0
    try:
        return int(release.split(".")[0])
    except ValueError:
        logger.debug(f"Unrecognized macOS release string: {release!r}")
        return 0


def is_apple_silicon() -> bool:
    return get_platform() == "macos" and platform.machine() == "arm64"


def supports_apple_intelligence() -> bool:
    if not is_apple_silicon():
        return False

    return get_macos_major_version() >= _MIN_APPLE_INTELLIGENCE_MACOS
