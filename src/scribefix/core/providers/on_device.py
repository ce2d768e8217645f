"""
On-device correction capability.

The host application installs a concrete capability (for example a bridge to
the platform's text-rewriting service). Without one, the default reports
unavailable everywhere the platform lacks support, and a supported platform
still needs a registered ``rewrite`` implementation to do any work.
"""

from typing import Callable, Optional

from ...utils.logger import get_logger
from ...utils.platform import supports_apple_intelligence

logger = get_logger(__name__)

RewriteFn = Callable[[str, str], str]


class OnDeviceCapability:
    def __init__(
        self,
        rewrite: Optional[RewriteFn] = None,
        platform_check: Callable[[], bool] = supports_apple_intelligence,
    ):
        self._rewrite = rewrite
        self._platform_check = platform_check

    def is_available(self) -> bool:
        if self._rewrite is None:
            return False
        try:
            return bool(self._platform_check())
        except Exception as e:
            logger.warning(f"On-device capability check failed: {e}")
            return False

    def process(self, text: str, prompt: str) -> str:
        """Rewrite ``text`` with ``prompt``; raises if the capability is absent."""
        if self._rewrite is None:
            raise RuntimeError("No on-device rewrite capability registered")
        return self._rewrite(text, prompt)


_capability: Optional[OnDeviceCapability] = None


def get_on_device_capability() -> OnDeviceCapability:
    global _capability
    if _capability is None:
        _capability = OnDeviceCapability()
    return _capability


def set_on_device_capability(capability: OnDeviceCapability) -> None:
    global _capability
    _capability = capability
