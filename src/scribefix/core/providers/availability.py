import subprocess
from typing import Optional

from ...utils.logger import get_logger
from ..settings.config import PROBE_TIMEOUT_SECONDS
from .catalog import Provider, ProviderKind
from .on_device import OnDeviceCapability, get_on_device_capability

logger = get_logger(__name__)


class AvailabilityProbe:
    """Checks whether a provider's external dependency is usable right now.

    Local process providers are probed with ``<command> --version``; on-device
    providers ask the platform capability; hosted and custom providers are
    always reported available since the API call itself decides.
    """

    def __init__(
        self,
        timeout: float = PROBE_TIMEOUT_SECONDS,
        on_device: Optional[OnDeviceCapability] = None,
    ):
        self.timeout = timeout
        self._on_device = on_device

    @staticmethod
    def is_probe_eligible(provider: Provider) -> bool:
        return provider.kind in (ProviderKind.LOCAL_PROCESS, ProviderKind.ON_DEVICE)

    def probe(self, provider: Provider) -> bool:
        if provider.kind == ProviderKind.LOCAL_PROCESS:
            return self._probe_command(provider)
        if provider.kind == ProviderKind.ON_DEVICE:
            capability = self._on_device or get_on_device_capability()
            available = capability.is_available()
            logger.debug(f"On-device capability for '{provider.id}': {available}")
            return available
        return True

    def _probe_command(self, provider: Provider) -> bool:
        if not provider.command:
            logger.warning(f"Provider '{provider.id}' has no command configured")
            return False

        try:
            result = subprocess.run(
                [provider.command, "--version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(
                f"{provider.command} --version timed out after {self.timeout}s"
            )
            return False
        except FileNotFoundError as e:
            logger.warning(f"{provider.label} not found: {e}")
            return False
        except OSError as e:
            logger.warning(f"Failed to run {provider.command}: {e}")
            return False

        if result.returncode == 0:
            logger.debug(f"{provider.label} available: {result.stdout.strip()}")
            return True

        logger.debug(
            f"{provider.label} not available (exit code: {result.returncode})"
        )
        return False
