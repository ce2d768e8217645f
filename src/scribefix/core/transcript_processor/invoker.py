from typing import Optional

from ...utils.logger import get_logger
from ..providers.catalog import Provider, ProviderKind
from ..providers.on_device import OnDeviceCapability, get_on_device_capability
from ..settings.settings import Settings
from .hosted_api import HostedApiProcessor
from .local_process import process_with_local_command
from .result import FailureReason, InvocationResult

logger = get_logger(__name__)


class ProcessingInvoker:
    """
    Dispatches one correction to the backend matching the provider's kind.

    ``invoke`` never raises: every failure is folded into an
    ``InvocationResult`` that carries the original text and the reason.
    """

    def __init__(self, on_device: Optional[OnDeviceCapability] = None):
        self._on_device = on_device

    def invoke(
        self,
        text: str,
        provider: Provider,
        settings: Settings,
        prompt: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> InvocationResult:
        if not text or not text.strip():
            return InvocationResult.original(text, FailureReason.EMPTY_INPUT)

        prompt = settings.system_prompt if prompt is None else prompt
        timeout = settings.timeout_seconds if timeout is None else timeout
        model = settings.model_for(provider.id)

        try:
            if provider.kind == ProviderKind.LOCAL_PROCESS:
                result = self._invoke_local_process(text, provider, model, prompt, timeout)
            elif provider.kind == ProviderKind.ON_DEVICE:
                result = self._invoke_on_device(text, prompt)
            else:
                processor = HostedApiProcessor(
                    provider,
                    model=model,
                    api_key=settings.api_key_for(provider.id),
                    timeout=timeout,
                )
                result = processor.process(text, prompt)
        except Exception as e:
            logger.error(f"Correction via '{provider.id}' failed: {e}", exc_info=True)
            result = InvocationResult.original(text, FailureReason.PROCESS_FAILED)

        if not result.is_corrected and result.text != text:
            result = InvocationResult.original(text, result.failure_reason)
        return result

    def _invoke_local_process(
        self,
        text: str,
        provider: Provider,
        model: str,
        prompt: str,
        timeout: float,
    ) -> InvocationResult:
        if not provider.command:
            logger.warning(f"Provider '{provider.id}' has no command configured")
            return InvocationResult.original(text, FailureReason.UNAVAILABLE)

        return process_with_local_command(
            text,
            prompt,
            command=provider.command,
            model=model or provider.default_model,
            timeout=timeout,
        )

    def _invoke_on_device(self, text: str, prompt: str) -> InvocationResult:
        capability = self._on_device or get_on_device_capability()

        if not capability.is_available():
            logger.warning("On-device correction unavailable, using original text")
            return InvocationResult.original(text, FailureReason.UNAVAILABLE)

        try:
            output = capability.process(text, prompt)
        except Exception as e:
            logger.error(f"On-device correction failed: {e}", exc_info=True)
            return InvocationResult.original(text, FailureReason.UNAVAILABLE)

        result = output.strip() if isinstance(output, str) else ""
        if not result:
            logger.debug("On-device correction returned nothing, using original text")
            return InvocationResult.original(text, FailureReason.UNAVAILABLE)
        return InvocationResult.corrected(result)
