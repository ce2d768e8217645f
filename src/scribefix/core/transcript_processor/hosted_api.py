from typing import Optional

import litellm
from litellm import completion

from ...utils.logger import get_logger
from ..providers.catalog import Provider, ProviderKind
from ..settings.config import DEFAULT_TIMEOUT_SECONDS
from .result import FailureReason, InvocationResult

logger = get_logger(__name__)

# Keep litellm from printing its own banners and debug hints
litellm.suppress_debug_info = True


def format_model_name(model: str, provider: Provider) -> str:
    prefix = provider.litellm_prefix
    if not prefix or model.startswith(prefix):
        return model
    return f"{prefix}{model}"


class HostedApiProcessor:
    """Runs one correction through a chat-completion endpoint via litellm."""

    def __init__(
        self,
        provider: Provider,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.provider = provider
        self.model = model
        self.api_key = api_key or None
        self.timeout = timeout

        # Only the custom endpoint needs an explicit base; litellm routes the rest
        self.api_base = (
            provider.base_url if provider.kind == ProviderKind.CUSTOM else None
        )

    def is_configured(self) -> bool:
        if not self.model:
            return False
        if self.provider.requires_api_key and not self.api_key:
            return False
        return True

    def process(self, text: str, prompt: str) -> InvocationResult:
        if not text or not text.strip():
            return InvocationResult.original(text, FailureReason.EMPTY_INPUT)

        if not self.is_configured():
            logger.warning(
                f"Provider '{self.provider.id}' is missing a model or API key, "
                "skipping correction"
            )
            return InvocationResult.original(text, FailureReason.UNAVAILABLE)

        kwargs = {
            "model": format_model_name(self.model, self.provider),
            "messages": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": text},
            ],
            "timeout": self.timeout,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base

        logger.info(
            f"Correcting text ({len(text)} chars) with {kwargs['model']} "
            f"via '{self.provider.id}'"
        )

        try:
            response = completion(**kwargs)
        except Exception as e:
            logger.error(f"Hosted correction request failed: {e}", exc_info=True)
            return InvocationResult.original(text, FailureReason.IO_ERROR)

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            logger.error(f"Malformed completion response: {e}")
            return InvocationResult.original(text, FailureReason.IO_ERROR)

        result = content.strip() if isinstance(content, str) else ""
        if not result:
            logger.warning("Hosted provider returned empty content, using original text")
            return InvocationResult.original(text, FailureReason.PROCESS_FAILED)

        logger.info(f"Correction complete: {len(text)} -> {len(result)} chars")
        return InvocationResult.corrected(result)
