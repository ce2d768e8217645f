"""
Provider descriptors and the session catalog.

The catalog is an ordered, read-only list of providers with lookup by id.
It is built either from the built-in defaults or from configuration data;
malformed configuration falls back to a single-provider catalog.
"""

from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...utils.logger import get_logger

logger = get_logger(__name__)


class ProviderKind(str, Enum):
    HOSTED_API = "hosted_api"
    ON_DEVICE = "on_device"
    LOCAL_PROCESS = "local_process"
    CUSTOM = "custom"


class ModelOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class Provider(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    label: str
    kind: ProviderKind
    base_url: Optional[str] = None
    requires_api_key: bool = False

    command: Optional[str] = None  # executable for LOCAL_PROCESS providers
    litellm_prefix: str = ""  # routing prefix for hosted completions
    fixed_models: List[ModelOption] = Field(default_factory=list)
    default_model: str = ""

    @field_validator("id", "label")
    @classmethod
    def not_blank(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("must be a non-empty string")
        return v.strip()

    @property
    def has_fixed_models(self) -> bool:
        return bool(self.fixed_models)

    def with_base_url(self, base_url: str) -> "Provider":
        return self.model_copy(update={"base_url": base_url})


APPLE_PROVIDER_ID = "apple_intelligence"
CLAUDE_CLI_PROVIDER_ID = "claude_cli"
CUSTOM_PROVIDER_ID = "custom"

DEFAULT_CLAUDE_MODEL = "haiku"

CLAUDE_CLI_MODELS = [
    ModelOption(value="haiku", label="Haiku (fastest, cheapest)"),
    ModelOption(value="sonnet", label="Sonnet (balanced)"),
    ModelOption(value="opus", label="Opus (most capable)"),
]

DEFAULT_PROVIDERS: List[Provider] = [
    Provider(
        id="openai",
        label="OpenAI",
        kind=ProviderKind.HOSTED_API,
        base_url="https://api.openai.com/v1",
        requires_api_key=True,
        litellm_prefix="openai/",
    ),
    Provider(
        id="openrouter",
        label="OpenRouter",
        kind=ProviderKind.HOSTED_API,
        base_url="https://openrouter.ai/api/v1",
        requires_api_key=True,
        litellm_prefix="openrouter/",
    ),
    Provider(
        id="anthropic",
        label="Anthropic",
        kind=ProviderKind.HOSTED_API,
        base_url="https://api.anthropic.com/v1",
        requires_api_key=True,
        litellm_prefix="anthropic/",
    ),
    Provider(
        id="groq",
        label="Groq",
        kind=ProviderKind.HOSTED_API,
        base_url="https://api.groq.com/openai/v1",
        requires_api_key=True,
        litellm_prefix="groq/",
    ),
    Provider(
        id="cerebras",
        label="Cerebras",
        kind=ProviderKind.HOSTED_API,
        base_url="https://api.cerebras.ai/v1",
        requires_api_key=True,
        litellm_prefix="cerebras/",
    ),
    Provider(
        id=APPLE_PROVIDER_ID,
        label="Apple Intelligence",
        kind=ProviderKind.ON_DEVICE,
    ),
    Provider(
        id=CLAUDE_CLI_PROVIDER_ID,
        label="Claude Code CLI",
        kind=ProviderKind.LOCAL_PROCESS,
        command="claude",
        fixed_models=CLAUDE_CLI_MODELS,
        default_model=DEFAULT_CLAUDE_MODEL,
    ),
    Provider(
        id=CUSTOM_PROVIDER_ID,
        label="Custom",
        kind=ProviderKind.CUSTOM,
        base_url="http://localhost:11434/v1",
        litellm_prefix="openai/",
    ),
]

# Used when configuration cannot be parsed at all
FALLBACK_PROVIDERS: List[Provider] = [DEFAULT_PROVIDERS[0]]


class ProviderCatalog:
    """Ordered, immutable provider list for one session."""

    def __init__(self, providers: Sequence[Provider]):
        if not providers:
            raise ValueError("ProviderCatalog requires at least one provider")
        self._providers = tuple(providers)
        self._by_id = {p.id: p for p in self._providers}
        if len(self._by_id) != len(self._providers):
            raise ValueError("Provider ids must be unique")

    @classmethod
    def default(cls) -> "ProviderCatalog":
        return cls(DEFAULT_PROVIDERS)

    @classmethod
    def from_config(cls, data: Any) -> "ProviderCatalog":
        """Build a catalog from a list of provider mappings.

        Malformed input is reported and replaced with the fallback catalog;
        this never raises.
        """
        if data is None:
            return cls.default()

        try:
            if not isinstance(data, list) or not data:
                raise ValueError("providers must be a non-empty list")
            providers = [Provider.model_validate(item) for item in data]
            return cls(providers)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(
                f"Invalid provider configuration ({e}), using fallback catalog"
            )
            return cls(FALLBACK_PROVIDERS)

    @property
    def providers(self) -> tuple:
        return self._providers

    def get(self, provider_id: str) -> Optional[Provider]:
        return self._by_id.get(provider_id)

    def first(self) -> Provider:
        return self._providers[0]

    def ids(self) -> List[str]:
        return [p.id for p in self._providers]

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._by_id

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
