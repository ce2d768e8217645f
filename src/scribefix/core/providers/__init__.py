from .availability import AvailabilityProbe
from .catalog import (
    APPLE_PROVIDER_ID,
    CLAUDE_CLI_MODELS,
    CLAUDE_CLI_PROVIDER_ID,
    CUSTOM_PROVIDER_ID,
    DEFAULT_CLAUDE_MODEL,
    DEFAULT_PROVIDERS,
    FALLBACK_PROVIDERS,
    ModelOption,
    Provider,
    ProviderCatalog,
    ProviderKind,
)
from .on_device import (
    OnDeviceCapability,
    get_on_device_capability,
    set_on_device_capability,
)

__all__ = [
    "APPLE_PROVIDER_ID",
    "AvailabilityProbe",
    "CLAUDE_CLI_MODELS",
    "CLAUDE_CLI_PROVIDER_ID",
    "CUSTOM_PROVIDER_ID",
    "DEFAULT_CLAUDE_MODEL",
    "DEFAULT_PROVIDERS",
    "FALLBACK_PROVIDERS",
    "ModelOption",
    "OnDeviceCapability",
    "Provider",
    "ProviderCatalog",
    "ProviderKind",
    "get_on_device_capability",
    "set_on_device_capability",
]
