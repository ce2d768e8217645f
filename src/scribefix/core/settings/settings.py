"""
Post-processing settings.

``Settings`` is the immutable in-memory snapshot shared by the store, the
view model and the invoker. ``PostProcessConfig`` is its persisted form,
stored as JSON in the platform config directory.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from platformdirs import user_config_path
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...utils.logger import get_logger
from ..providers.catalog import (
    CUSTOM_PROVIDER_ID,
    Provider,
    ProviderCatalog,
    ProviderKind,
)
from .config import DEFAULT_SYSTEM_PROMPT, DEFAULT_TIMEOUT_SECONDS

logger = get_logger(__name__)

APP_NAME = "scribefix"
CONFIG_FILENAME = "post_process.json"


def get_config_dir() -> Path:
    return user_config_path(APP_NAME, ensure_exists=True)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    post_process_enabled: bool = False
    providers: Tuple[Provider, ...]
    selected_provider_id: str = ""
    api_keys: Dict[str, str] = Field(default_factory=dict)
    models: Dict[str, str] = Field(default_factory=dict)
    model_options_cache: Dict[str, List[str]] = Field(default_factory=dict)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @field_validator("providers")
    @classmethod
    def providers_not_empty(cls, v):
        if not v:
            raise ValueError("providers must not be empty")
        return v

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        return None

    @property
    def selected_provider(self) -> Provider:
        return self.get_provider(self.selected_provider_id) or self.providers[0]

    @property
    def effective_provider_id(self) -> str:
        return self.selected_provider.id

    def api_key_for(self, provider_id: str) -> str:
        return self.api_keys.get(provider_id, "")

    def model_for(self, provider_id: str) -> str:
        return self.models.get(provider_id, "")

    def base_url_for(self, provider_id: str) -> str:
        provider = self.get_provider(provider_id)
        if provider is None:
            return ""
        return provider.base_url or ""

    @classmethod
    def from_config(
        cls, config: "PostProcessConfig", catalog: ProviderCatalog
    ) -> "Settings":
        providers = []
        for provider in catalog:
            base_url = config.base_urls.get(provider.id)
            if provider.kind == ProviderKind.CUSTOM and base_url:
                provider = provider.with_base_url(base_url)
            providers.append(provider)

        selected = config.post_process_provider_id
        if selected not in catalog:
            if selected:
                logger.warning(
                    f"Unknown provider '{selected}', falling back to '{catalog.first().id}'"
                )
            selected = catalog.first().id

        return cls(
            post_process_enabled=config.post_process_enabled,
            providers=tuple(providers),
            selected_provider_id=selected,
            api_keys=dict(config.api_keys),
            models=dict(config.models),
            timeout_seconds=config.timeout_seconds,
            system_prompt=config.system_prompt,
        )

    def to_config(self) -> "PostProcessConfig":
        return PostProcessConfig(
            post_process_enabled=self.post_process_enabled,
            post_process_provider_id=self.selected_provider_id,
            api_keys=dict(self.api_keys),
            models=dict(self.models),
            base_urls={
                p.id: p.base_url
                for p in self.providers
                if p.kind == ProviderKind.CUSTOM and p.base_url
            },
            timeout_seconds=self.timeout_seconds,
            system_prompt=self.system_prompt,
        )


class PostProcessConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=False)

    post_process_enabled: bool = False
    post_process_provider_id: str = ""
    api_keys: Dict[str, str] = Field(default_factory=dict)
    models: Dict[str, str] = Field(default_factory=dict)
    base_urls: Dict[str, str] = Field(default_factory=dict)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @field_validator("system_prompt")
    @classmethod
    def prompt_not_empty(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("system_prompt must be a non-empty string")
        return v

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PostProcessConfig":
        config_file = path or get_config_dir() / CONFIG_FILENAME

        if not config_file.exists():
            return cls()

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError("settings file must contain a JSON object")

            # Older files kept the custom endpoint under a flat key
            legacy_base_url = data.get("custom_base_url")
            if legacy_base_url and "base_urls" not in data:
                data["base_urls"] = {CUSTOM_PROVIDER_ID: legacy_base_url}
                logger.info("Migrated custom_base_url to per-provider base_urls")

            return cls._load_with_fallbacks(data)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError, TypeError) as e:
            logger.warning(
                f"Could not load settings: {e}. Using defaults.", exc_info=True
            )
            return cls()

    @classmethod
    def _load_with_fallbacks(cls, data: dict) -> "PostProcessConfig":
        """Load settings with field-level fallback to defaults on validation errors."""
        defaults = cls()
        result_data = {}

        for field_name in cls.model_fields:
            if field_name not in data:
                continue
            try:
                cls.model_validate({field_name: data[field_name]})
                result_data[field_name] = data[field_name]
            except Exception:
                # Never echo stored secrets into the log
                shown = "<hidden>" if field_name == "api_keys" else repr(data[field_name])
                logger.warning(
                    f"Invalid {field_name} {shown}, resetting to {getattr(defaults, field_name)!r}"
                )

        return cls.model_validate(result_data)

    def save(self, path: Optional[Path] = None) -> None:
        config_file = path or get_config_dir() / CONFIG_FILENAME

        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
