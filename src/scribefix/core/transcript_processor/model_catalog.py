"""
Selectable model lists per provider.

Lists are fetched only on explicit request. Providers with a fixed catalog
answer from that catalog without any network or process access.
"""

from typing import Dict, Iterable, List, Optional

import requests

from ...utils.logger import get_logger
from ..providers.catalog import Provider, ProviderKind
from ..settings.config import MODEL_FETCH_TIMEOUT_SECONDS

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


def merge_model_options(fetched: Iterable[str], current: Optional[str]) -> List[str]:
    """Fetched models first, then ``current`` if new; exact-match dedup."""
    seen = set()
    merged: List[str] = []

    def upsert(value: Optional[str]) -> None:
        trimmed = value.strip() if isinstance(value, str) else ""
        if not trimmed or trimmed in seen:
            return
        seen.add(trimmed)
        merged.append(trimmed)

    for candidate in fetched:
        upsert(candidate)
    upsert(current)
    return merged


def _build_headers(provider: Provider, api_key: str) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if not api_key:
        return headers
    if provider.id == "anthropic":
        headers["x-api-key"] = api_key
        headers["anthropic-version"] = ANTHROPIC_VERSION
    else:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def parse_models_response(payload) -> List[str]:
    """Extract model ids from the common list-models response shapes."""
    if isinstance(payload, dict):
        items = payload.get("data")
        if items is None:
            items = payload.get("models")
    else:
        items = payload

    if not isinstance(items, list):
        raise ValueError("response does not contain a model list")

    models = []
    for item in items:
        if isinstance(item, str):
            models.append(item)
        elif isinstance(item, dict):
            model_id = item.get("id") or item.get("name")
            if isinstance(model_id, str):
                models.append(model_id)
    return models


class ModelCatalogCache:
    def __init__(self, timeout: float = MODEL_FETCH_TIMEOUT_SECONDS):
        self.timeout = timeout

    def fetch_models(self, provider: Provider, api_key: str = "") -> List[str]:
        """Results are cached by the caller in ``Settings.model_options_cache``."""
        if provider.has_fixed_models:
            return [option.value for option in provider.fixed_models]
        if provider.kind in (ProviderKind.ON_DEVICE, ProviderKind.LOCAL_PROCESS):
            return []
        return self._fetch_remote(provider, api_key)

    def _fetch_remote(self, provider: Provider, api_key: str) -> List[str]:
        if not provider.base_url:
            logger.warning(f"Provider '{provider.id}' has no base URL, cannot list models")
            return []

        url = f"{provider.base_url.rstrip('/')}/models"
        logger.info(f"Fetching models for '{provider.id}' from {url}")

        try:
            response = requests.get(
                url, headers=_build_headers(provider, api_key), timeout=self.timeout
            )
            response.raise_for_status()
            models = parse_models_response(response.json())
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch models for '{provider.id}': {e}")
            return []
        except ValueError as e:
            logger.warning(f"Unexpected models response from '{provider.id}': {e}")
            return []

        logger.info(f"Fetched {len(models)} models for '{provider.id}'")
        return models
