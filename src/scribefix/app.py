"""Application runtime for the post-processing subsystem."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from scribefix.core.providers import AvailabilityProbe, ProviderCatalog
from scribefix.core.settings import PostProcessConfig, Settings, SettingsStateStore
from scribefix.core.transcript_processor import (
    ModelCatalogCache,
    PostProcessingSession,
    ProcessingInvoker,
)
from scribefix.ui.provider_view_model import ProviderViewModel
from scribefix.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PostProcessingApp:
    catalog: ProviderCatalog
    store: SettingsStateStore
    view_model: ProviderViewModel
    session: PostProcessingSession

    def shutdown(self) -> None:
        self.view_model.close()
        self.store.close()


def create_app(
    config_path: Optional[Path] = None,
    providers_config: Any = None,
    probe: Optional[AvailabilityProbe] = None,
    invoker: Optional[ProcessingInvoker] = None,
) -> PostProcessingApp:
    catalog = ProviderCatalog.from_config(providers_config)
    config = PostProcessConfig.load(config_path)
    settings = Settings.from_config(config, catalog)

    def persist(snapshot: Settings) -> None:
        snapshot.to_config().save(config_path)

    store = SettingsStateStore(
        settings, model_cache=ModelCatalogCache(), on_commit=persist
    )
    view_model = ProviderViewModel(store, probe=probe)
    session = PostProcessingSession(store, invoker=invoker)

    logger.info(
        f"Post-processing ready: {len(catalog)} providers, "
        f"selected '{settings.effective_provider_id}', "
        f"enabled={settings.post_process_enabled}"
    )
    return PostProcessingApp(catalog, store, view_model, session)
