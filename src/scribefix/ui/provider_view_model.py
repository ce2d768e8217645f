"""
UI-facing provider state.

``derive_state`` is a pure function of the settings snapshot, the in-flight
operations and the transient availability flag. ``ProviderViewModel`` owns
only that flag; everything else is read from the store on demand.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..core.providers import AvailabilityProbe, Provider, ProviderKind
from ..core.settings import OperationKind, SELECTION_KEY, Settings, SettingsStateStore
from ..core.settings.store import OperationKey
from ..core.transcript_processor import merge_model_options
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DropdownOption:
    value: str
    label: str


@dataclass(frozen=True)
class ProviderViewState:
    enabled: bool
    provider_options: Tuple[DropdownOption, ...]
    selected_provider_id: str
    selected_provider: Provider
    is_custom_provider: bool
    is_on_device_provider: bool
    is_local_process_provider: bool
    unavailable: bool
    unavailable_provider_id: Optional[str]
    base_url: str
    api_key: str
    model: str
    model_options: Tuple[DropdownOption, ...]
    is_provider_updating: bool
    is_base_url_updating: bool
    is_api_key_updating: bool
    is_model_updating: bool
    is_fetching_models: bool


def build_model_options(settings: Settings, provider: Provider) -> List[DropdownOption]:
    if provider.has_fixed_models:
        return [DropdownOption(o.value, o.label) for o in provider.fixed_models]

    fetched = settings.model_options_cache.get(provider.id, [])
    merged = merge_model_options(fetched, settings.model_for(provider.id))
    return [DropdownOption(value, value) for value in merged]


def derive_state(
    settings: Settings,
    in_flight: Dict[OperationKey, bool],
    unavailable_provider_id: Optional[str] = None,
) -> ProviderViewState:
    provider = settings.selected_provider
    pid = provider.id

    def busy(kind: OperationKind) -> bool:
        return in_flight.get((kind, pid), False)

    return ProviderViewState(
        enabled=settings.post_process_enabled,
        provider_options=tuple(DropdownOption(p.id, p.label) for p in settings.providers),
        selected_provider_id=pid,
        selected_provider=provider,
        is_custom_provider=provider.kind == ProviderKind.CUSTOM,
        is_on_device_provider=provider.kind == ProviderKind.ON_DEVICE,
        is_local_process_provider=provider.kind == ProviderKind.LOCAL_PROCESS,
        unavailable=unavailable_provider_id == pid,
        unavailable_provider_id=unavailable_provider_id,
        base_url=provider.base_url or "",
        api_key=settings.api_key_for(pid),
        model=settings.model_for(pid),
        model_options=tuple(build_model_options(settings, provider)),
        is_provider_updating=in_flight.get(SELECTION_KEY, False),
        is_base_url_updating=busy(OperationKind.BASE_URL),
        is_api_key_updating=busy(OperationKind.API_KEY),
        is_model_updating=busy(OperationKind.MODEL),
        is_fetching_models=busy(OperationKind.MODELS_FETCH),
    )


def _done(result) -> Future:
    future: Future = Future()
    future.set_result(result)
    return future


class ProviderViewModel:
    def __init__(
        self,
        store: SettingsStateStore,
        probe: Optional[AvailabilityProbe] = None,
    ):
        self._store = store
        self._probe = probe or AvailabilityProbe()
        self._lock = threading.Lock()
        self._unavailable_provider_id: Optional[str] = None
        self._selection = 0
        self._listeners: List[Callable[[], None]] = []
        # Selections run one at a time so probe results land in order
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="provider-select"
        )
        self._unsubscribe_store = store.subscribe(self._notify)

    def state(self) -> ProviderViewState:
        with self._lock:
            flag = self._unavailable_provider_id
        return derive_state(self._store.snapshot(), self._store.in_flight(), flag)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe_store()
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def select_provider(self, provider_id: str) -> Future:
        with self._lock:
            self._selection += 1
            selection = self._selection

        # Any selection attempt dismisses the previous warning
        self._set_unavailable(None)

        if provider_id == self._selected_id():
            return _done(False)

        return self._executor.submit(self._select, provider_id, selection)

    def change_base_url(self, value: str) -> Future:
        provider = self._store.snapshot().selected_provider
        if provider.kind != ProviderKind.CUSTOM:
            return _done(False)
        return self._store.set_base_url(provider.id, value)

    def change_api_key(self, value: str) -> Future:
        return self._store.set_api_key(self._selected_id(), value)

    def change_model(self, value: str) -> Future:
        return self._store.set_model(self._selected_id(), value)

    def select_model(self, value: str) -> Future:
        return self._store.set_model(self._selected_id(), value)

    def create_model(self, value: str) -> Future:
        return self._store.set_model(self._selected_id(), value)

    def refresh_models(self) -> Future:
        provider = self._store.snapshot().selected_provider
        if provider.has_fixed_models or provider.kind == ProviderKind.ON_DEVICE:
            return _done([])
        return self._store.trigger_model_fetch(provider.id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _selected_id(self) -> str:
        return self._store.snapshot().effective_provider_id

    def _select(self, provider_id: str, selection: int) -> bool:
        provider = self._store.snapshot().get_provider(provider_id)
        if provider is None:
            logger.warning(f"Cannot select unknown provider '{provider_id}'")
            return False

        available = True
        if self._probe.is_probe_eligible(provider):
            available = self._probe.probe(provider)

        # A newer selection owns the flag and the selected id
        with self._lock:
            superseded = selection != self._selection
            if not superseded and not available:
                self._unavailable_provider_id = provider_id

        if superseded:
            logger.debug(f"Dropping superseded selection of '{provider_id}'")
            return False

        if not available:
            logger.warning(f"{provider.label} is not available, selecting anyway")
            self._notify()

        return self._store.set_provider(provider_id).result()

    def _set_unavailable(self, provider_id: Optional[str]) -> None:
        with self._lock:
            if self._unavailable_provider_id == provider_id:
                return
            self._unavailable_provider_id = provider_id
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Provider state listener failed: {e}", exc_info=True)
