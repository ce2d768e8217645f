"""
Single-writer settings container with tracked asynchronous mutations.

Every setter runs on a small worker pool and is tracked under an
``(OperationKind, provider_id)`` key while it is in flight. Setters are
no-ops when the trimmed value equals the effective current value, and
requests for a key that is already in flight collapse into the latest one.
Readers always get a complete, immutable ``Settings`` snapshot.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...utils.logger import get_logger
from ..providers.catalog import ProviderKind
from .config import MAX_WORKERS
from .settings import Settings

logger = get_logger(__name__)


class OperationKind(str, Enum):
    PROVIDER = "post_process_provider"
    BASE_URL = "post_process_base_url"
    API_KEY = "post_process_api_key"
    MODEL = "post_process_model"
    MODELS_FETCH = "post_process_models_fetch"


OperationKey = Tuple[OperationKind, str]

# Provider selection is one field, so all switches share a single key
SELECTION_KEY: OperationKey = (OperationKind.PROVIDER, "")


@dataclass
class _InFlight:
    latest: Any
    future: Future = field(default_factory=Future)
    pending: bool = False


def _done(result: Any) -> Future:
    future: Future = Future()
    future.set_result(result)
    return future


class SettingsStateStore:
    def __init__(
        self,
        settings: Settings,
        model_cache=None,
        on_commit: Optional[Callable[[Settings], None]] = None,
        executor: Optional[Executor] = None,
    ):
        self._settings = settings
        self._model_cache = model_cache
        self._on_commit = on_commit
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=MAX_WORKERS, thread_name_prefix="settings"
        )
        self._lock = threading.RLock()
        self._in_flight: Dict[OperationKey, _InFlight] = {}
        self._listeners: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def snapshot(self) -> Settings:
        with self._lock:
            return self._settings

    def is_updating(self, kind: OperationKind, provider_id: str = "") -> bool:
        with self._lock:
            return (kind, provider_id) in self._in_flight

    def in_flight(self) -> Dict[OperationKey, bool]:
        with self._lock:
            return {key: True for key in self._in_flight}

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_provider(self, provider_id: str) -> Future:
        provider_id = provider_id.strip()
        settings = self.snapshot()
        if settings.get_provider(provider_id) is None:
            logger.warning(f"Ignoring selection of unknown provider '{provider_id}'")
            return _done(False)

        return self._submit(
            SELECTION_KEY,
            provider_id,
            settings.selected_provider_id,
            lambda value: self._commit(selected_provider_id=value),
        )

    def set_base_url(self, provider_id: str, base_url: str) -> Future:
        trimmed = base_url.strip()
        provider = self.snapshot().get_provider(provider_id)
        if provider is None or provider.kind != ProviderKind.CUSTOM:
            logger.debug(f"Base URL is only editable for the custom provider, not '{provider_id}'")
            return _done(False)
        if not trimmed:
            return _done(False)

        return self._submit(
            (OperationKind.BASE_URL, provider_id),
            trimmed,
            provider.base_url or "",
            lambda value: self._commit_base_url(provider_id, value),
        )

    def set_api_key(self, provider_id: str, api_key: str) -> Future:
        settings = self.snapshot()
        if settings.get_provider(provider_id) is None:
            return _done(False)

        return self._submit(
            (OperationKind.API_KEY, provider_id),
            api_key.strip(),
            settings.api_key_for(provider_id),
            lambda value: self._commit_mapping("api_keys", provider_id, value),
        )

    def set_model(self, provider_id: str, model: str) -> Future:
        settings = self.snapshot()
        if settings.get_provider(provider_id) is None:
            return _done(False)

        return self._submit(
            (OperationKind.MODEL, provider_id),
            model.strip(),
            settings.model_for(provider_id),
            lambda value: self._commit_mapping("models", provider_id, value),
        )

    def trigger_model_fetch(self, provider_id: str) -> Future:
        key = (OperationKind.MODELS_FETCH, provider_id)

        with self._lock:
            running = self._in_flight.get(key)
            if running is not None:
                return running.future

            provider = self._settings.get_provider(provider_id)
            if provider is None or self._model_cache is None:
                return _done([])

            api_key = self._settings.api_key_for(provider_id)
            state = _InFlight(latest=None)
            self._in_flight[key] = state

        self._notify()
        self._executor.submit(self._run_fetch, key, state, provider, api_key)
        return state.future

    def set_enabled(self, enabled: bool) -> bool:
        if self.snapshot().post_process_enabled == enabled:
            return False
        self._commit(post_process_enabled=enabled)
        self._notify()
        return True

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _submit(
        self,
        key: OperationKey,
        value: Any,
        stored: Any,
        apply: Callable[[Any], bool],
    ) -> Future:
        with self._lock:
            state = self._in_flight.get(key)
            effective = state.latest if state is not None else stored
            if value == effective:
                return state.future if state is not None else _done(False)

            if state is not None:
                # Latest write wins; the running drain picks it up
                state.latest = value
                state.pending = True
                return state.future

            state = _InFlight(latest=value)
            self._in_flight[key] = state

        self._notify()
        self._executor.submit(self._drain, key, state, apply)
        return state.future

    def _drain(self, key: OperationKey, state: _InFlight, apply) -> None:
        changed = False
        try:
            while True:
                with self._lock:
                    value = state.latest
                    state.pending = False
                try:
                    changed = apply(value) or changed
                except Exception as e:
                    logger.error(f"Settings update {key[0].value} failed: {e}", exc_info=True)

                with self._lock:
                    if not state.pending:
                        del self._in_flight[key]
                        break
        finally:
            self._notify()
            state.future.set_result(changed)

    def _run_fetch(
        self, key: OperationKey, state: _InFlight, provider, api_key: str
    ) -> None:
        models: List[str] = []
        try:
            models = self._model_cache.fetch_models(provider, api_key)
            with self._lock:
                cache = dict(self._settings.model_options_cache)
                cache[provider.id] = list(models)
                self._settings = self._settings.model_copy(
                    update={"model_options_cache": cache}
                )
        except Exception as e:
            logger.error(f"Model fetch for '{provider.id}' failed: {e}", exc_info=True)
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            self._notify()
            state.future.set_result(models)

    def _commit(self, **update) -> bool:
        with self._lock:
            self._settings = self._settings.model_copy(update=update)
            snapshot = self._settings
        self._persist(snapshot)
        return True

    def _commit_mapping(self, field_name: str, provider_id: str, value: str) -> bool:
        with self._lock:
            mapping = dict(getattr(self._settings, field_name))
            mapping[provider_id] = value
            self._settings = self._settings.model_copy(update={field_name: mapping})
            snapshot = self._settings
        self._persist(snapshot)
        return True

    def _commit_base_url(self, provider_id: str, base_url: str) -> bool:
        with self._lock:
            providers = tuple(
                p.with_base_url(base_url) if p.id == provider_id else p
                for p in self._settings.providers
            )
            self._settings = self._settings.model_copy(update={"providers": providers})
            snapshot = self._settings
        self._persist(snapshot)
        return True

    def _persist(self, snapshot: Settings) -> None:
        if self._on_commit is None:
            return
        try:
            self._on_commit(snapshot)
        except Exception as e:
            logger.error(f"Failed to persist settings: {e}", exc_info=True)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Settings listener failed: {e}", exc_info=True)
