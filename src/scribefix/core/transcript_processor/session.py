import threading
import time
from typing import Optional

from ...utils.logger import get_logger
from ..settings.store import SettingsStateStore
from .invoker import ProcessingInvoker
from .result import InvocationResult

logger = get_logger(__name__)


class PostProcessingSession:
    """
    Entry point used by the transcription pipeline once text is available.

    Takes a settings snapshot per call and runs at most one correction at a
    time; a second call waits until the first has resolved.
    """

    def __init__(
        self,
        store: SettingsStateStore,
        invoker: Optional[ProcessingInvoker] = None,
    ):
        self._store = store
        self._invoker = invoker or ProcessingInvoker()
        self._lock = threading.Lock()

    def process(self, text: str) -> InvocationResult:
        with self._lock:
            settings = self._store.snapshot()

            if not settings.post_process_enabled:
                return InvocationResult.original(text)

            provider = settings.selected_provider
            start_time = time.time()
            result = self._invoker.invoke(text, provider, settings)
            duration = time.time() - start_time

            if result.is_fallback:
                logger.warning(
                    f"Post-processing via '{provider.id}' fell back to original text "
                    f"({result.failure_reason.value}) after {duration:.2f}s"
                )
            else:
                logger.info(
                    f"Post-processing via '{provider.id}' finished in {duration:.2f}s "
                    f"({result.source.value})"
                )
            return result
