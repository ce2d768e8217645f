from PySide6.QtCore import QThread, Signal

from ...utils.logger import get_logger
from .session import PostProcessingSession

logger = get_logger(__name__)


class PostProcessWorkerThread(QThread):
    """
    Background thread for transcript post-processing.

    Signals:
        finished: Emitted with the InvocationResult; correction failures
                  arrive here as fallbacks carrying the original text
        error: Emitted only if the session itself breaks (error_message)
    """

    finished = Signal(object)
    error = Signal(str)

    def __init__(self, session: PostProcessingSession, text: str, parent=None):
        super().__init__(parent)
        self._session = session
        self._text = text

    def run(self):
        try:
            logger.info(f"Background post-processing started: {len(self._text)} chars")
            result = self._session.process(self._text)
            self.finished.emit(result)
        except Exception as e:
            logger.exception(f"Background post-processing error: {e}")
            self.error.emit(str(e))
