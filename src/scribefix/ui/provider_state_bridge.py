from PySide6.QtCore import QObject, Signal

from .provider_view_model import ProviderViewModel


class ProviderStateBridge(QObject):
    """Re-emits view model changes as a Qt signal for settings widgets."""

    state_changed = Signal(object)  # ProviderViewState

    def __init__(self, view_model: ProviderViewModel, parent=None):
        super().__init__(parent)
        self._view_model = view_model
        self._unsubscribe = view_model.subscribe(self._on_changed)

    def current_state(self):
        return self._view_model.state()

    def detach(self) -> None:
        self._unsubscribe()

    def _on_changed(self) -> None:
        self.state_changed.emit(self._view_model.state())
