from .settings import (
    CONFIG_FILENAME,
    PostProcessConfig,
    Settings,
    get_config_dir,
)
from .store import SELECTION_KEY, OperationKind, SettingsStateStore

__all__ = [
    "CONFIG_FILENAME",
    "OperationKind",
    "PostProcessConfig",
    "SELECTION_KEY",
    "Settings",
    "SettingsStateStore",
    "get_config_dir",
]
