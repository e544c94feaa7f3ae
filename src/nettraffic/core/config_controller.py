"""
Configuration Controller for NetTraffic.

Watches the configuration file and re-supplies a fresh, immutable
DisplayConfig snapshot on every change, so consumers never observe a
partially updated configuration.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import QFileSystemWatcher, QObject, pyqtSignal

from nettraffic import constants
from nettraffic.core.models import DisplayConfig
from nettraffic.utils.config import ConfigManager, ConfigError, to_display_config


class ConfigController(QObject):
    """
    Bridges the persisted settings and the engine.

    Signals:
        config_changed (DisplayConfig): A new snapshot, emitted on every
            detected change of the configuration file and after `update_config`.
    """
    config_changed = pyqtSignal(object)

    def __init__(self, config_manager: ConfigManager, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.config_manager = config_manager
        self.logger = logging.getLogger(f"{constants.app.APP_NAME}.ConfigController")
        self.config: Dict[str, Any] = {}
        self._watcher = QFileSystemWatcher(self)
        self._watcher.fileChanged.connect(self._on_file_changed)

    def load_initial_config(self) -> DisplayConfig:
        """Loads the configuration file and starts watching it."""
        self.logger.debug("Loading initial configuration...")
        self.config = self.config_manager.load()
        self._watch()
        return to_display_config(self.config)

    def update_config(self, updates: Dict[str, Any], save_to_disk: bool = True) -> DisplayConfig:
        """Applies `updates`, optionally saves them, and publishes the new snapshot."""
        self.logger.debug("Updating configuration with %d items... (Save: %s)", len(updates), save_to_disk)
        merged = {**self.config, **updates}
        if save_to_disk:
            self.config_manager.save(merged)
        self.config = self.config_manager.validate(merged)
        snapshot = to_display_config(self.config)
        self.config_changed.emit(snapshot)
        return snapshot

    def _watch(self) -> None:
        path = str(self.config_manager.config_path)
        if path not in self._watcher.files() and not self._watcher.addPath(path):
            self.logger.warning("Could not watch configuration file %s", path)

    def _on_file_changed(self, path: str) -> None:
        """Reloads the file and emits the new snapshot wholesale."""
        self.logger.debug("Configuration file changed: %s", path)
        try:
            self.config = self.config_manager.load()
        except ConfigError as e:
            self.logger.error("Failed to reload configuration, keeping the current one: %s", e)
            return
        # Atomic saves replace the file, which drops it from the watcher.
        self._watch()
        self.config_changed.emit(to_display_config(self.config))
