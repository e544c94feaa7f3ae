"""
Console entry point for NetTraffic.

Wires the configuration, the psutil counter source, the interface watcher and
the traffic engine together and logs every display decision. A real status
bar surface would connect to `TrafficEngine.display_updated` instead.
"""

import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication

from nettraffic import constants
from nettraffic.core.config_controller import ConfigController
from nettraffic.core.counter_source import PsutilCounterSource
from nettraffic.core.engine import TrafficEngine
from nettraffic.core.link_watcher import InterfaceWatcher
from nettraffic.core.models import DisplayDecision
from nettraffic.utils.config import ConfigManager
from nettraffic.utils.helpers import setup_logging


def log_decision(decision: DisplayDecision) -> None:
    """Stands in for the render surface."""
    logger = logging.getLogger(f"{constants.app.APP_NAME}.Surface")
    if decision.visible:
        logger.info("[%s] %s", decision.drawable_state.value, decision.text.replace("\n", " | "))
    else:
        logger.debug("Indicator hidden (enabled=%s, active=%s)", decision.enabled, decision.is_active)


def main() -> int:
    """
    Orchestrates the runner's startup sequence:
    1. Sets up logging.
    2. Loads configuration and starts watching it.
    3. Creates the engine and the interface watcher and connects them.
    4. Runs the event loop until interrupted.

    Returns:
        An integer exit code.
    """
    setup_logging()
    logger = logging.getLogger(f"{constants.app.APP_NAME}.Main")

    app = QCoreApplication(sys.argv)

    try:
        config_controller = ConfigController(ConfigManager())
        display_config = config_controller.load_initial_config()

        engine = TrafficEngine(PsutilCounterSource(), display_config)
        engine.display_updated.connect(log_decision)
        config_controller.config_changed.connect(engine.apply_config)

        watcher = InterfaceWatcher()
        watcher.link_updated.connect(engine.link_updated)
        watcher.link_lost.connect(engine.link_lost)
        watcher.link_updated.connect(lambda *_: engine.connectivity_changed())
        watcher.link_lost.connect(lambda *_: engine.connectivity_changed())
        watcher.error_occurred.connect(lambda msg: logger.critical(msg))

        def shutdown() -> None:
            watcher.stop()
            engine.cleanup()

        app.aboutToQuit.connect(shutdown)
        signal.signal(signal.SIGINT, lambda s, f: QCoreApplication.instance().quit())
        signal.signal(signal.SIGTERM, lambda s, f: QCoreApplication.instance().quit())

        watcher.start()
        engine.attach()

        logger.info("%s %s running. Press Ctrl+C to stop.", constants.app.APP_NAME, constants.app.VERSION)
        return app.exec()

    except Exception as e:
        logger.critical("A critical error occurred during startup: %s", e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
