"""
Timeouts and Intervals Constants Module.
"""

from typing import Final


class TimeoutConstants:
    """Defines thread lifecycle timeouts and error budgets."""
    WATCHER_THREAD_STOP_WAIT_MS: Final[int] = 2000
    MAX_CONSECUTIVE_ERRORS: Final[int] = 10

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate that all timeouts are positive."""
        for attr_name in dir(self):
            if attr_name.endswith("_MS"):
                value = getattr(self, attr_name)
                if not isinstance(value, (int, float)) or value < 0:
                    raise ValueError(f"{attr_name} must be a non-negative number.")
        if self.MAX_CONSECUTIVE_ERRORS < 1:
            raise ValueError("MAX_CONSECUTIVE_ERRORS must be at least 1")

# Singleton instance for easy access
timeouts = TimeoutConstants()
