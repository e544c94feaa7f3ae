"""
Constants for timer intervals used within the application.
"""

from typing import Final

class TimerConstants:
    """Defines refresh bounds and polling intervals."""
    MINIMUM_REFRESH_INTERVAL_SECONDS: Final[int] = 1
    MAXIMUM_REFRESH_INTERVAL_SECONDS: Final[int] = 10
    LINK_POLL_INTERVAL_MS: Final[int] = 1000
    MINIMUM_POLL_INTERVAL_MS: Final[int] = 10

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate the timer constants to ensure they are positive."""
        for attr_name in dir(self):
            if attr_name.endswith("_MS") or attr_name.endswith("_SECONDS"):
                value = getattr(self, attr_name)
                if not isinstance(value, (int, float)) or value <= 0:
                    raise ValueError(f"{attr_name} must be a positive number.")
        if self.MINIMUM_REFRESH_INTERVAL_SECONDS > self.MAXIMUM_REFRESH_INTERVAL_SECONDS:
            raise ValueError("MINIMUM_REFRESH_INTERVAL_SECONDS must not exceed MAXIMUM_REFRESH_INTERVAL_SECONDS")

# Singleton instance for easy access
timers = TimerConstants()
