"""Error types shared by the dashboard core and the data access layer."""


class LoadFailure(Exception):
    """A results, boundary or ward dataset could not be retrieved or parsed.

    Args:
        source: Location (path or URL) that was requested
        reason: Human readable description of what went wrong
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load {source}: {reason}")


class ConfigurationError(ValueError):
    """Raised when a configuration key is missing or has the wrong type."""
