"""Project-wide custom exception types."""


class ConfigurationError(RuntimeError):
    """Raised when a required setting (e.g. ``SUPABASE_URL``) is missing."""


class DataUnavailable(RuntimeError):
    """Raised when survey responses cannot be fetched from the backing store."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)


class AssistantUnavailable(RuntimeError):
    """Raised when the conversational endpoint fails or cannot be reached."""


class ExportFailed(RuntimeError):
    """Raised when a report exporter fails to produce its artifact."""

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        super().__init__(f"{kind} export failed: {message}")
