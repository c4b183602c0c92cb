"""Error types raised by CNC Daily components."""


class CncDailyError(Exception):
    """Base class for CNC Daily errors."""


class FetchError(CncDailyError):
    """A feed or article could not be downloaded."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Fetch failed {url}: {reason}")


class MissingCredential(CncDailyError):
    """A required API key is not configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing {name}")


class SummarizationError(CncDailyError):
    """The generative text service returned an error."""

    def __init__(self, payload: str, status_code: int | None = None):
        self.payload = payload
        self.status_code = status_code
        super().__init__(f"Gemini error: {payload}")


class ClassificationError(CncDailyError):
    """The content classification service could not score a text."""

    def __init__(self, payload: str, status_code: int | None = None):
        self.payload = payload
        self.status_code = status_code
        super().__init__(f"Perspective error: {payload}")
