"""
Error types raised by the stats job. Every one of them aborts the run.
"""


class ReportError(RuntimeError):
    """Base class for failures of the monthly stats job."""


class ConfigurationError(ReportError):
    """A required setting is missing or invalid. Raised before any network call."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Missing or invalid config: " + ", ".join(self.problems))


class MetadataFetchError(ReportError):
    """microCMS returned a non-success response or a body we cannot use."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        self.status = status
        self.body = body
        detail = f"{message} (status={status})"
        if body:
            detail += f": {body}"
        super().__init__(detail)


class EmptyResultError(ReportError):
    """Pagination finished but produced nothing to join against."""


class CollaboratorAPIError(ReportError):
    """A Google Sheets or GA4 call failed."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")
