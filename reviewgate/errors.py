"""
Error types raised by the review gatekeeper.
"""


class ReviewGateError(Exception):
    """Base class for failures that end a gatekeeper run."""


class ConfigurationError(ReviewGateError):
    """
    The review policy cannot be applied as configured.

    Raised for unreadable or invalid policy files and for groups whose team
    cannot be resolved to a membership list.
    """


class InvalidEventError(ReviewGateError):
    """The triggering event is not a pull request event."""


class GitHubAPIError(ReviewGateError):
    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"GitHub API call failed: {operation}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
