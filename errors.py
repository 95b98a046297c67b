from typing import Optional


class ReviewBotError(Exception):
    """Base class for errors that abort a review run."""


class ConfigError(ReviewBotError):
    pass


class EventPayloadError(ReviewBotError):
    pass


class MalformedDiffError(ReviewBotError):
    pass


class GitHubError(ReviewBotError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SubmissionError(GitHubError):
    """The host rejected the review batch as a whole."""
