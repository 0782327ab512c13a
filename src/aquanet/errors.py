"""Exception hierarchy for aquanet.

Every error raised by the package derives from AquanetError so callers
(the CLI in particular) can catch package failures at a single boundary.
"""


class AquanetError(Exception):
    """Base class for all aquanet errors."""


class UnknownTaskKindError(AquanetError, LookupError):
    """Raised when a task kind outside the catalog is resolved.

    This is a programming error, not a runtime condition.
    """

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unknown task kind: {kind!r}")


class EmptyTaskAndQuestionError(AquanetError, ValueError):
    """Raised by a strict controller when neither a task nor a question is given."""

    def __init__(self) -> None:
        super().__init__("Submission needs a task kind or a non-blank question")


class SubmissionInProgressError(AquanetError):
    """Raised when the controller is already awaiting a response."""

    def __init__(self) -> None:
        super().__init__("A submission is already awaiting a response")


class AlreadyActiveError(AquanetError):
    """Raised when a stream accumulator is started twice."""

    def __init__(self) -> None:
        super().__init__("Stream accumulator is already active")


class BackendFailureError(AquanetError):
    """Wraps a failure surfaced by the backend gateway.

    The underlying exception is kept as ``__cause__``.
    """

    def __init__(self, error: BaseException):
        self.error_type = type(error).__name__
        super().__init__(f"{self.error_type}: {error}")


class TranscriptStoreError(AquanetError):
    """Raised on an invalid in-place update of the transcript."""
