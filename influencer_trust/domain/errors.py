"""Domain error taxonomy for influencer verification and claim analysis."""

from typing import List, Optional


class InfluencerTrustError(Exception):
    """Base class for all domain errors.

    Every error carries a human-readable message and a status class the
    API layer maps onto an HTTP status code.
    """

    status_class = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        # Set when the error aborted an analysis run
        self.aborted_state: Optional[str] = None
        self.visited_states: List[str] = []

    @property
    def status_code(self) -> int:
        """HTTP-equivalent status code for this error."""
        return {
            "not_found": 404,
            "bad_request": 400,
        }.get(self.status_class, 500)


class UpstreamUnavailable(InfluencerTrustError, ConnectionError):
    """The research provider could not be reached."""


class UpstreamError(InfluencerTrustError):
    """The research provider answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"API request failed with status {status_code}: {body}")
        self.upstream_status = status_code
        self.body = body


class TruncatedResponse(InfluencerTrustError):
    """The provider cut its output short; the text must not be parsed."""

    def __init__(self, message: str = "Response was truncated due to length limits"):
        super().__init__(message)


class MalformedResponse(InfluencerTrustError):
    """The completion text could not be turned into the expected JSON shape."""


class ValidationFailed(InfluencerTrustError):
    """A well-formed record is semantically wrong.

    Stages discard such records instead of raising; the error type exists
    so diagnostics can describe the rejection uniformly.
    """

    def __init__(self, violations: List[str], record: Optional[object] = None):
        super().__init__(f"Record failed validation: {', '.join(violations)}")
        self.violations = violations
        self.record = record


class ClassificationFailed(InfluencerTrustError):
    """No usable classification record was produced for a whole run."""

    def __init__(self, message: str = "Classification failed - no valid results returned"):
        super().__init__(message)


class SubjectNotFound(InfluencerTrustError):
    """The requested influencer is not known to the store."""

    status_class = "not_found"

    def __init__(self, message: str = "Influencer not found"):
        super().__init__(message)


class NotAHealthInfluencer(InfluencerTrustError):
    """External verification says the person is not a health influencer."""

    status_class = "bad_request"

    def __init__(self, message: str = "Not identified as a health influencer"):
        super().__init__(message)


class VerificationFailed(InfluencerTrustError):
    """Influencer verification could not be completed."""


class StoreError(InfluencerTrustError):
    """A row store operation failed."""
