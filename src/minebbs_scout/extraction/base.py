# ABOUTME: Fetcher protocol and the error taxonomy shared by every extraction stage
# ABOUTME: Transport, document, payload and resolution failures all derive from ExtractionError

from collections.abc import Mapping, Sequence
from typing import Protocol


class Fetcher(Protocol):
    """Capability that turns a URL into raw bytes. Supplied by the environment,
    the engine never retries a failed fetch itself."""

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        auth_token: str | None = None,
    ) -> bytes:
        """Fetch the body at the given URL.

        Args:
            url: Absolute URL to fetch
            headers: Extra request headers for this call only
            auth_token: Session cookies forwarded to the backend

        Returns:
            The raw response body

        Raises:
            TransportFailure: If the request fails or the server answers with an error status
        """
        ...

    async def close(self) -> None:
        """Release any connections held by the fetcher."""
        ...


class ExtractionError(Exception):
    """Base class for every failure the engine surfaces."""

    pass


class TransportFailure(ExtractionError):
    """Raised when a fetch fails at the network or HTTP level."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedDocument(ExtractionError):
    """Raised when markup cannot be tokenized at all."""

    pass


class MalformedPayload(ExtractionError):
    """Raised when a backend response body is not usable JSON."""

    pass


class UnsupportedUrl(ExtractionError):
    """Raised when a URL points at neither a resource nor a thread."""

    pass


class AllCandidatesFailed(ExtractionError):
    """Raised when every candidate identifier was rejected by the backend.

    Carries the attempted identifiers in probing order and the reason each one
    failed, so the caller can show something more useful than "not found".
    """

    def __init__(self, entity_type: str, candidates: Sequence[str], reasons: Sequence[str] = ()):
        self.entity_type = entity_type
        self.candidates = list(candidates)
        self.reasons = list(reasons)
        tried = ", ".join(self.candidates) if self.candidates else "none"
        super().__init__(
            f"Could not load {entity_type} details (tried ids: {tried}). "
            "The backend may require a login or be unavailable."
        )
