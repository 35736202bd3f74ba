# ABOUTME: Tries candidate identifiers in order until the backend accepts one
# ABOUTME: Stops at the first success and reports every attempt when none succeed

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from pydantic import JsonValue

from minebbs_scout.extraction.base import AllCandidatesFailed, MalformedPayload, TransportFailure
from minebbs_scout.extraction.json_fields import is_success
from minebbs_scout.utils.logging import get_logger

type Probe = Callable[[str], Awaitable[JsonValue]]

# Failures that move probing on to the next candidate. Anything else is a bug and propagates.
PROBE_FAILURES = (TransportFailure, MalformedPayload, TimeoutError)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """The identifier the backend accepted and the lookup response it returned."""

    canonical_id: str
    payload: JsonValue
    attempted: tuple[str, ...]


async def probe_candidates(candidates: Sequence[str], probe: Probe, entity_type: str = "entity") -> Resolution:
    """Probe candidates one at a time, in order.

    A candidate is accepted when its response has a top-level ``success`` flag
    equal to true. Transport errors, undecodable bodies and ``success: false``
    are recorded and probing moves on.

    Raises:
        AllCandidatesFailed: With the attempted candidates in order, when none is accepted
    """
    attempted: list[str] = []
    reasons: list[str] = []

    for candidate in candidates:
        attempted.append(candidate)
        logger.debug("Probing candidate", entity_type=entity_type, candidate=candidate, attempt=len(attempted))

        try:
            payload = await probe(candidate)
        except PROBE_FAILURES as e:
            reasons.append(f"{candidate}: {e}")
            logger.info("Candidate rejected", candidate=candidate, error=str(e), error_type=type(e).__name__)
            continue

        if is_success(payload):
            logger.info("Candidate accepted", entity_type=entity_type, candidate=candidate, attempts=len(attempted))
            return Resolution(canonical_id=candidate, payload=payload, attempted=tuple(attempted))

        reasons.append(f"{candidate}: backend did not report success")
        logger.info("Candidate rejected", candidate=candidate, error="success flag not set")

    logger.warning("All candidates failed", entity_type=entity_type, candidates=attempted)
    raise AllCandidatesFailed(entity_type, attempted, reasons)
