# ABOUTME: Content extraction and identifier resolution for the forum site and its JSON backend
# ABOUTME: Pipeline Stage 1: Raw markup or JSON payloads into typed records

"""
Extraction Layer: Turn externally controlled documents into stable records

This layer handles:
- Forgiving HTML parsing and declarative structural queries
- Fallback field resolution over JSON payloads of varying shape
- Candidate identifier generation and sequential probing
- Concurrent aggregation of related sub-resources

Data Flow: Fetcher bytes → DocumentTree / JSON tree → models/ records
"""

from .base import (
    AllCandidatesFailed,
    ExtractionError,
    Fetcher,
    MalformedDocument,
    MalformedPayload,
    TransportFailure,
    UnsupportedUrl,
)

__all__ = [
    "AllCandidatesFailed",
    "ExtractionError",
    "Fetcher",
    "MalformedDocument",
    "MalformedPayload",
    "TransportFailure",
    "UnsupportedUrl",
]
