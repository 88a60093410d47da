"""Error types raised by the analysis client and the ledger."""

from enum import StrEnum


class AnalysisErrorKind(StrEnum):
    """Why a meal description could not be turned into a breakdown."""

    CLIENT_REJECTED = "client_rejected"
    EXHAUSTED_RETRIES = "exhausted_retries"
    MALFORMED_ENVELOPE = "malformed_envelope"
    MALFORMED_PAYLOAD = "malformed_payload"


class AnalysisError(Exception):
    """Meal analysis failed; no partial result is available."""

    def __init__(
        self,
        kind: AnalysisErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.attempts = attempts


class LedgerErrorKind(StrEnum):
    """Rejected ledger mutations."""

    INDEX_OUT_OF_RANGE = "index_out_of_range"
    INVALID_GOAL = "invalid_goal"


class LedgerError(Exception):
    """A ledger mutation was rejected and nothing was changed."""

    def __init__(self, kind: LedgerErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class EmptyMealDescriptionError(ValueError):
    """The meal description is empty after trimming."""
