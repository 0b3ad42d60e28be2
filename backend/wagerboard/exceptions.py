class LedgerError(Exception):
    """Base exception for wager ledger errors."""

    kind = "ledger_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Malformed or out-of-range input."""

    kind = "validation_error"


class NotFoundError(LedgerError):
    """Reference to a nonexistent wager or user."""

    kind = "not_found"


class InvalidStateTransitionError(LedgerError):
    """Resolution of a wager that already left Pending."""

    kind = "invalid_state_transition"

    def __init__(self, message: str, current_result: str | None = None):
        super().__init__(message)
        self.current_result = current_result


class DanglingReferenceError(LedgerError):
    """Leaderboard entrant whose user no longer resolves in the directory."""

    kind = "dangling_reference"

    def __init__(self, message: str, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id
