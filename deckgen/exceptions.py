"""Custom exceptions for the commander deck generator."""

from __future__ import annotations


class DeckBuilderError(Exception):
    """Base exception class for deck generation errors.

    Attributes:
        code (str): Error code for identifying the error type
        message (str): Descriptive error message
        details (dict): Additional error context and details
    """

    def __init__(self, message: str, code: str = "DECK_ERR", details: dict | None = None):
        """Initialize the base deck builder error.

        Args:
            message: Human-readable error description
            code: Error code for identification and handling
            details: Additional context about the error
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Format the error message with code and details."""
        error_msg = f"[{self.code}] {self.message}"
        if self.details:
            error_msg += f"\nDetails: {self.details}"
        return error_msg


class CommanderNotFoundError(DeckBuilderError):
    """Raised when the requested commander name matches no card in the corpus."""

    def __init__(self, commander_name: str, details: dict | None = None):
        """Initialize commander not found error.

        Args:
            commander_name: The name that failed to resolve
            details: Additional context about the lookup
        """
        self.commander_name = commander_name
        message = f"Commander not found: '{commander_name}'"
        super().__init__(message, code="CMD_NOT_FOUND", details=details)


class InvalidCommanderError(DeckBuilderError):
    """Raised when a resolved card cannot lead a Commander deck.

    The card either lacks a commander-eligible type (legendary creature, or a
    planeswalker whose text says it can be your commander) or is not legal in
    the Commander format.
    """

    def __init__(self, commander_name: str, reason: str, details: dict | None = None):
        """Initialize invalid commander error.

        Args:
            commander_name: Name of the rejected card
            reason: Which eligibility rule failed ('type' or 'legality')
            details: Additional context about the rejection
        """
        self.commander_name = commander_name
        self.reason = reason
        message = f"'{commander_name}' cannot be used as a commander ({reason})"
        super().__init__(message, code="CMD_INVALID", details=details)


class InvalidConstraintsError(DeckBuilderError):
    """Raised when generation constraints are malformed or out of range."""

    def __init__(self, field_name: str, value, expected: str):
        """Initialize invalid constraints error.

        Args:
            field_name: Constraint field that failed validation
            value: The offending value
            expected: Human-readable description of the accepted range
        """
        self.field_name = field_name
        message = f"Invalid constraint '{field_name}': {value!r} (expected {expected})"
        super().__init__(message, code="CONSTRAINT_INVALID", details={"field": field_name, "value": value})


class CardSourceUnavailableError(DeckBuilderError):
    """Raised when the card corpus or tag vocabulary source cannot be reached.

    Fatal for the whole request: callers get this single labeled failure
    instead of partial results.
    """

    def __init__(self, source: str, details: dict | None = None):
        """Initialize source unavailable error.

        Args:
            source: Description of the unreachable source (path or URL)
            details: Additional context about the failure
        """
        self.source = source
        message = f"Card source unavailable: {source}"
        super().__init__(message, code="SOURCE_UNAVAILABLE", details=details)


class CardAnalysisError(DeckBuilderError):
    """Raised when a single card cannot be analyzed or scored.

    The generation pipeline catches this per card and drops the card from the
    candidate pool.
    """

    def __init__(self, card_name: str, reason: str, details: dict | None = None):
        self.card_name = card_name
        message = f"Could not analyze '{card_name}': {reason}"
        super().__init__(message, code="CARD_ANALYSIS", details=details)


class SynergyRulesError(DeckBuilderError):
    """Raised when the synergy rule table config is missing or malformed."""

    def __init__(self, path: str, reason: str, details: dict | None = None):
        """Initialize rule table error.

        Args:
            path: Location of the rule table file
            reason: What was wrong with it
            details: Additional context (validation errors)
        """
        self.path = path
        message = f"Invalid synergy rule table '{path}': {reason}"
        super().__init__(message, code="RULES_INVALID", details=details)


class KeywordCatalogError(DeckBuilderError):
    """Raised when the MTGJSON keyword catalog cannot be downloaded or parsed."""

    def __init__(self, url: str, status_code: int | None = None, details: dict | None = None):
        """Initialize keyword catalog error.

        Args:
            url: The URL that failed to download
            status_code: HTTP status code if available
            details: Additional context about the download failure
        """
        self.url = url
        self.status_code = status_code
        status_info = f" (HTTP {status_code})" if status_code else ""
        message = f"Failed to fetch keyword catalog from {url}{status_info}"
        super().__init__(message, code="KEYWORDS_ERR", details=details)


class DeckValidationError(DeckBuilderError):
    """Raised when an assembled deck breaks a Commander legality invariant.

    Signals a defect in the pipeline; an illegal deck is never returned.
    """

    def __init__(self, commander_name: str, errors: list[str]):
        self.errors = list(errors)
        message = f"Generated deck for '{commander_name}' failed validation"
        super().__init__(message, code="DECK_INVALID", details={"errors": self.errors})


class SyncCancelledError(DeckBuilderError):
    """Raised by a cancellation token when a long-running sync was stopped."""

    def __init__(self, processed: int = 0):
        self.processed = processed
        message = f"Sync cancelled after {processed} cards"
        super().__init__(message, code="SYNC_CANCELLED", details={"processed": processed})
