# piifilter/core/definitions.py

"""Redaction strategies and well-known rule labels."""

from enum import Enum


DEFAULT_REDACTION_MARKER = "<REDACTED>"


class RedactStrategy(str, Enum):
    """How a matched span of text is rewritten."""

    FULL = "full"
    HASH = "hash"
    PARTIAL = "partial"

    @classmethod
    def parse(cls, name: str) -> "RedactStrategy":
        """Resolves a strategy from its configuration name.

        Args:
            name: Strategy name, case-insensitive. ``redact`` and ``mask``
                are accepted as aliases of ``full`` and ``partial``.

        Returns:
            The matching RedactStrategy

        Raises:
            ValueError: If the name is not a known strategy.
        """
        if isinstance(name, cls):
            return name

        normalized = str(name).strip().lower()
        normalized = _STRATEGY_ALIASES.get(normalized, normalized)

        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown redaction strategy '{name}'. Expected one of: {valid}"
            ) from None


_STRATEGY_ALIASES = {
    "redact": RedactStrategy.FULL.value,
    "mask": RedactStrategy.PARTIAL.value,
}


class FieldLabel:
    """Constants for the logical categories used by the packaged rules."""

    # Credentials
    AUTH_TOKEN = "http.request.header.authorization"
    SESSION_ID = "session.id"
    PASSWORD = "user.password"
    API_KEY = "api.key"

    # Personal data
    EMAIL = "user.email"
    SSN = "user.ssn"
    CREDIT_CARD = "payment.card.number"
