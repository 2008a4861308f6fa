# piifilter/engine/anonymizer.py

"""Presidio-based rendering of redaction strategies over matched text."""

import hashlib
from typing import Dict, Iterable, Tuple

from presidio_anonymizer import AnonymizerEngine
from presidio_anonymizer.entities import OperatorConfig, RecognizerResult

from piifilter.core.definitions import DEFAULT_REDACTION_MARKER, RedactStrategy
from piifilter.core.exceptions import ConfigurationError


# presidio joins same-type entities separated only by whitespace, so every
# span gets its own entity type.
_ENTITY_PREFIX = "PII_"


class TextAnonymizer:
    """Applies a redaction strategy to spans of a string.

    Wraps a single presidio AnonymizerEngine. Operators are built once at
    construction; the instance holds no per-call state and can be shared
    between threads.
    """

    def __init__(
        self,
        marker: str = DEFAULT_REDACTION_MARKER,
        mask_char: str = "*",
        mask_prefix_length: int = 0,
        mask_suffix_length: int = 4,
        hash_algorithm: str = "sha256",
    ) -> None:
        """Initialize the anonymizer.

        Args:
            marker: Replacement text for the full strategy
            mask_char: Character used by the partial strategy
            mask_prefix_length: Leading characters kept by the partial strategy
            mask_suffix_length: Trailing characters kept by the partial strategy
            hash_algorithm: hashlib algorithm name for the hash strategy

        Raises:
            ConfigurationError: If any parameter is invalid.
        """
        if not marker:
            raise ConfigurationError("Redaction marker cannot be empty")
        if len(mask_char) != 1:
            raise ConfigurationError("Mask character must be a single character")
        if mask_prefix_length < 0 or mask_suffix_length < 0:
            raise ConfigurationError("Mask prefix and suffix lengths must be >= 0")

        try:
            hashlib.new(hash_algorithm)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Unsupported hash algorithm '{hash_algorithm}'"
            ) from e

        self.marker = marker
        self.mask_char = mask_char
        self.mask_prefix_length = mask_prefix_length
        self.mask_suffix_length = mask_suffix_length
        self.hash_algorithm = hash_algorithm

        self._engine = AnonymizerEngine()
        self._operators: Dict[RedactStrategy, OperatorConfig] = {
            RedactStrategy.FULL: OperatorConfig("replace", {"new_value": marker}),
            RedactStrategy.HASH: OperatorConfig("custom", {"lambda": self.hash_text}),
            RedactStrategy.PARTIAL: OperatorConfig("custom", {"lambda": self.mask_text}),
        }

    def hash_text(self, text: str) -> str:
        """Returns the hex digest of text."""
        return hashlib.new(self.hash_algorithm, text.encode("utf-8")).hexdigest()

    def mask_text(self, text: str) -> str:
        """Masks text, keeping the configured prefix and suffix.

        Text too short to keep both ends is masked entirely, so a partial
        redaction never reveals the whole value.
        """
        keep = self.mask_prefix_length + self.mask_suffix_length
        if len(text) <= keep:
            return self.mask_char * len(text)

        end = len(text) - self.mask_suffix_length
        return (
            text[: self.mask_prefix_length]
            + self.mask_char * (end - self.mask_prefix_length)
            + text[end:]
        )

    def redact(self, text: str, strategy: RedactStrategy) -> str:
        """Applies strategy to the whole of text."""
        return self.redact_spans(text, [(0, len(text))], strategy)

    def redact_spans(
        self,
        text: str,
        spans: Iterable[Tuple[int, int]],
        strategy: RedactStrategy,
    ) -> str:
        """Applies strategy to each (start, end) span, leaving the rest intact.

        Args:
            text: Source text
            spans: Non-overlapping character spans to redact
            strategy: Strategy to render

        Returns:
            Text with every span rewritten
        """
        operator = self._operators[strategy]
        results = []
        operators: Dict[str, OperatorConfig] = {}
        for index, (start, end) in enumerate(spans):
            if end <= start:
                continue
            entity = f"{_ENTITY_PREFIX}{index}"
            results.append(
                RecognizerResult(entity_type=entity, start=start, end=end, score=1.0)
            )
            operators[entity] = operator

        if not results:
            return text

        anonymized = self._engine.anonymize(
            text=text, analyzer_results=results, operators=operators
        )
        return anonymized.text
