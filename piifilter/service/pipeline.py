# piifilter/service/pipeline.py

"""Filter chain and the process-wide redaction service."""

import logging
import threading
from typing import Any, Optional, Sequence, Tuple

from piifilter.core.domain import RuleSet
from piifilter.core.exceptions import (
    ConfigurationError,
    InitializationError,
    MalformedEncodingError,
    UnprocessableValueError,
)
from piifilter.core.loader import RuleLoader
from piifilter.engine.anonymizer import TextAnonymizer
from piifilter.engine.matcher import Matcher
from piifilter.filters import CookieFilter, JsonFilter, KeyValueFilter, UrlEncodedFilter
from piifilter.filters.base import Filter
from piifilter.service.config import Settings
from piifilter.service.config import settings as default_settings

logger = logging.getLogger(__name__)


class FilterChain:
    """Applies filters to an attribute in a fixed order.

    The first filter that redacts wins; later filters never see the
    attribute. Filter failures are logged and the next filter is tried, so
    the worst outcome of any error is an attribute left unredacted.
    """

    def __init__(self, filters: Sequence[Filter]) -> None:
        self._filters: Tuple[Filter, ...] = tuple(filters)

    @property
    def filters(self) -> Tuple[Filter, ...]:
        return self._filters

    def apply(self, key: str, value: Any) -> Tuple[bool, Any]:
        """Redacts one attribute.

        Args:
            key: Attribute key
            value: Attribute value

        Returns:
            Tuple of (redacted, final value). The final value is the original
            when no filter redacted.
        """
        for attribute_filter in self._filters:
            log_context = {"filter_name": attribute_filter.name, "attribute_key": key}

            try:
                redacted, new_value = attribute_filter.redact_attribute(key, value)

            except MalformedEncodingError as e:
                logger.warning(
                    f"Filter {attribute_filter.name!r} could not decode attribute {key!r}: {e}",
                    extra=log_context,
                )
                continue

            except UnprocessableValueError:
                logger.debug(
                    f"Filter {attribute_filter.name!r} skipped attribute {key!r}. Unsuitable value.",
                    extra=log_context,
                )
                continue

            except Exception:
                logger.error(
                    f"Filter {attribute_filter.name!r} failed on attribute {key!r}",
                    exc_info=True,
                    extra=log_context,
                )
                continue

            if redacted:
                logger.debug(
                    f"Attribute {key!r} redacted by filter {attribute_filter.name!r}",
                    extra=log_context,
                )
                return True, new_value

        return False, value

    def __repr__(self) -> str:
        return f"<FilterChain filters={[f.name for f in self._filters]}>"


def build_matcher(settings: Settings, rules: Optional[RuleSet] = None) -> Matcher:
    """Builds the matcher from settings and a rule set.

    Args:
        settings: Filter settings
        rules: Rule set; loaded from settings.rules_file when omitted

    Returns:
        Compiled Matcher

    Raises:
        ConfigurationError: If the rules or settings are invalid.
    """
    if rules is None:
        rules = RuleLoader(settings.rules_file).load()

    anonymizer = TextAnonymizer(
        marker=settings.redaction_marker,
        mask_char=settings.mask_char,
        mask_prefix_length=settings.mask_prefix_length,
        mask_suffix_length=settings.mask_suffix_length,
        hash_algorithm=settings.hash_algorithm,
    )

    return Matcher(
        key_rules=rules.key_rules,
        value_rules=rules.value_rules,
        default_strategy=rules.default_strategy or settings.default_strategy,
        anonymizer=anonymizer,
    )


def build_chain(matcher: Matcher, settings: Optional[Settings] = None) -> FilterChain:
    """Builds the standard chain: keyvalue, cookie, urlencoded, json.

    The cheapest and most general filter runs first; a value that one filter
    redacts is never offered to the more structured filters after it.
    """
    redact_containers = settings.json_redact_containers if settings else False
    return FilterChain(
        [
            KeyValueFilter(matcher),
            CookieFilter(matcher),
            UrlEncodedFilter(matcher),
            JsonFilter(matcher, redact_containers=redact_containers),
        ]
    )


class PiiFilterService:
    """Singleton holder for the process-wide filter chain.

    The chain is built once, on first use, and shared read-only by every
    caller afterwards.
    """

    _instance: Optional[FilterChain] = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls, settings: Optional[Settings] = None) -> FilterChain:
        """Returns the singleton filter chain.

        Args:
            settings: Settings used for the first build; the module-level
                settings when omitted

        Raises:
            ConfigurationError: If the rules or settings are invalid.
            InitializationError: If the chain cannot be built for any other reason.
        """
        if cls._instance is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._instance is None:
                    if settings is None:
                        settings = default_settings

                    try:
                        logger.info("Initializing PII filter chain")
                        cls._instance = build_chain(build_matcher(settings), settings)
                        logger.info(
                            "PII filter chain initialized successfully",
                            extra={"filters": [f.name for f in cls._instance.filters]},
                        )

                    except ConfigurationError:
                        logger.error("Invalid PII filter configuration", exc_info=True)
                        raise
                    except Exception as e:
                        logger.error("Failed to initialize PII filter chain", exc_info=True)
                        raise InitializationError(
                            "PII filter chain initialization failed"
                        ) from e

        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drops the singleton so the next call rebuilds it."""
        with cls._lock:
            cls._instance = None


def redact_attribute(key: str, value: Any) -> Tuple[bool, Any]:
    """Main entry point for redacting a single attribute.

    Args:
        key: Attribute key
        value: Attribute value

    Returns:
        Tuple of (redacted, final value)
    """
    return PiiFilterService.get_instance().apply(key, value)
