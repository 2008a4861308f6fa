# piifilter/filters/__init__.py

"""Format-specific attribute filters.

Each filter decodes an attribute value in one encoding, evaluates every
key/value pair it contains against the shared matcher and re-encodes the
result.
"""

from piifilter.filters.base import Filter
from piifilter.filters.cookie import CookieFilter
from piifilter.filters.jsonfilter import JsonFilter
from piifilter.filters.keyvalue import KeyValueFilter
from piifilter.filters.urlencoded import UrlEncodedFilter

__all__ = [
    "CookieFilter",
    "Filter",
    "JsonFilter",
    "KeyValueFilter",
    "UrlEncodedFilter",
]
