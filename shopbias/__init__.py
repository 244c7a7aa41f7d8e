"""
Shopping Bias Detector — Cognitive Bias Checks for Product Listings

Maps the marketing signals a shopper sees on a listing to the
cognitive biases those signals tend to trigger.

Public API:
  - match:             Pure matcher over the frozen bias catalog
  - analyze_listing:   Matcher plus counts, summaries and formatted prices
  - SignalRecord:      One listing's prices and checkbox flags
  - BIAS_CATALOG:      The ten bias rules, in display order
  - SHOPPING_OPTIONS:  The sixteen checkbox signals, in display order
  - CURRENCIES:        Reference currency table
  - currency_detector: Best-effort IP-based currency detection

Usage:
    from shopbias import SignalRecord, match
    record = SignalRecord.from_form("Headphones", "99.99", selected={"limitedTime": True})
    [rule.id for rule in match(record)]
"""

__version__ = "1.0.0"

from shopbias.catalog import (
    BIAS_CATALOG,
    SHOPPING_OPTIONS,
    CATALOG_VERSION,
    BiasRule,
    ShoppingOption,
)
from shopbias.signals import SIGNAL_FLAGS, SignalRecord, parse_price, is_ready
from shopbias.matcher import match
from shopbias.analyzer import analyze_listing
from shopbias.currency import CURRENCIES, DEFAULT_CURRENCY, Currency, format_price
from shopbias.geolocation import currency_detector, CurrencyDetector

__all__ = [
    "BIAS_CATALOG",
    "SHOPPING_OPTIONS",
    "CATALOG_VERSION",
    "BiasRule",
    "ShoppingOption",
    "SIGNAL_FLAGS",
    "SignalRecord",
    "parse_price",
    "is_ready",
    "match",
    "analyze_listing",
    "CURRENCIES",
    "DEFAULT_CURRENCY",
    "Currency",
    "format_price",
    "currency_detector",
    "CurrencyDetector",
]
