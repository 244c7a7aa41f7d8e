"""
Analyzer — One Listing, One Result

Runs the matcher over a SignalRecord and assembles everything the
results view shows: the matched biases, counts, formatted prices and
the summary lines.
"""

from __future__ import annotations

import time
from typing import Optional

from shopbias.catalog import CATALOG_VERSION
from shopbias.currency import DEFAULT_CURRENCY, Currency, format_price
from shopbias.logging import get_logger
from shopbias.matcher import match
from shopbias.signals import SignalRecord

logger = get_logger("analyzer")

NO_BIAS_SUMMARY = (
    "No obvious biases detected. This appears to be a straightforward purchase decision!"
)


def tactics_summary(selected_count: int) -> str:
    """'1 marketing tactic detected in listing' / 'N marketing tactics ...'."""
    plural = "" if selected_count == 1 else "s"
    return f"{selected_count} marketing tactic{plural} detected in listing"


def bias_summary(bias_count: int) -> str:
    if bias_count == 0:
        return NO_BIAS_SUMMARY
    plural = "es" if bias_count > 1 else ""
    return f"{bias_count} cognitive bias{plural} may be affecting your decision"


def analyze_listing(
    record: SignalRecord,
    currency: Optional[Currency] = None,
) -> dict:
    """
    Analyze one listing.

    Args:
        record: Shopper-supplied signals.
        currency: Display currency for the formatted prices.

    Returns:
        dict with matched biases, counts, formatted prices and summaries.
    """
    currency = currency or DEFAULT_CURRENCY
    start = time.perf_counter()

    matched = match(record)
    selected = record.selected_count

    result = {
        "item_name": record.item_name,
        "price": record.price,
        "original_price": record.original_price,
        "currency": currency.code,
        "formatted_price": format_price(record.price, currency),
        "formatted_original_price": (
            format_price(record.original_price, currency)
            if record.original_price is not None else None
        ),
        "selected_count": selected,
        "tactics_summary": tactics_summary(selected),
        "bias_detected": bool(matched),
        "bias_count": len(matched),
        "summary": bias_summary(len(matched)),
        "biases": [rule.to_dict() for rule in matched],
        "catalog_version": CATALOG_VERSION,
    }

    logger.debug(
        "Listing analyzed",
        extra={
            "bias_count": len(matched),
            "selected_count": selected,
            "bias_ids": [rule.id for rule in matched],
            "currency": currency.code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 3),
        },
    )
    return result
