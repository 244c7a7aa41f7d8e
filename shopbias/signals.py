"""
Signal Record — One Listing, One Analysis

A SignalRecord is the complete set of shopper-supplied facts about a
single product listing: item name, prices, and the checkbox flags for
the marketing signals the listing shows.

Records are values. They are built once per analysis request, read by
the matcher, and discarded. Nothing mutates a record after construction.

Flag absence is explicit: `record.flag(name)` returns False for any flag
the shopper did not tick, so predicates never depend on how a missing
key happens to coerce.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Recognized checkbox flags, in form display order
SIGNAL_FLAGS: tuple[str, ...] = (
    "hasOriginalPrice",
    "showsComparePrice",
    "limitedTime",
    "lowStock",
    "bestseller",
    "hasReviews",
    "trending",
    "bundleDeal",
    "multipleTiers",
    "partOfCollection",
    "upgradeExisting",
    "emphasizesSavings",
    "freeTrial",
    "tryBefore",
    "exclusiveOffer",
    "freeGift",
)


def parse_price(value: Any) -> Optional[float]:
    """
    Parse a form price value into a float.

    Accepts numbers or numeric strings. Empty, blank, non-numeric,
    NaN and infinite values come back as None ("not supplied").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            amount = float(text)
        except ValueError:
            return None
    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def is_ready(item_name: Optional[str], price: Any) -> bool:
    """An analysis needs a non-blank item name and a parseable price."""
    if not item_name or not item_name.strip():
        return False
    return parse_price(price) is not None


@dataclass(frozen=True)
class SignalRecord:
    """Shopper-supplied facts about one listing."""
    item_name: str = ""
    price: Optional[float] = None
    original_price: Optional[float] = None
    flags: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self):
        # Snapshot the caller's mapping so later edits to it cannot leak in
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    def flag(self, name: str) -> bool:
        """Lookup-with-default: an absent flag reads as False."""
        return bool(self.flags.get(name, False))

    @property
    def selected_count(self) -> int:
        """Number of flags the shopper ticked."""
        return sum(1 for value in self.flags.values() if value)

    @classmethod
    def from_form(
        cls,
        item_name: str,
        price: Any,
        original_price: Any = None,
        selected: Optional[Mapping[str, Any]] = None,
    ) -> SignalRecord:
        """
        Build a record from raw form values.

        Prices go through parse_price. Only recognized flag names are
        kept; anything else the form sends is dropped.
        """
        flags = {
            name: bool(value)
            for name, value in (selected or {}).items()
            if name in SIGNAL_FLAGS
        }
        return cls(
            item_name=item_name or "",
            price=parse_price(price),
            original_price=parse_price(original_price),
            flags=flags,
        )


def unknown_flags(selected: Optional[Mapping[str, Any]]) -> list[str]:
    """Flag names in a form submission that the catalog does not recognize."""
    return [name for name in (selected or {}) if name not in SIGNAL_FLAGS]
