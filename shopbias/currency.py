"""
Currency Table

Reference currencies the form can display prices in, plus the
country codes each one is the default for. The first entry is the
fallback when detection fails or no currency is chosen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    countries: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "symbol": self.symbol,
            "name": self.name,
            "countries": list(self.countries),
        }


CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "$", "US Dollar", ("US", "USA")),
    Currency("EUR", "€", "Euro", ("DE", "FR", "IT", "ES", "NL")),
    Currency("GBP", "£", "British Pound", ("GB", "UK")),
    Currency("INR", "₹", "Indian Rupee", ("IN", "IND")),
    Currency("JPY", "¥", "Japanese Yen", ("JP", "JPN")),
    Currency("CNY", "¥", "Chinese Yuan", ("CN", "CHN")),
    Currency("AUD", "A$", "Australian Dollar", ("AU", "AUS")),
    Currency("CAD", "C$", "Canadian Dollar", ("CA", "CAN")),
    Currency("CHF", "CHF", "Swiss Franc", ("CH", "CHE")),
    Currency("BRL", "R$", "Brazilian Real", ("BR", "BRA")),
    Currency("MXN", "MX$", "Mexican Peso", ("MX", "MEX")),
    Currency("ZAR", "R", "South African Rand", ("ZA", "ZAF")),
    Currency("SGD", "S$", "Singapore Dollar", ("SG", "SGP")),
    Currency("HKD", "HK$", "Hong Kong Dollar", ("HK", "HKG")),
    Currency("KRW", "₩", "South Korean Won", ("KR", "KOR")),
    Currency("SEK", "kr", "Swedish Krona", ("SE", "SWE")),
    Currency("NOK", "kr", "Norwegian Krone", ("NO", "NOR")),
    Currency("NZD", "NZ$", "New Zealand Dollar", ("NZ", "NZL")),
)

DEFAULT_CURRENCY = CURRENCIES[0]


def get_currency(code: Optional[str]) -> Optional[Currency]:
    """Case-insensitive lookup by ISO code."""
    if not code:
        return None
    code = code.strip().upper()
    for currency in CURRENCIES:
        if currency.code == code:
            return currency
    return None


def currency_for_country(country_code: Optional[str]) -> Optional[Currency]:
    """First currency in table order that lists the country."""
    if not country_code:
        return None
    country_code = country_code.strip().upper()
    for currency in CURRENCIES:
        if country_code in currency.countries:
            return currency
    return None


def format_price(amount: Optional[float], currency: Currency) -> str:
    """Symbol-prefixed amount with two decimals. Empty when no amount was supplied."""
    if amount is None:
        return ""
    return f"{currency.symbol}{amount:.2f}"
