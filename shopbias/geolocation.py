"""
Currency Detection — Best-Effort IP Geolocation

Looks up the caller's country through an IP-geolocation service and
maps it to a reference currency. This is a presentation default only:
the matcher never consults it.

Every failure (timeout, transport error, non-2xx status, malformed
JSON, missing country) is logged and answered with the fallback
currency. Nothing here raises to the caller.

Usage:
    from shopbias.geolocation import currency_detector
    detection = await currency_detector.detect_for_client("203.0.113.7")
    detection.currency.code
"""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass
from typing import Optional

import httpx

from shopbias.config import settings
from shopbias.currency import (
    DEFAULT_CURRENCY,
    Currency,
    currency_for_country,
    get_currency,
)
from shopbias.logging import get_logger

logger = get_logger("geolocation")


@dataclass(frozen=True)
class CurrencyDetection:
    """Outcome of one detection attempt."""
    currency: Currency
    country_code: Optional[str]
    detected: bool  # False when the fallback was used

    def to_dict(self) -> dict:
        return {
            "currency": self.currency.to_dict(),
            "country_code": self.country_code,
            "detected": self.detected,
        }


def is_public_ip(host: Optional[str]) -> bool:
    """True for a globally routable IPv4/IPv6 address."""
    if not host:
        return False
    try:
        return ipaddress.ip_address(host).is_global
    except ValueError:
        return False


class CurrencyDetector:
    """
    Resolves a display currency from IP geolocation.

    Holds one piece of mutable state: the server-wide default currency,
    which the background detection task may overwrite once at startup.
    """

    def __init__(
        self,
        base_url: str = settings.GEO_LOOKUP_URL,
        timeout: float = settings.GEO_TIMEOUT,
        enabled: bool = settings.GEO_ENABLED,
        fallback: Optional[Currency] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.enabled = enabled
        self.fallback = (
            fallback or get_currency(settings.DEFAULT_CURRENCY) or DEFAULT_CURRENCY
        )
        self._transport = transport
        self._default = self.fallback
        self._task: Optional[asyncio.Task] = None

    @property
    def default_currency(self) -> Currency:
        return self._default

    def _lookup_url(self, ip: Optional[str]) -> str:
        if ip:
            return f"{self.base_url}/{ip}/json/"
        return f"{self.base_url}/json/"

    async def lookup_country(self, ip: Optional[str] = None) -> Optional[str]:
        """
        Ask the geolocation service for a country code.

        Args:
            ip: Address to locate. None locates the server itself.

        Returns:
            Upper-case country code, or None on any failure.
        """
        if not self.enabled:
            return None

        url = self._lookup_url(ip)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Currency lookup failed, using default currency",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return None

        country = data.get("country_code") if isinstance(data, dict) else None
        if not isinstance(country, str) or not country.strip():
            logger.info("Geolocation response had no country code")
            return None
        return country.strip().upper()

    async def detect(self, ip: Optional[str] = None) -> CurrencyDetection:
        """Resolve a currency, falling back to the reference-table fallback."""
        country = await self.lookup_country(ip)
        currency = currency_for_country(country)
        if currency is None:
            return CurrencyDetection(
                currency=self.fallback, country_code=country, detected=False,
            )
        logger.info(
            "Currency detected",
            extra={"country_code": country, "currency": currency.code},
        )
        return CurrencyDetection(currency=currency, country_code=country, detected=True)

    async def detect_for_client(self, host: Optional[str]) -> CurrencyDetection:
        """
        Resolve a currency for a request's client address.

        Private, loopback and non-IP hosts cannot be located; they get
        the fallback currency without a network call.
        """
        if not is_public_ip(host):
            return CurrencyDetection(
                currency=self.fallback, country_code=None, detected=False,
            )
        return await self.detect(host)

    # ============================================================
    # BACKGROUND DETECTION
    # ============================================================

    async def _refresh_default(self) -> None:
        detection = await self.detect()
        if detection.detected:
            self._default = detection.currency
            logger.info(
                "Default currency set from server location",
                extra={"currency": detection.currency.code,
                       "country_code": detection.country_code},
            )

    def start_background_detection(self) -> Optional[asyncio.Task]:
        """
        Fire-and-forget detection of the server's default currency.

        Requests never wait on this task. If it finishes, later requests
        see the detected default; if it fails, the fallback stays.
        """
        if not self.enabled or self._task is not None:
            return None
        self._task = asyncio.get_running_loop().create_task(self._refresh_default())
        self._task.add_done_callback(self._on_task_done)
        return self._task

    @staticmethod
    def _on_task_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "Background currency detection failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )

    async def shutdown(self) -> None:
        """Cancel a still-running background task."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def reset(self) -> None:
        """Restore the fallback default. Used between app lifecycles and in tests."""
        self._default = self.fallback


# Singleton — shared across the application
currency_detector = CurrencyDetector()
