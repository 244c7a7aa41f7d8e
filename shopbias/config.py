"""
Shopping Bias Detector Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Currency ---
    DEFAULT_CURRENCY: str = os.getenv("SHOPBIAS_DEFAULT_CURRENCY", "USD")

    # --- Geolocation (best-effort currency detection) ---
    GEO_ENABLED: bool = os.getenv("SHOPBIAS_GEO_ENABLED", "true").lower() == "true"
    GEO_LOOKUP_URL: str = os.getenv("SHOPBIAS_GEO_URL", "https://ipapi.co")
    GEO_TIMEOUT: float = float(os.getenv("SHOPBIAS_GEO_TIMEOUT", "3.0"))

    # --- Server ---
    HOST: str = os.getenv("SHOPBIAS_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("SHOPBIAS_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("SHOPBIAS_CORS_ORIGINS", "*")


settings = Settings()
