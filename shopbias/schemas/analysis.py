"""
API Schemas — Request and Response Models

Pydantic models for the Shopping Bias Detector API.
"""

from __future__ import annotations

from typing import Optional, Union
from pydantic import BaseModel, Field


# ============================================================
# ANALYZE
# ============================================================

class AnalyzeRequest(BaseModel):
    """POST /analyze request body."""
    item_name: str = Field("", max_length=200,
                           description="What the shopper is buying.")
    price: Optional[Union[float, str]] = Field(
        None, description="Current price, as typed into the form or as a number.")
    original_price: Optional[Union[float, str]] = Field(
        None, description="Crossed-out original price, if the listing shows one.")
    flags: dict[str, bool] = Field(
        default_factory=dict,
        description="Checkbox flags keyed by signal name. Missing flags are false.")
    currency: Optional[str] = Field(
        None, pattern="^[A-Za-z]{3}$",
        description="ISO currency code for formatted prices. Defaults to the server default.")

    model_config = {"json_schema_extra": {"examples": [
        {
            "item_name": "Wireless Headphones",
            "price": "99.99",
            "original_price": "149.99",
            "flags": {"hasOriginalPrice": True, "limitedTime": True},
            "currency": "USD",
        },
    ]}}


class BiasResponse(BaseModel):
    id: str
    name: str
    description: str
    explanation: str
    advice: str


class AnalyzeResponse(BaseModel):
    """POST /analyze response body."""
    item_name: str
    price: float
    original_price: Optional[float] = None
    currency: str
    formatted_price: str
    formatted_original_price: Optional[str] = None
    selected_count: int
    tactics_summary: str
    bias_detected: bool
    bias_count: int
    summary: str
    biases: list[BiasResponse]
    catalog_version: str
    ignored_flags: list[str] = Field(default_factory=list)


# ============================================================
# CATALOG
# ============================================================

class BiasRuleResponse(BiasResponse):
    signals: list[str]


class BiasCatalogResponse(BaseModel):
    """GET /biases response body."""
    catalog_version: str
    total: int
    biases: list[BiasRuleResponse]


class ShoppingOptionResponse(BaseModel):
    id: str
    label: str
    icon: str


class OptionsResponse(BaseModel):
    """GET /options response body."""
    total: int
    options: list[ShoppingOptionResponse]


# ============================================================
# CURRENCY
# ============================================================

class CurrencyResponse(BaseModel):
    code: str
    symbol: str
    name: str
    countries: list[str]


class CurrencyListResponse(BaseModel):
    """GET /currencies response body."""
    default: CurrencyResponse
    currencies: list[CurrencyResponse]


class CurrencyDetectResponse(BaseModel):
    """GET /currencies/detect response body."""
    currency: CurrencyResponse
    country_code: Optional[str] = None
    detected: bool


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_version: str
    biases_tracked: int
    shopping_scenarios: int
    default_currency: str
    geolocation_enabled: bool
