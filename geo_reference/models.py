"""
Pydantic models for the geographic reference data.
These are immutable data objects; the query layer never mutates them.

Field names follow Python conventions; aliases keep the camelCase keys used
by the JSON datasets (zoneName, emojiU, hasCountries, ...), so
``model_dump(by_alias=True)`` reproduces the dataset shape.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


_FROZEN = {"frozen": True, "populate_by_name": True}


# ── Countries ─────────────────────────────────────────────────────────

class Timezone(BaseModel):
    zone_name: str = Field(..., alias="zoneName")
    gmt_offset: int = Field(0, alias="gmtOffset", description="UTC offset in seconds")
    gmt_offset_name: str = Field("", alias="gmtOffsetName")
    abbreviation: str = ""
    tz_name: str = Field("", alias="tzName")

    model_config = _FROZEN


class Country(BaseModel):
    id: int
    name: str
    iso3: str
    iso2: str
    numeric_code: Optional[str] = None
    phone_code: str = ""
    capital: str = ""
    currency: str = ""
    currency_name: str = ""
    currency_symbol: str = ""
    tld: Optional[str] = None
    native: str = ""
    region: str = ""
    region_id: Optional[str] = None
    subregion: str = ""
    subregion_id: Optional[str] = None
    nationality: str = ""
    timezones: list[Timezone] = Field(default_factory=list)
    translations: dict[str, str] = Field(default_factory=dict)
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    emoji: Optional[str] = None
    emoji_u: Optional[str] = Field(None, alias="emojiU")

    model_config = {**_FROZEN, "extra": "allow"}

    @field_validator(
        "capital", "native", "nationality", "region", "subregion",
        "currency", "currency_name", "currency_symbol",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v):
        """Some dataset rows carry null for free-text fields."""
        return "" if v is None else v

    @field_validator("phone_code", mode="before")
    @classmethod
    def phone_code_as_string(cls, v):
        if v is None:
            return ""
        return str(v)

    @field_validator("timezones", mode="before")
    @classmethod
    def null_timezones(cls, v):
        return [] if v is None else v

    @field_validator("translations", mode="before")
    @classmethod
    def drop_empty_translations(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: t for k, t in v.items() if t is not None}
        return v

    @field_validator("region_id", "subregion_id", "numeric_code", mode="before")
    @classmethod
    def code_as_string(cls, v):
        return None if v is None else str(v)


# ── States / cities ───────────────────────────────────────────────────

class State(BaseModel):
    id: int
    name: str
    country_id: int
    country_code: str = ""
    country_name: str = ""
    state_code: str = ""
    type: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    model_config = {**_FROZEN, "extra": "allow"}

    @field_validator("state_code", mode="before")
    @classmethod
    def state_code_as_string(cls, v):
        return "" if v is None else str(v)


class City(BaseModel):
    id: int
    name: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    model_config = {**_FROZEN, "extra": "allow"}


class StateCities(BaseModel):
    """One state node of the country -> state -> city hierarchy."""
    id: int
    cities: list[City] = Field(default_factory=list)

    model_config = _FROZEN

    @field_validator("cities", mode="before")
    @classmethod
    def null_cities(cls, v):
        return [] if v is None else v


class CountryCities(BaseModel):
    """One country node of the hierarchy."""
    id: int
    states: list[StateCities] = Field(default_factory=list)

    model_config = _FROZEN

    @field_validator("states", mode="before")
    @classmethod
    def null_states(cls, v):
        return [] if v is None else v


# ── Regions / languages ───────────────────────────────────────────────

class Region(BaseModel):
    id: str
    name: str
    has_countries: bool = Field(False, alias="hasCountries")

    model_config = _FROZEN

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return str(v)


class Language(BaseModel):
    code: str
    name: str
    native: str = ""

    model_config = _FROZEN

    @field_validator("native", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


# ── Derived views ─────────────────────────────────────────────────────

class Currency(BaseModel):
    code: str
    name: str
    symbol: str

    model_config = _FROZEN

    @classmethod
    def from_country(cls, country: Country) -> "Currency":
        return cls(
            code=country.currency,
            name=country.currency_name,
            symbol=country.currency_symbol,
        )


class CountryInfo(Country):
    """A country merged with its state and city counts."""
    state_count: int = Field(0, alias="stateCount")
    city_count: int = Field(0, alias="cityCount")


class Statistics(BaseModel):
    total_countries: int = Field(0, alias="totalCountries")
    total_states: int = Field(0, alias="totalStates")
    total_languages: int = Field(0, alias="totalLanguages")
    total_regions: int = Field(0, alias="totalRegions")
    total_currencies: int = Field(0, alias="totalCurrencies")
    total_timezones: int = Field(0, alias="totalTimezones")

    model_config = _FROZEN
