"""Request and response models for the weather HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CitySuggestion(BaseModel):
    name: str
    state: str | None = None
    country: str
    fullName: str


class CurrentWeather(BaseModel):
    model_config = ConfigDict(extra='allow')

    city: str | None = None
    temp: int | float | None = None
    high: int | float | None = None
    low: int | float | None = None
    wind: int | float | None = None
    humidity: int | float | None = None
    condition: str | None = None
    icon: str | None = None


class HourlyEntry(BaseModel):
    model_config = ConfigDict(extra='allow')

    time: str | None = None
    temp: int | float | None = None
    condition: str | None = None
    icon: str | None = None


class DailyEntry(BaseModel):
    model_config = ConfigDict(extra='allow')

    day: str | None = None
    high: int | float | None = None
    low: int | float | None = None
    condition: str | None = None
    icon: str | None = None


class WeatherBundle(BaseModel):
    current: CurrentWeather | None = None
    hourly: list[HourlyEntry] = Field(default_factory=list)
    daily: list[DailyEntry] = Field(default_factory=list)


class TipsRequest(BaseModel):
    # Loosely typed: the tip generator falls back to defaults for bad values
    weatherData: Any = None
    favoriteDay: Any = None


class TipsResponse(BaseModel):
    aiResponse: str


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
