"""Pydantic models for the OpenWeather response bodies."""
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Payload(BaseModel):
    """Base for upstream payloads: extra fields ignored, nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Coord(_Payload):
    lon: float = 0.0
    lat: float = 0.0


# Current weather

class WeatherCondition(_Payload):
    id: int = 0
    main: str = ""
    description: str = ""
    icon: str = ""


class WeatherMain(_Payload):
    temp: float = 0.0
    feels_like: float = 0.0
    temp_min: float = 0.0
    temp_max: float = 0.0
    pressure: float = 0.0
    humidity: float = 0.0
    sea_level: float = 0.0
    grnd_level: float = 0.0


class Wind(_Payload):
    speed: float = 0.0
    deg: float = 0.0


class Clouds(_Payload):
    all: float = 0.0


class WeatherResponse(_Payload):
    """Body of the /weather endpoint."""
    coord: Coord = Field(default_factory=Coord)
    weather: List[WeatherCondition] = Field(default_factory=list)
    main: WeatherMain = Field(default_factory=WeatherMain)
    visibility: float = 0.0
    wind: Wind = Field(default_factory=Wind)
    clouds: Clouds = Field(default_factory=Clouds)
    dt: int = 0
    timezone: int = 0
    id: int = 0
    name: str = ""


# Air pollution

class PollutionMain(_Payload):
    aqi: int = 0


class Components(_Payload):
    co: float = 0.0
    no: float = 0.0
    no2: float = 0.0
    o3: float = 0.0
    so2: float = 0.0
    pm2_5: float = 0.0
    pm10: float = 0.0
    nh3: float = 0.0


class PollutionEntry(_Payload):
    main: PollutionMain = Field(default_factory=PollutionMain)
    components: Components = Field(default_factory=Components)
    dt: int = 0


class AirPollutionResponse(_Payload):
    """Body of the /air_pollution endpoint."""
    coord: Coord = Field(default_factory=Coord)
    list: List[PollutionEntry] = Field(default_factory=list)
