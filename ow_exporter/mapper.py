"""Mapping of upstream payloads to observations.

Both functions are pure: no I/O, no state, no unit conversion and no range
validation. Values pass through exactly as the upstream reported them.
"""
from typing import List, Tuple

from ow_exporter import series as s
from ow_exporter.schemas import AirPollutionResponse, WeatherResponse
from ow_exporter.series import Observation


def station_id(payload: WeatherResponse) -> str:
    """Station label value for a weather payload."""
    return str(payload.id)


def map_weather(payload: WeatherResponse) -> Tuple[str, List[Observation]]:
    """Map a current-weather payload.

    Returns the station id and one observation per weather field, followed by
    a single condition observation built from the first condition entry. No
    condition observation is produced when the condition list is empty.
    """
    station = station_id(payload)
    main = payload.main

    observations = [
        s.WEATHER_TEMP.observe(station, value=main.temp),
        s.WEATHER_FEELS_LIKE.observe(station, value=main.feels_like),
        s.WEATHER_TEMP_MIN.observe(station, value=main.temp_min),
        s.WEATHER_TEMP_MAX.observe(station, value=main.temp_max),
        s.WEATHER_PRESSURE.observe(station, value=main.pressure),
        s.WEATHER_HUMIDITY.observe(station, value=main.humidity),
        s.WEATHER_SEA_LEVEL.observe(station, value=main.sea_level),
        s.WEATHER_GRND_LEVEL.observe(station, value=main.grnd_level),
        s.WEATHER_VISIBILITY.observe(station, value=payload.visibility),
        s.WEATHER_WIND_SPEED.observe(station, value=payload.wind.speed),
        s.WEATHER_WIND_DEG.observe(station, value=payload.wind.deg),
        s.WEATHER_CLOUDS.observe(station, value=payload.clouds.all),
    ]

    if payload.weather:
        condition = payload.weather[0]
        observations.append(
            s.WEATHER_CONDITION.observe(station, condition.main, condition.description, value=1)
        )

    return station, observations


def map_pollution(payload: AirPollutionResponse, station: str) -> List[Observation]:
    """Map an air-pollution payload using the first list entry only."""
    if not payload.list:
        return []

    entry = payload.list[0]
    c = entry.components
    return [
        s.AIR_POLLUTION_AQI.observe(station, value=entry.main.aqi),
        s.AIR_POLLUTION_CO.observe(station, value=c.co),
        s.AIR_POLLUTION_NO.observe(station, value=c.no),
        s.AIR_POLLUTION_NO2.observe(station, value=c.no2),
        s.AIR_POLLUTION_O3.observe(station, value=c.o3),
        s.AIR_POLLUTION_SO2.observe(station, value=c.so2),
        s.AIR_POLLUTION_PM2_5.observe(station, value=c.pm2_5),
        s.AIR_POLLUTION_PM10.observe(station, value=c.pm10),
        s.AIR_POLLUTION_NH3.observe(station, value=c.nh3),
    ]
