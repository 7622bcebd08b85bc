"""Data structures for observations and the series catalog."""
from dataclasses import dataclass
from typing import Dict, Tuple

Labels = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class Observation:
    """A single metric data point with labels."""
    series: str
    labels: Labels
    value: float

    @property
    def key(self) -> Tuple[str, Labels]:
        return (self.series, self.labels)

    def label_dict(self) -> Dict[str, str]:
        return dict(self.labels)

    def label_key(self) -> str:
        """Generate a stable key from sorted labels."""
        items = sorted(self.labels)
        return ",".join(f"{k}={v}" for k, v in items)


@dataclass(frozen=True)
class SeriesSpec:
    """Static description of a series: name, help text and label names."""
    name: str
    help: str
    label_names: Tuple[str, ...] = ("station",)

    def observe(self, *label_values: str, value: float) -> Observation:
        """Build an observation for this series from positional label values."""
        if len(label_values) != len(self.label_names):
            raise ValueError(
                f"Series '{self.name}' expects labels {self.label_names}, "
                f"got {len(label_values)} values"
            )
        return Observation(
            self.name,
            tuple(zip(self.label_names, (str(v) for v in label_values))),
            float(value),
        )


# Weather series
WEATHER_TEMP = SeriesSpec("weather_temp", "Current temperature")
WEATHER_FEELS_LIKE = SeriesSpec("weather_feels_like", "Feels like temperature")
WEATHER_TEMP_MIN = SeriesSpec("weather_temp_min", "Minimum temperature")
WEATHER_TEMP_MAX = SeriesSpec("weather_temp_max", "Maximum temperature")
WEATHER_PRESSURE = SeriesSpec("weather_pressure", "Atmospheric pressure in hPa")
WEATHER_HUMIDITY = SeriesSpec("weather_humidity", "Humidity percentage")
WEATHER_SEA_LEVEL = SeriesSpec("weather_sea_level", "Sea level pressure in hPa")
WEATHER_GRND_LEVEL = SeriesSpec("weather_grnd_level", "Ground level pressure in hPa")
WEATHER_VISIBILITY = SeriesSpec("weather_visibility", "Visibility in meters")
WEATHER_WIND_SPEED = SeriesSpec("weather_wind_speed", "Wind speed")
WEATHER_WIND_DEG = SeriesSpec("weather_wind_deg", "Wind direction in degrees")
WEATHER_CLOUDS = SeriesSpec("weather_clouds", "Cloud coverage percentage")
WEATHER_CONDITION = SeriesSpec(
    "weather_condition",
    "Weather condition (1 = active)",
    ("station", "main", "description"),
)

# Air pollution series
AIR_POLLUTION_AQI = SeriesSpec("air_pollution_aqi", "Air Quality Index (1-5)")
AIR_POLLUTION_CO = SeriesSpec("air_pollution_co", "Carbon monoxide concentration in μg/m³")
AIR_POLLUTION_NO = SeriesSpec("air_pollution_no", "Nitrogen monoxide concentration in μg/m³")
AIR_POLLUTION_NO2 = SeriesSpec("air_pollution_no2", "Nitrogen dioxide concentration in μg/m³")
AIR_POLLUTION_O3 = SeriesSpec("air_pollution_o3", "Ozone concentration in μg/m³")
AIR_POLLUTION_SO2 = SeriesSpec("air_pollution_so2", "Sulphur dioxide concentration in μg/m³")
AIR_POLLUTION_PM2_5 = SeriesSpec("air_pollution_pm2_5", "PM2.5 concentration in μg/m³")
AIR_POLLUTION_PM10 = SeriesSpec("air_pollution_pm10", "PM10 concentration in μg/m³")
AIR_POLLUTION_NH3 = SeriesSpec("air_pollution_nh3", "Ammonia concentration in μg/m³")

WEATHER_SERIES = (
    WEATHER_TEMP,
    WEATHER_FEELS_LIKE,
    WEATHER_TEMP_MIN,
    WEATHER_TEMP_MAX,
    WEATHER_PRESSURE,
    WEATHER_HUMIDITY,
    WEATHER_SEA_LEVEL,
    WEATHER_GRND_LEVEL,
    WEATHER_VISIBILITY,
    WEATHER_WIND_SPEED,
    WEATHER_WIND_DEG,
    WEATHER_CLOUDS,
    WEATHER_CONDITION,
)

POLLUTION_SERIES = (
    AIR_POLLUTION_AQI,
    AIR_POLLUTION_CO,
    AIR_POLLUTION_NO,
    AIR_POLLUTION_NO2,
    AIR_POLLUTION_O3,
    AIR_POLLUTION_SO2,
    AIR_POLLUTION_PM2_5,
    AIR_POLLUTION_PM10,
    AIR_POLLUTION_NH3,
)

CATALOG: Dict[str, SeriesSpec] = {
    spec.name: spec for spec in WEATHER_SERIES + POLLUTION_SERIES
}
