"""Configuration models using Pydantic for validation."""
from typing import Literal, Optional
from urllib.parse import urlencode
from pydantic import BaseModel, Field, SecretStr, field_validator
import os

Units = Literal["standard", "metric", "imperial"]


class OpenWeatherConfig(BaseModel):
    """Upstream API location and credentials."""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    api_key: SecretStr
    units: Units = "standard"
    base_url: str = "https://api.openweathermap.org/data/2.5"
    timeout_s: Optional[float] = Field(default=10.0, gt=0)

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v):
        if not v.get_secret_value().strip():
            raise ValueError("api_key must not be empty")
        return v

    def _url(self, endpoint: str, **params) -> str:
        query = {
            "lat": self.latitude,
            "lon": self.longitude,
            "appid": self.api_key.get_secret_value(),
            **params,
        }
        return f"{self.base_url.rstrip('/')}/{endpoint}?{urlencode(query)}"

    def weather_url(self) -> str:
        """Current weather URL, in the configured unit system."""
        return self._url("weather", units=self.units)

    def pollution_url(self) -> str:
        """Air pollution URL (the endpoint has no unit parameter)."""
        return self._url("air_pollution")


class ExporterConfig(BaseModel):
    """Prometheus pull endpoint configuration."""
    port: int = Field(default=8080, ge=1, le=65535)
    bind_address: str = "0.0.0.0"
    prefix: str = "ow_"


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    # 2 API calls per cycle every 5 minutes stays below the free tier daily limit
    refresh_interval_s: int = Field(default=300, gt=0)
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"


class Config(BaseModel):
    """Root configuration model."""
    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    openweather: OpenWeatherConfig
    exporter: ExporterConfig = Field(default_factory=ExporterConfig)

    model_config = {"populate_by_name": True}


# env var -> (section, key)
ENV_OVERRIDES = {
    "LATITUDE": ("openweather", "latitude"),
    "LONGITUDE": ("openweather", "longitude"),
    "OPENWEATHER_API_KEY": ("openweather", "api_key"),
    "UNITS": ("openweather", "units"),
    "EXPORTER_PORT": ("exporter", "port"),
    "REFRESH_INTERVAL": ("global", "refresh_interval_s"),
    "LOG_LEVEL": ("global", "log_level"),
}


def load_config(config_path: Optional[str] = None, environ=None) -> Config:
    """Load and validate configuration from an optional YAML file plus environment."""
    import yaml

    environ = os.environ if environ is None else environ
    raw_config = {}

    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    for env_name, (section, key) in ENV_OVERRIDES.items():
        if env_value := environ.get(env_name):
            raw_config.setdefault(section, {})[key] = env_value

    # Unset UNITS means the upstream default unit system
    raw_config.setdefault("openweather", {}).setdefault("units", "standard")

    try:
        return Config(**raw_config)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")
