"""HTTP client for the OpenWeather endpoints."""
import logging
import re
from typing import Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ow_exporter.schemas import AirPollutionResponse, WeatherResponse

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

_APPID_RE = re.compile(r"(appid=)[^&\s'\"]*")


def redact_url(url: str) -> str:
    """Hide the API key embedded in a request URL."""
    return _APPID_RE.sub(r"\1***", url)


class FetchError(Exception):
    """Base class for upstream fetch failures."""

    kind = "fetch"

    def __init__(self, source: str, url: str, detail: str):
        self.source = source
        self.url = redact_url(url)
        # transport messages can embed the full request URL
        self.detail = redact_url(detail)
        super().__init__(f"{source}: {self.detail} ({self.url})")


class TransportError(FetchError):
    """Connection, DNS, IO failure or timeout."""

    kind = "transport"


class StatusError(FetchError):
    """Upstream answered with a non-2xx status."""

    kind = "status"

    def __init__(self, source: str, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(source, url, f"API returned status code: {status_code}")


class DecodeError(FetchError):
    """Body is not JSON or does not match the expected schema."""

    kind = "decode"


def _describe_validation_error(source: str, error: ValidationError) -> str:
    first = error.errors(include_url=False, include_input=False)[0]
    loc = ".".join(str(part) for part in first["loc"]) or "<body>"
    detail = f"failed to decode {source} response: {first['msg']} at {loc}"
    if error.error_count() > 1:
        detail += f" (+{error.error_count() - 1} more)"
    return detail


class UpstreamClient:
    """Performs single GET requests and decodes the JSON body into a payload model."""

    def __init__(self, timeout_s: Optional[float] = 10.0, session: Optional[requests.Session] = None):
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def fetch(self, url: str, schema: Type[PayloadT], source: str = "upstream") -> PayloadT:
        """GET ``url`` and parse the body as ``schema``.

        Raises:
            TransportError: the request could not be completed
            StatusError: the response status is not 2xx
            DecodeError: the body is not valid JSON for ``schema``
        """
        logger.debug(f"Fetching {source} data from {redact_url(url)}")
        try:
            response = self.session.get(url, timeout=self.timeout_s)
        except requests.Timeout as e:
            raise TransportError(source, url, f"request timed out after {self.timeout_s}s: {e}") from e
        except requests.RequestException as e:
            raise TransportError(source, url, f"failed to fetch {source} data: {e}") from e

        try:
            if not 200 <= response.status_code < 300:
                raise StatusError(source, url, response.status_code)

            try:
                return schema.model_validate_json(response.content)
            except ValidationError as e:
                raise DecodeError(source, url, _describe_validation_error(source, e)) from e
        finally:
            response.close()

    def fetch_weather(self, url: str) -> WeatherResponse:
        return self.fetch(url, WeatherResponse, source="weather")

    def fetch_pollution(self, url: str) -> AirPollutionResponse:
        return self.fetch(url, AirPollutionResponse, source="pollution")

    def close(self):
        self.session.close()
