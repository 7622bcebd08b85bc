"""Shared fixtures: canned upstream bodies and a fake HTTP session."""
import json
from unittest import mock

import pytest
import requests

from ow_exporter.client import UpstreamClient
from ow_exporter.registry import MetricRegistry

WEATHER_URL = "https://api.example.test/data/2.5/weather?lat=1&lon=2&appid=secret&units=metric"
POLLUTION_URL = "https://api.example.test/data/2.5/air_pollution?lat=1&lon=2&appid=secret"

WEATHER_BODY = {
    "coord": {"lon": 2.0, "lat": 1.0},
    "weather": [{"id": 804, "main": "Clouds", "description": "overcast clouds", "icon": "04d"}],
    "base": "stations",
    "main": {
        "temp": 15.5,
        "feels_like": 14.9,
        "temp_min": 13.0,
        "temp_max": 17.2,
        "pressure": 1012,
        "humidity": 70,
        "sea_level": 1012,
        "grnd_level": 1003,
    },
    "visibility": 10000,
    "wind": {"speed": 4.1, "deg": 250},
    "clouds": {"all": 90},
    "dt": 1700000000,
    "sys": {"type": 2, "id": 2000, "country": "GB"},
    "timezone": 0,
    "id": 42,
    "name": "Somewhere",
    "cod": 200,
}

POLLUTION_BODY = {
    "coord": {"lon": 2.0, "lat": 1.0},
    "list": [
        {
            "main": {"aqi": 3},
            "components": {
                "co": 201.9, "no": 0.0, "no2": 0.8, "o3": 68.6,
                "so2": 0.6, "pm2_5": 8.9, "pm10": 12.1, "nh3": 0.1,
            },
            "dt": 1700000000,
        }
    ],
}


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        if content is None:
            content = json.dumps(body if body is not None else {}).encode()
        self.content = content
        self.closed = False

    def close(self):
        self.closed = True


def make_session(routes):
    """Build a mock Session whose get() answers from ``routes``.

    ``routes`` maps a URL to a FakeResponse, an exception instance, or a list
    of those consumed one per call.
    """
    session = mock.Mock(spec=requests.Session)

    def get(url, timeout=None):
        answer = routes[url]
        if isinstance(answer, list):
            answer = answer.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    session.get.side_effect = get
    return session


def urls_called(session):
    return [c.args[0] for c in session.get.call_args_list]


@pytest.fixture
def registry():
    return MetricRegistry()


@pytest.fixture
def weather_body():
    return json.loads(json.dumps(WEATHER_BODY))


@pytest.fixture
def pollution_body():
    return json.loads(json.dumps(POLLUTION_BODY))


@pytest.fixture
def ok_session(weather_body, pollution_body):
    return make_session({
        WEATHER_URL: FakeResponse(body=weather_body),
        POLLUTION_URL: FakeResponse(body=pollution_body),
    })


@pytest.fixture
def ok_client(ok_session):
    return UpstreamClient(timeout_s=5, session=ok_session)
