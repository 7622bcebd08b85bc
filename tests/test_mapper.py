"""Tests for payload to observation mapping."""
from ow_exporter.mapper import map_pollution, map_weather
from ow_exporter.schemas import AirPollutionResponse, WeatherResponse
from ow_exporter.series import CATALOG, POLLUTION_SERIES, WEATHER_SERIES


def _values(observations):
    return {(o.series, o.labels): o.value for o in observations}


def test_weather_scenario():
    payload = WeatherResponse.model_validate({
        "id": 42,
        "main": {"temp": 15.5, "humidity": 70},
        "weather": [{"main": "Clouds", "description": "overcast clouds"}],
    })

    station, observations = map_weather(payload)
    values = _values(observations)

    assert station == "42"
    assert values[("weather_temp", (("station", "42"),))] == 15.5
    assert values[("weather_humidity", (("station", "42"),))] == 70
    condition_labels = (("station", "42"), ("main", "Clouds"), ("description", "overcast clouds"))
    assert values[("weather_condition", condition_labels)] == 1


def test_weather_emits_every_series_in_order(weather_body):
    _, observations = map_weather(WeatherResponse.model_validate(weather_body))

    assert [o.series for o in observations] == [spec.name for spec in WEATHER_SERIES]
    values = {o.series: o.value for o in observations}
    assert values["weather_visibility"] == 10000
    assert values["weather_wind_speed"] == 4.1
    assert values["weather_wind_deg"] == 250
    assert values["weather_clouds"] == 90
    assert values["weather_grnd_level"] == 1003


def test_weather_uses_first_condition_only(weather_body):
    weather_body["weather"].append({"main": "Rain", "description": "light rain"})
    _, observations = map_weather(WeatherResponse.model_validate(weather_body))

    conditions = [o for o in observations if o.series == "weather_condition"]
    assert len(conditions) == 1
    assert conditions[0].label_dict()["main"] == "Clouds"


def test_weather_without_conditions_skips_condition(weather_body):
    weather_body["weather"] = []
    _, observations = map_weather(WeatherResponse.model_validate(weather_body))

    assert "weather_condition" not in {o.series for o in observations}
    assert len(observations) == len(WEATHER_SERIES) - 1


def test_weather_values_pass_through_unvalidated():
    payload = WeatherResponse.model_validate({"id": 1, "main": {"humidity": -5, "temp": -300.0}})
    _, observations = map_weather(payload)
    values = {o.series: o.value for o in observations}

    assert values["weather_humidity"] == -5
    assert values["weather_temp"] == -300.0


def test_pollution_scenario():
    payload = AirPollutionResponse.model_validate(
        {"list": [{"main": {"aqi": 3}, "components": {"co": 201.9, "pm2_5": 8.9}}]}
    )

    values = _values(map_pollution(payload, "42"))
    station = (("station", "42"),)

    assert values[("air_pollution_aqi", station)] == 3
    assert values[("air_pollution_co", station)] == 201.9
    assert values[("air_pollution_pm2_5", station)] == 8.9
    assert values[("air_pollution_nh3", station)] == 0.0


def test_pollution_emits_every_series_in_order(pollution_body):
    observations = map_pollution(AirPollutionResponse.model_validate(pollution_body), "7")

    assert [o.series for o in observations] == [spec.name for spec in POLLUTION_SERIES]
    assert all(o.labels == (("station", "7"),) for o in observations)


def test_pollution_empty_list_yields_nothing():
    assert map_pollution(AirPollutionResponse.model_validate({"list": []}), "42") == []


def test_mapping_is_idempotent(weather_body, pollution_body):
    weather = WeatherResponse.model_validate(weather_body)
    pollution = AirPollutionResponse.model_validate(pollution_body)

    assert map_weather(weather) == map_weather(weather)
    assert map_pollution(pollution, "42") == map_pollution(pollution, "42")


def test_observations_match_catalog_labels(weather_body, pollution_body):
    _, observations = map_weather(WeatherResponse.model_validate(weather_body))
    observations += map_pollution(AirPollutionResponse.model_validate(pollution_body), "42")

    for obs in observations:
        assert tuple(k for k, _ in obs.labels) == CATALOG[obs.series].label_names
