from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cityweather.api import deps
from cityweather.core.config import Settings
from cityweather.factory import create_app
from tests.fakes import FakeCityDirectory, FakeWeatherProvider, make_city


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        weather_api_key="test-key",
        page_size=5,
        suggestion_limit=3,
        summary_store_path=str(tmp_path / "summaries.json"),
    )


@pytest.fixture()
def directory() -> FakeCityDirectory:
    return FakeCityDirectory(
        cities=[make_city(i) for i in range(12)]
        + [
            make_city(100, "Paris", country="France", population=2_100_000),
            make_city(101, "Paris", country="United States", population=25_000),
            make_city(102, "Parma", country="Italy", population=190_000),
            make_city(103, "London", country="United Kingdom", population=8_900_000),
        ]
    )


@pytest.fixture()
def provider() -> FakeWeatherProvider:
    return FakeWeatherProvider()


@pytest.fixture()
def client(
    settings: Settings, directory: FakeCityDirectory, provider: FakeWeatherProvider
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_city_directory] = lambda: directory
    app.dependency_overrides[deps.get_weather_provider] = lambda: provider
    with TestClient(app) as client:
        yield client
