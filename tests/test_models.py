from datetime import datetime, timedelta, timezone

import pytest

from ficsitfetch.exceptions import ConfigValidationError, NetworkError, RegistryError
from ficsitfetch.models import (
    BootstrapperVersion,
    FicsitFetchConfig,
    Mod,
    SMLVersion,
    Stability,
    graphql_url,
)
from ficsitfetch.models.api import parse_date


def test_parse_date_variants():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("2021-03-04T05:06:07Z") == datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    offset = parse_date("2021-03-04T05:06:07+02:00")
    assert offset.utcoffset() == timedelta(hours=2)


def test_mod_from_api_fills_defaults_and_mod_id():
    mod = Mod.from_api(
        {
            "id": "modA",
            "name": "Mod A",
            "last_version_date": None,
            "versions": [{"version": "1.0.0", "stability": "beta"}],
        }
    )

    assert mod.last_version_date is None
    assert mod.authors == []
    assert mod.versions[0].mod_id == "modA"
    assert mod.versions[0].stability is Stability.BETA
    assert mod.versions[0].link == ""


def test_loader_versions_from_api():
    sml = SMLVersion.from_api(
        {"id": "1", "version": "2.2.0", "stability": "alpha", "bootstrap_version": "2.0.0"}
    )
    bootstrapper = BootstrapperVersion.from_api({"id": "2", "version": "2.0.0"})

    assert sml.stability is Stability.ALPHA
    assert sml.bootstrap_version == "2.0.0"
    assert bootstrapper.stability is Stability.RELEASE


def test_unknown_stability_is_rejected():
    with pytest.raises(ValueError):
        Stability.parse("nightly")


def test_config_defaults():
    config = FicsitFetchConfig.from_dict({})
    assert config.api_url == "https://api.ficsit.app"
    assert config.graphql_url == "https://api.ficsit.app/v2/query"
    assert not config.use_temp_mods


def test_graphql_url_follows_api_url():
    assert graphql_url("http://localhost:8080/") == "http://localhost:8080/v2/query"
    config = FicsitFetchConfig.from_dict({"api_url": "http://localhost:8080"})
    assert config.graphql_url == "http://localhost:8080/v2/query"


@pytest.mark.parametrize(
    "data",
    [
        {"api_url": ""},
        {"use_temp_mods": "yes"},
        {"temp_mods": [{"name": "no id"}]},
        {"game_path": 3},
        [],
    ],
)
def test_config_validation(data):
    with pytest.raises(ConfigValidationError):
        FicsitFetchConfig.from_dict(data)


def test_error_shapes():
    cause = OSError("reset")
    network = NetworkError(cause=cause)
    assert network.cause is cause
    assert network.to_dict()["code"] == "E201"

    registry = RegistryError([{"message": "a"}, "b"])
    assert str(registry) == "[E202] a; b"
