import pytest

from dummysv.config import ServerConfig, parse_config
from dummysv.headers import HeaderError


def test_defaults():
    config = parse_config([])

    assert config.body == "OK"
    assert config.status == 200
    assert config.network == "tcp"
    assert config.address == "127.0.0.1:8080"
    assert config.verbose is False
    assert len(config.headers) == 0


def test_flags_and_positional_headers():
    config = parse_config(["-s", "404", "-r", "not found", "-n", "tcp4", "-L", ":9000", "-v", "X-Test:abc"])

    assert config.status == 404
    assert config.body == "not found"
    assert config.network == "tcp4"
    assert config.address == ":9000"
    assert config.verbose is True
    assert config.headers.getlist("X-Test") == ["abc"]


def test_config_is_frozen():
    config = ServerConfig()
    with pytest.raises(AttributeError):
        config.status = 500


def test_malformed_header_raises():
    with pytest.raises(HeaderError):
        parse_config(["badheader"])


@pytest.mark.parametrize("status", ["abc", "42", "1000"])
def test_bad_status_is_usage_error(status, capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_config(["-s", status])
    assert excinfo.value.code == 2
    assert "status code" in capsys.readouterr().err


def test_flags_stop_at_first_header_token():
    config = parse_config(["-s", "201", "X-First:1", "-v", "-Dash:x"])

    assert config.status == 201
    assert config.verbose is False
    assert config.headers.getlist("X-First") == ["1"]
    assert config.headers.getlist("-Dash") == ["x"]


def test_flag_after_header_token_is_a_malformed_header():
    with pytest.raises(HeaderError, match="'-v'"):
        parse_config(["X-First:1", "-v"])


def test_double_dash_ends_flags():
    config = parse_config(["-r", "hi", "--", "-Dash:x"])

    assert config.body == "hi"
    assert config.headers.getlist("-Dash") == ["x"]
