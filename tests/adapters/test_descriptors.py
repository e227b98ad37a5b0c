import pytest

from loggerlink.adapters.descriptors import DEFAULT_HOST, DEFAULT_PORT, Credentials
from loggerlink.tools.errors import SessionConfigurationError


def test_defaults():
    credentials = Credentials()
    assert credentials.host == DEFAULT_HOST
    assert credentials.port == DEFAULT_PORT
    assert credentials.port_number() == 6789
    assert credentials.is_initialized()


@pytest.mark.parametrize("port, expected", [("6789", 6789), (6789, 6789), (" 80 ", 80), (0, 0), (32767, 32767)])
def test_valid_ports(port, expected):
    assert Credentials("host", port).port_number() == expected


@pytest.mark.parametrize("port", ["", "abc", "67.89", -1, 32768, 70000, True, None])
def test_invalid_ports(port):
    with pytest.raises(SessionConfigurationError):
        Credentials("host", port).port_number()


def test_from_string():
    credentials = Credentials.from_string("10.0.0.5:6790", "admin", "secret")
    assert credentials == Credentials("10.0.0.5", "6790", "admin", "secret")
    assert Credentials.from_string("loggernet.local").port == DEFAULT_PORT


def test_password_is_hidden():
    credentials = Credentials("host", 6789, "admin", "secret")
    assert "secret" not in str(credentials)
    assert "secret" not in repr(credentials)
    assert str(credentials) == "admin@host:6789"


def test_credentials_are_immutable():
    credentials = Credentials()
    with pytest.raises(AttributeError):
        credentials.host = "other"  # type: ignore[misc]
