# File : descriptors.py
# Author : loggerlink developers
# License : GPL
#
# Descriptors describe how an adapter reaches the LoggerNet server.
# They are immutable, the port is kept as given and only converted when
# it is applied to the session

from dataclasses import dataclass, field

from ..tools.errors import SessionConfigurationError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "6789"

# The vendor port field is a signed 16 bit integer
PORT_MIN = 0
PORT_MAX = 2**15 - 1


@dataclass(frozen=True)
class Credentials:
    host: str = DEFAULT_HOST
    port: str | int = DEFAULT_PORT
    username: str = ""
    password: str = field(default="", repr=False)

    @staticmethod
    def from_string(string: str, username: str = "", password: str = "") -> "Credentials":
        """
        Create credentials from a 'host:port' or 'host' string
        """
        host, _, port = string.rpartition(":")
        if not host:
            return Credentials(port, DEFAULT_PORT, username, password)
        return Credentials(host, port, username, password)

    def port_number(self) -> int:
        """
        Return the port as an integer

        Raises
        ------
        SessionConfigurationError
            The port isn't an integer or doesn't fit the vendor field
        """
        if isinstance(self.port, bool):
            raise SessionConfigurationError(f"Invalid port : {self.port!r}")
        try:
            port = int(self.port)
        except (TypeError, ValueError) as err:
            raise SessionConfigurationError(f"Invalid port : {self.port!r}") from err
        if not PORT_MIN <= port <= PORT_MAX:
            raise SessionConfigurationError(
                f"Port {port} is outside of [{PORT_MIN}, {PORT_MAX}]"
            )
        return port

    def is_initialized(self) -> bool:
        return bool(self.host) and self.port != ""

    def __str__(self) -> str:
        if self.username:
            return f"{self.username}@{self.host}:{self.port}"
        return f"{self.host}:{self.port}"
