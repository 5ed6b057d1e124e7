"""Configuration types: bridge settings and device endpoints.

Settings are read once per invocation into an immutable `DsoConfig` and passed
down explicitly; nothing in dsoplot keeps module level mutable settings.

The INI file has a single section:

[dsoplot]
transport = socket        # socket | vxi11
port = 5025
timeout = 3
adaptive_timeout = yes
vxi11_helper = instruments/vxi11_cmd
gnuplot = /usr/local/bin/gnuplot
"""

from __future__ import annotations

import dataclasses
from configparser import ConfigParser
from configparser import Error as ConfigParserError
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger
from mashumaro import DataClassDictMixin

from dsoplot.types.errors import ConfigurationError
from dsoplot.util.defaults import (
    CONFIG_SECTION,
    DEFAULT_CHANNEL,
    DEFAULT_COLOR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GNUPLOT,
    DEFAULT_GNUPLOT_LANG,
    DEFAULT_PLOT_HEIGHT,
    DEFAULT_PLOT_WIDTH,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    DEFAULT_VISA_BACKEND,
    DEFAULT_VXI11_HELPER,
    DEFAULT_WAVE_POINTS,
)


class TransportKind(str, Enum):
    """How to talk to the instrument."""

    SOCKET = "socket"  # raw SCPI over TCP
    VXI11 = "vxi11"  # external vxi11_cmd helper


@dataclass(frozen=True)
class DeviceEndpoint:
    """Where the instrument lives. An empty host means "simulate"."""

    host: str
    kind: TransportKind = TransportKind.SOCKET

    @property
    def simulate(self) -> bool:
        return not self.host.strip()


@dataclass(frozen=True, kw_only=True)
class DsoConfig(DataClassDictMixin):
    """Settings for the bridge.

    Attributes
    ----------
    transport : TransportKind
        Socket or VXI-11 helper.
    port : int
        TCP port of the instrument's SCPI socket server.
    timeout : float
        Base reply timeout in seconds.
    adaptive_timeout : bool
        Ask the instrument for its time range first and extend the timeout of
        acquisition-bound queries by it.
    vxi11_helper : str
        Path of the vxi11_cmd program.
    visa_backend : str
        pyvisa backend used by the socket transport.
    gnuplot : str
        Path of the gnuplot program.
    gnuplot_lang : str
        LANG value for gnuplot.
    plot_width, plot_height : int
        Default plot size in pixels.
    wave_points : int
        Default number of waveform points.
    channel : int
        Default channel, 1-4.
    color : str
        Default plot color as RGB hex.
    """

    transport: TransportKind = TransportKind.SOCKET
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    adaptive_timeout: bool = True
    vxi11_helper: str = DEFAULT_VXI11_HELPER
    visa_backend: str = DEFAULT_VISA_BACKEND
    gnuplot: str = DEFAULT_GNUPLOT
    gnuplot_lang: str = DEFAULT_GNUPLOT_LANG
    plot_width: int = DEFAULT_PLOT_WIDTH
    plot_height: int = DEFAULT_PLOT_HEIGHT
    wave_points: int = DEFAULT_WAVE_POINTS
    channel: int = DEFAULT_CHANNEL
    color: str = DEFAULT_COLOR

    def __post_init__(self):
        try:
            object.__setattr__(self, "transport", TransportKind(self.transport))
        except ValueError:
            raise ConfigurationError(
                f"Unknown transport {self.transport}, use one of "
                f"{', '.join(k.value for k in TransportKind)}"
            ) from None
        validators = {
            "port": (0 < self.port < 65536, "Port must be between 1 and 65535"),
            "timeout": (self.timeout > 0, "Timeout must be positive"),
            "plot_width": (self.plot_width > 0, "Plot width must be positive"),
            "plot_height": (self.plot_height > 0, "Plot height must be positive"),
            "wave_points": (self.wave_points > 0, "Waveform points must be positive"),
            "channel": (self.channel in (1, 2, 3, 4), "Channel must be 1-4"),
        }
        for param, (valid, message) in validators.items():
            if not valid:
                raise ConfigurationError(f"{message} (got {getattr(self, param)})")

    def endpoint(self, host: str) -> DeviceEndpoint:
        return DeviceEndpoint(host=host or "", kind=self.transport)

    def replace(self, **changes) -> DsoConfig:
        """Copy with some settings changed; None values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "transport" in changes:
            changes["transport"] = TransportKind(changes["transport"])
        return dataclasses.replace(self, **changes)


def _read_option(parser: ConfigParser, name: str, kind: type):
    if kind is bool:
        return parser.getboolean(CONFIG_SECTION, name)
    if kind is int:
        return parser.getint(CONFIG_SECTION, name)
    if kind is float:
        return parser.getfloat(CONFIG_SECTION, name)
    return parser.get(CONFIG_SECTION, name)


def load_config(path: str | Path | None = None) -> DsoConfig:
    """Load settings from an INI file.

    Parameters
    ----------
    path : str | Path, optional
        Config file. Defaults to ``~/.dsoplot/dsoplot.ini``; a missing default
        file gives the built-in defaults, a missing explicit file is an error.

    Returns
    -------
    DsoConfig
        Loaded and validated configuration.

    Raises
    ------
    ConfigurationError
        The file is unreadable or holds invalid values.
    """
    explicit = path is not None
    path = Path(path) if explicit else DEFAULT_CONFIG_PATH
    if not path.exists():
        if explicit:
            raise ConfigurationError(f"Config file {path} not found")
        logger.trace("No config file at {}, using defaults", path)
        return DsoConfig()

    parser = ConfigParser(inline_comment_prefixes=("#", ";"))
    values = {}
    try:
        parser.read(path)
        if parser.has_section(CONFIG_SECTION):
            types = {
                "transport": str,
                "port": int,
                "timeout": float,
                "adaptive_timeout": bool,
                "plot_width": int,
                "plot_height": int,
                "wave_points": int,
                "channel": int,
            }
            for name in parser.options(CONFIG_SECTION):
                if name not in DsoConfig.__dataclass_fields__:
                    logger.warning(f"Unknown config key {name} in {path} - ignored")
                    continue
                values[name] = _read_option(parser, name, types.get(name, str))
        config = DsoConfig.from_dict(values)
    except (ConfigParserError, ValueError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
    logger.debug(f"Loaded config from {path}")
    return config
