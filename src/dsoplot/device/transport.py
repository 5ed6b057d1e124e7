"""Transports: send one command string to the instrument and return its reply.

Every call opens its own connection and closes it again; the instrument
answers one reply per command line, so connections are never shared.

Two flavours, selected by `DsoConfig.transport`:

- `SocketTransport`: raw SCPI over TCP (port 5025) through pyvisa's
  ``TCPIP::<host>::<port>::SOCKET`` resources. Much faster than VXI-11.
- `Vxi11Transport`: pipes the command into the ``vxi11_cmd`` helper.

For standalone testing without an instrument run netcat in server mode
(``nc -k -v -l 5025``) and use 127.0.0.1 as the address.
"""

from __future__ import annotations

import re
from typing import Optional

import pyvisa
from loguru import logger
from pyvisa import constants
from pyvisa.errors import VisaIOError

from dsoplot.types.config import DsoConfig, TransportKind
from dsoplot.types.errors import (
    ConfigurationError,
    ConnectError,
    ProtocolError,
    ReadTimeoutError,
    TransportError,
)
from dsoplot.util.process import run_helper
from dsoplot.util.timer import Timer

OPC_QUERY = "*OPC?"
_ENDS_IN_QUERY = re.compile(r"\?\s*;?\s*$")
_OPC_REPLY = re.compile(r";?(\d+)[\n\r]*$")


def is_query(command: str) -> bool:
    """True if the (last) command expects a reply."""
    return bool(_ENDS_IN_QUERY.search(command))


def strip_opc(reply: str) -> str:
    """Remove the ``*OPC?`` acknowledgment from the end of a reply.

    Raises
    ------
    ProtocolError
        The acknowledgment is missing or is not ``1``.
    """
    match = _OPC_REPLY.search(reply)
    if match is None:
        raise ProtocolError(f'No reply to {OPC_QUERY} command in "{reply.strip()}"')
    if match.group(1) != "1":
        raise ProtocolError(f'Unexpected reply "{match.group(1)}" to {OPC_QUERY} command')
    return reply[: match.start()]


class Transport:
    """Base class. Subclasses implement `send`."""

    kind: TransportKind

    def __init__(self, config: Optional[DsoConfig] = None):
        self.config = config or DsoConfig()

    def send(self, host: str, command: str, timeout: Optional[float] = None) -> str:
        """Send `command` to the instrument at `host` and return its reply.

        Parameters
        ----------
        host : str
            Instrument address. Empty is a configuration error.
        command : str
            One or more SCPI commands joined with ``;``.
        timeout : float, optional
            Seconds to wait for the reply, default `DsoConfig.timeout`.
        """
        raise NotImplementedError()

    def _check_host(self, host: str) -> str:
        if not host or not host.strip():
            logger.error("Instrument IP address is missing")
            raise ConfigurationError("No instrument IP address given")
        return host.strip()


class SocketTransport(Transport):
    """Raw SCPI socket.

    Commands that produce no reply get ``; *OPC?`` appended so the read
    returns once the instrument is done; the ``1`` it answers is removed.
    """

    kind = TransportKind.SOCKET

    def resource_name(self, host: str) -> str:
        return f"TCPIP0::{host}::{self.config.port}::SOCKET"

    def send(self, host: str, command: str, timeout: Optional[float] = None) -> str:
        host = self._check_host(host)
        timeout = timeout or self.config.timeout
        opc = not is_query(command)
        if opc:
            command = f"{command}; {OPC_QUERY}"
        logger.debug(f"SockIO: {host},{command},{timeout}")

        timer = Timer()
        rm = pyvisa.ResourceManager(self.config.visa_backend)
        try:
            try:
                inst = rm.open_resource(
                    self.resource_name(host),
                    open_timeout=int(timeout * 1000),
                    read_termination="\n",
                    write_termination="\n",
                )
            except (VisaIOError, OSError) as e:
                logger.error(f"Can't connect {host}:{self.config.port} - {e}")
                raise ConnectError(
                    f"Cannot connect {host}, port {self.config.port}: {e}"
                ) from e
            with inst:
                inst.timeout = int(timeout * 1000)
                try:
                    inst.write(command)
                    reply = inst.read()
                except VisaIOError as e:
                    if e.error_code == constants.StatusCode.error_timeout:
                        msg = f"Timeout error: no reply from oscilloscope in {timeout} sec."
                        logger.error(msg)
                        raise ReadTimeoutError(msg) from e
                    logger.error(f"Oscilloscope read error - {e}")
                    raise TransportError(f"Oscilloscope read error - {e}") from e
                except OSError as e:
                    logger.error(f"Oscilloscope read error - {e}")
                    raise TransportError(f"Oscilloscope read error - {e}") from e
                except UnicodeDecodeError as e:
                    bad = e.object[e.start : e.end]
                    logger.error(f"Undecodable reply from {host} - {e}")
                    raise ProtocolError(
                        f"Oscilloscope sent undecodable reply: byte {bad!r}"
                    ) from e
        finally:
            rm.close()

        if opc:
            reply = strip_opc(reply)
        logger.debug(f"SockIO reply after {timer.elapsed()} s: {reply[:80]!r}")
        return reply


class Vxi11Transport(Transport):
    """VXI-11 through the external ``vxi11_cmd <host>`` helper."""

    kind = TransportKind.VXI11

    def send(self, host: str, command: str, timeout: Optional[float] = None) -> str:
        host = self._check_host(host)
        timeout = timeout or self.config.timeout
        logger.debug(f"VXI-11: {host},{command},{timeout}")
        return run_helper(
            [self.config.vxi11_helper, host], input_text=command, timeout=timeout
        )


TRANSPORTS: dict[TransportKind, type[Transport]] = {
    TransportKind.SOCKET: SocketTransport,
    TransportKind.VXI11: Vxi11Transport,
}


def make_transport(config: Optional[DsoConfig] = None) -> Transport:
    config = config or DsoConfig()
    return TRANSPORTS[config.transport](config)
