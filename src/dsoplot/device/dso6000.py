"""Agilent DSO6000-series oscilloscope (and similar) driven over SCPI.

The instrument itself is the source of truth for its settings: nothing is
cached here, each call goes to the device through the configured transport.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from dsoplot.device.device import Device
from dsoplot.device.transport import Transport, make_transport
from dsoplot.scpi.commands import build, plot_command, reply_number
from dsoplot.scpi.status import assemble_status
from dsoplot.scpi.waveform import decode_plot_reply
from dsoplot.types.commands import CommandRequest
from dsoplot.types.config import DsoConfig
from dsoplot.types.records import PlotReply, StatusRecord


class DSO6000(Device):
    """DSO6000 oscilloscope.

    Parameters
    ----------
    host : str
        Instrument address; empty means no instrument (simulate).
    config : DsoConfig, optional
        Bridge settings, defaults if not given.
    transport : Transport, optional
        Transport to use, built from `config` if not given.

    Examples
    --------
    ```python
    dso = DSO6000("192.168.0.150")
    reply = dso.fetch_waveform(channel=1, points=500)
    status = dso.status()
    ```
    """

    required_config = {"host": str}

    def __init__(
        self,
        host: str = "",
        config: Optional[DsoConfig] = None,
        transport: Optional[Transport] = None,
    ):
        super().__init__(host=host or "")
        self.config = config or DsoConfig()
        self.transport = transport or make_transport(self.config)
        self._idn = ""

    @property
    def simulate(self) -> bool:
        return not self.host.strip()

    def open(self) -> tuple[bool, str]:
        self._idn = self.query("*IDN?").strip()
        logger.info(f"Connected: {self._idn}")
        return True, self._idn

    def close(self):
        # connections are opened per command
        pass

    def is_connected(self) -> bool:
        return bool(self._idn)

    def query(self, command: str, timeout: Optional[float] = None) -> str:
        return self.transport.send(self.host, command, timeout)

    def acquisition_timeout(self) -> float:
        """Timeout for commands that wait for an acquisition.

        With `DsoConfig.adaptive_timeout` the current time range is added to
        the base timeout (one extra round trip).
        """
        if not self.config.adaptive_timeout:
            return self.config.timeout
        time_range = reply_number(self.query(":TIM:RANG?"))
        logger.debug(f"DSO time range: {time_range}")
        return int(abs(time_range) + self.config.timeout)

    def execute(self, request: CommandRequest) -> str:
        """Run the command(s) for a request and return the instrument's reply."""
        plan = build(request)
        reply = self.query(plan.command) if plan.command else ""
        if plan.follow_up is not None:
            reply = self.query(plan.follow_up(reply))
        return reply

    def fetch_waveform(self, channel: int, points: int) -> PlotReply:
        """Single acquisition on `channel`, decoded."""
        timeout = self.acquisition_timeout()
        raw = self.query(plot_command(channel, points), timeout)
        return decode_plot_reply(raw)

    def status(self, prior_error: str = "") -> StatusRecord:
        return assemble_status(self, prior_error)
