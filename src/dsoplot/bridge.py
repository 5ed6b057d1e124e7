"""Request boundary between the web front-end and the oscilloscope.

`DsoBridge.handle` is the single place where failures are turned into output
for the calling page:

- Plot: the rendered plot (gnuplot canvas JavaScript), or on failure the
  ``function cs() { statMsg('...'); }`` message payload.
- Every other operation: the ``function dsoStatus()`` payload, with the
  failure (if any) in its ``errMsg`` field.

Only `InvalidOperationError` (a malformed request) escapes, after logging.

Examples
--------
```python
from dsoplot.bridge import DsoBridge
bridge = DsoBridge()
print(bridge.handle_query({"mode": "statReq", "ip": "192.168.0.150"}))
```
"""

from __future__ import annotations

from typing import Mapping, Optional

from loguru import logger

from dsoplot.device.dso6000 import DSO6000
from dsoplot.device.transport import Transport
from dsoplot.plot.emitter import emit_plot
from dsoplot.plot.gnuplot import GnuplotRenderer
from dsoplot.types.commands import CommandRequest, Operation
from dsoplot.types.config import DsoConfig
from dsoplot.types.errors import RECOVERABLE, InvalidOperationError
from dsoplot.types.records import StatusRecord
from dsoplot.util.js import message_js, sanitize, status_js
from dsoplot.util.timer import Timer


class DsoBridge:
    """Turns front-end requests into instrument exchanges and page payloads.

    Parameters
    ----------
    config : DsoConfig, optional
        Settings, defaults if not given.
    transport : Transport, optional
        Shared by all devices created by this bridge (e.g. a `MockDSO`);
        by default each device builds one from `config`.
    renderer : GnuplotRenderer, optional
        Plot renderer, gnuplot by default.
    """

    def __init__(
        self,
        config: Optional[DsoConfig] = None,
        transport: Optional[Transport] = None,
        renderer: Optional[GnuplotRenderer] = None,
    ):
        self.config = config or DsoConfig()
        self.transport = transport
        self.renderer = renderer or GnuplotRenderer(self.config)

    def device(self, host: str) -> DSO6000:
        return DSO6000(host, config=self.config, transport=self.transport)

    def request(self, operation: Operation | str, **params) -> CommandRequest:
        """Request with the configured defaults for parameters given as None."""
        operation = Operation.parse(operation)
        values = {
            "color": self.config.color,
            "width": self.config.plot_width,
            "height": self.config.plot_height,
            "points": self.config.wave_points,
        }
        if operation is not Operation.STATUS_QUERY:
            values["channel"] = self.config.channel
        values.update({k: v for k, v in params.items() if v is not None})
        return CommandRequest(operation=operation, **values)

    def handle_query(self, query: Mapping[str, str]) -> str:
        """Handle the front-end's query parameters (``mode``, ``ip``, ``cn``...)."""
        try:
            request = CommandRequest.from_query(query, self.config)
        except InvalidOperationError as e:
            logger.error(f"{e}")
            raise
        return self.handle(request, str(query.get("ip", "") or ""))

    def handle(self, request: CommandRequest, host: str) -> str:
        timer = Timer()
        try:
            if request.operation is Operation.PLOT:
                payload = self.plot(request, host)
            else:
                payload = status_js(self.run(request, host))
        except InvalidOperationError as e:
            logger.error(f"{e}")
            raise
        logger.info(f"{request.operation.value} on '{host}' done in {timer.elapsed()} s")
        return payload

    def plot(self, request: CommandRequest, host: str) -> str:
        """Rendered waveform (imitator without a host), or the error message payload."""
        device = self.device(host)
        try:
            reply = None
            if not device.simulate:
                reply = device.fetch_waveform(request.chan, request.points)
            desc = emit_plot(
                reply, request.chan, request.color, request.width, request.height
            )
            return self.renderer.render(desc)
        except RECOVERABLE as e:
            logger.error(f"Plot failed: {e}")
            return message_js(str(e) or e.__class__.__name__)

    def run(self, request: CommandRequest, host: str) -> StatusRecord:
        """Execute a non-plot operation and report the resulting status.

        The instrument's reply to the operation is passed on as the status
        message; if the operation itself fails the status is not queried and
        the failure is the message.
        """
        device = self.device(host)
        try:
            reply = device.execute(request)
        except RECOVERABLE as e:
            logger.error(f"{request.operation.value} failed: {e}")
            return StatusRecord(err_msg=sanitize(e) or e.__class__.__name__)
        return device.status(prior_error=reply)
