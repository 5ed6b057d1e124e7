"""Translation of abstract operations into DSO6000 SCPI command strings.

Several commands are joined with ``"; "`` so the instrument executes them as
one batch and the transport collects all replies in a single round trip.

Two operations need a value from the instrument before the final command can
be built (the time position depends on the time range and the reference
side), so `build` returns a `CommandPlan`: the first command and an optional
follow-up computed from its reply.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Optional

from dsoplot.types.commands import CommandRequest, Operation
from dsoplot.types.errors import (
    InvalidOperationError,
    InvalidParameterError,
    ProtocolError,
)

PRECISION_THRESHOLD = 1000  # points above which :SYST:PREC ON is needed
TIME_REFERENCES = ("LEFT", "CENT", "RIGH")
PLOT_QUERIES = (":WAV:PRE?", ":WAV:DATA?")


@dataclass(frozen=True)
class CommandPlan:
    """Command to send, plus an optional second command built from its reply."""

    command: str
    follow_up: Optional[Callable[[str], str]] = None


def join(*commands: str) -> str:
    return "; ".join(c for c in commands if c)


def fmt_number(value: float) -> str:
    """Number formatting for SCPI arguments."""
    return f"{value:.10g}"


def parse_number(value: str, what: str = "value") -> float:
    try:
        number = float(str(value).strip())
    except ValueError:
        raise InvalidParameterError(f'{what} must be a number (got "{value}")') from None
    if not math.isfinite(number):
        raise InvalidParameterError(f'{what} must be finite (got "{value}")')
    return number


def reply_number(reply: str) -> float:
    """Numeric instrument reply, e.g. ``+1.00000E-03``."""
    try:
        value = float(reply.strip())
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise ProtocolError(
            f'Expected a number from the instrument, got "{reply.strip()}"'
        )
    return value


def trg_source(value: str, default_channel: int) -> str:
    """Trigger source understood by the instrument.

    ``E`` is the external trigger input, ``1``-``4`` a channel; anything else
    falls back to `default_channel`.
    """
    value = str(value).strip()
    if value == "E":
        return "EXT"
    if re.fullmatch(r"[1234]", value):
        return f"CHAN{value}"
    return f"CHAN{default_channel}"


def precision_command(points: int) -> str:
    return ":SYST:PREC ON" if points > PRECISION_THRESHOLD else ":SYST:PREC OFF"


def plot_command(channel: int, points: int) -> str:
    """Acquire once and return vertical range, preamble and ASCII data."""
    return join(
        precision_command(points),
        f":WAV:POIN {points}",
        f":WAV:SOUR CHAN{channel}",
        ":SINGLE",  # launches data collection
        f":CHAN{channel}:DISP 1",
        ":WAV:FORM ASC",
        f":CHAN{channel}:RANG?",
        *PLOT_QUERIES,
    )


def time_position_command(reference: str, time_range: float) -> str:
    """Shift the trigger point so the whole range stays on screen."""
    reference = reference.strip().upper()
    if reference == "LEFT":
        return f":TIM:POS {fmt_number(time_range / 10)}"
    if reference == "RIGH":
        return f":TIM:POS {fmt_number(-time_range / 10)}"
    return ":TIM:POS 0"


def time_reference_command(reference: str, time_range: float) -> str:
    return join(f":TIM:REF {reference}", time_position_command(reference, time_range))


def _plot(req: CommandRequest) -> CommandPlan:
    return CommandPlan(plot_command(req.chan, req.points))


def _auto_scale(req: CommandRequest) -> CommandPlan:
    ch = req.chan
    return CommandPlan(
        join(
            f":AUT CHAN{ch}",
            f":WAV:SOUR CHAN{ch}",
            f":CHAN{ch}:DISP 1",
            f":TRIG:EDGE:SOUR {trg_source(req.value, ch)}",
        )
    )


def _time_reference(req: CommandRequest) -> CommandPlan:
    reference = req.value.strip().upper()
    if reference not in TIME_REFERENCES:
        raise InvalidParameterError(
            f'Time reference must be one of {", ".join(TIME_REFERENCES)} '
            f'(got "{req.value}")'
        )

    def follow_up(reply: str) -> str:
        return time_reference_command(reference, reply_number(reply))

    return CommandPlan(":TIM:RANG?", follow_up)


def _coupling(req: CommandRequest) -> CommandPlan:
    coupling = "AC" if req.value == "AC" else "DC"
    return CommandPlan(f":CHAN{req.chan}:COUP {coupling}")


def _time_range(req: CommandRequest) -> CommandPlan:
    time_range = parse_number(req.value, "Time range")

    def follow_up(reply: str) -> str:
        # position from the requested range, the reply only tells the side
        return time_position_command(reply, time_range)

    return CommandPlan(
        join(f":TIM:RANG {fmt_number(time_range)}", ":SINGLE", ":TIM:REF?"),
        follow_up,
    )


def _vertical_range(req: CommandRequest) -> CommandPlan:
    volts = parse_number(req.value, "Vertical range")
    return CommandPlan(f":CHAN{req.chan}:RANG {fmt_number(volts)}V")


def _vertical_scale(req: CommandRequest) -> CommandPlan:
    volts = parse_number(req.value, "Vertical scale")
    return CommandPlan(f":CHAN{req.chan}:SCAL {fmt_number(volts)}V")


def _trigger_channel(req: CommandRequest) -> CommandPlan:
    return CommandPlan(f":TRIG:EDGE:SOUR {trg_source(req.value, req.chan)}")


def _initialize(req: CommandRequest) -> CommandPlan:
    ch = req.chan
    time_range = parse_number(req.time_range or req.value, "Time range")
    return CommandPlan(
        join(
            "*RST",
            ":WAV:POIN:MODE NORM",
            f":CHAN{ch}:PROB 10",
            f":CHAN{ch}:COUP AC",
            f":CHAN{ch}:RANG 16",  # vertical sensitivity
            f":CHAN{ch}:OFFS 0",
            ":TIM:MODE MAIN",
            ":TIM:REF LEFT",
            ":TIM:POS 0",
            f":TIM:RANG {fmt_number(time_range)}",
            ":TRIG:MODE EDGE",
            f":TRIG:EDGE:SOUR CHAN{ch}",
            ":TRIG:EDGE:SLOP EITH",
        )
    )


def _reset(req: CommandRequest) -> CommandPlan:
    return CommandPlan("*RST")


def _status_query(req: CommandRequest) -> CommandPlan:
    # the status battery itself is run by dsoplot.scpi.status
    if req.channel is None:
        return CommandPlan("")
    return CommandPlan(f":WAV:SOUR CHAN{req.channel}")


BUILDERS: dict[Operation, Callable[[CommandRequest], CommandPlan]] = {
    Operation.PLOT: _plot,
    Operation.AUTO_SCALE: _auto_scale,
    Operation.SET_TIME_REFERENCE: _time_reference,
    Operation.SET_COUPLING: _coupling,
    Operation.SET_TIME_RANGE: _time_range,
    Operation.SET_VERTICAL_RANGE: _vertical_range,
    Operation.SET_VERTICAL_SCALE: _vertical_scale,
    Operation.SET_TRIGGER_CHANNEL: _trigger_channel,
    Operation.INITIALIZE: _initialize,
    Operation.RESET: _reset,
    Operation.STATUS_QUERY: _status_query,
}


def build(request: CommandRequest) -> CommandPlan:
    """Translate a request into the command(s) to send.

    Raises
    ------
    InvalidOperationError
        The operation has no builder.
    InvalidParameterError
        A parameter cannot be turned into a valid command.
    """
    try:
        builder = BUILDERS[request.operation]
    except KeyError:
        raise InvalidOperationError(
            f'Invalid mode "{request.operation}", check script parameters'
        ) from None
    return builder(request)
