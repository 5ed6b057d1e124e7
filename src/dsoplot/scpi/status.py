"""Status battery: collect the instrument settings the front-end displays.

NOTE: the instrument takes no less than the horizontal time range to run
``:WAV:POIN?``, so with a 5 s time range the battery takes 5 s. With
`DsoConfig.adaptive_timeout` the time range is asked for first and added to
the timeout of the battery.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from loguru import logger

from dsoplot.scpi.calibration import time_unit_scale
from dsoplot.scpi.commands import join, reply_number
from dsoplot.types.errors import RECOVERABLE, ProtocolError
from dsoplot.types.records import StatusRecord
from dsoplot.util.js import sanitize

if TYPE_CHECKING:
    from dsoplot.device.dso6000 import DSO6000

STATUS_BATTERY = (
    ":WAV:SOUR?",
    ":TIM:REF?",
    ":WAV:POIN?",
    ":TIM:RANG?",
    ":TRIG:EDGE:SOUR?",
)
_FIELD_SEP = re.compile(r"[;\r\n]+")


def channel_battery(source: str) -> str:
    """Coupling, vertical range and scale of the waveform source."""
    return join(f":{source}:COUP?", f":{source}:RANG?", f":{source}:SCAL?")


def split_reply(reply: str, expected: int) -> list[str]:
    """Split a combined reply into its fields.

    Raises
    ------
    ProtocolError
        The number of fields does not match the number of queries.
    """
    fields = [f.strip() for f in _FIELD_SEP.split(reply.strip())]
    if len(fields) != expected:
        raise ProtocolError(
            f"Expected {expected} replies from the instrument, got {len(fields)}: "
            f'"{reply.strip()}"'
        )
    return fields


def _number(text: str, kind=float):
    return kind(reply_number(text))


def assemble_status(device: DSO6000, prior_error: str = "") -> StatusRecord:
    """Query the instrument settings.

    Never raises for transport or reply problems: the failure text becomes
    `StatusRecord.err_msg` and the operational fields stay empty.

    Parameters
    ----------
    device : DSO6000
        Instrument to ask.
    prior_error : str
        Message to pass through to the page, e.g. the reply of the command
        that preceded this status request.
    """
    try:
        timeout = device.acquisition_timeout()
        wav_sour, tim_ref, wav_poin, tim_rang, trig_sour = split_reply(
            device.query(join(*STATUS_BATTERY), timeout), len(STATUS_BATTERY)
        )
        time_range = _number(tim_rang)
        time_scale, time_unit = time_unit_scale(time_range)

        chan_coup, chan_rang, chan_scal = split_reply(
            device.query(channel_battery(wav_sour)), 3
        )
        record = StatusRecord(
            wav_sour=wav_sour,
            tim_ref=tim_ref,
            wav_poin=_number(wav_poin, int),
            tim_rang=time_range,
            time_scale=time_scale,
            time_unit=time_unit,
            trig_edge_sour=trig_sour,
            chan_coup=chan_coup,
            chan_rang=_number(chan_rang),
            chan_scal=_number(chan_scal),
            err_msg=sanitize(prior_error),
        )
    except RECOVERABLE as e:
        logger.warning(f"Status request failed: {e}")
        return StatusRecord(err_msg=sanitize(e) or e.__class__.__name__)
    logger.debug(f"DSO status params parsed: {record}")
    return record
