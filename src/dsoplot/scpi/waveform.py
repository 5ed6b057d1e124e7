"""Decoding of the plot command's reply.

The instrument answers ``:CHANn:RANG?; :WAV:PRE?; :WAV:DATA?`` with one line::

    +1.60E+01;+4,+0,+1000,+1,+2.0E-06,-1.0E-03,+0,+6.25E-04,+0.0E+00,+0;#800013999-1.2e-01,...

i.e. vertical range, preamble and an IEEE-488.2 definite length block whose
payload is comma separated ASCII samples (``:WAV:FORM ASC``).
"""

from __future__ import annotations

import math
import re

import numpy as np
from loguru import logger

from dsoplot.types.errors import DecodeError, MalformedBlockError
from dsoplot.types.records import PlotReply, PreambleRecord, Waveform

PREAMBLE_FIELDS = 10
_SAMPLE_SEP = re.compile(r",\s*")


def strip_block_header(block: str) -> str:
    """Remove the ``#N<N digits>`` header of a definite length block.

    Exactly ``2 + N`` characters are removed, e.g. ``#15ABCDE`` -> ``ABCDE``.

    Raises
    ------
    MalformedBlockError
        The text does not start with ``#`` and a digit, or the length field
        is short or not numeric.
    """
    if block is None or not re.match(r"#\d", block):
        head = "" if block is None else block[:12]
        raise MalformedBlockError(f'Waveform data has no block header: "{head}"')
    n_digits = int(block[1])
    length = block[2 : 2 + n_digits]
    if len(length) != n_digits or (n_digits and not length.isdigit()):
        raise MalformedBlockError(f'Bad block length field "{block[: 2 + n_digits]}"')
    return block[2 + n_digits :]


def split_samples(text: str) -> list[str]:
    text = text.strip()
    if not text:
        return []
    return _SAMPLE_SEP.split(text)


def block_to_text(block: str) -> str:
    """Block with ASCII samples -> one sample per line."""
    return "\n".join(split_samples(strip_block_header(block)))


def parse_preamble(text: str) -> PreambleRecord:
    """Parse the ``:WAV:PRE?`` reply.

    Ten numeric fields; a reserved eleventh one is accepted and dropped.
    """
    fields = [f.strip() for f in text.strip().split(",")]
    if len(fields) not in (PREAMBLE_FIELDS, PREAMBLE_FIELDS + 1):
        raise DecodeError(
            f"Preamble must have {PREAMBLE_FIELDS} fields, got {len(fields)}: "
            f'"{text.strip()}"'
        )
    try:
        values = [float(f) for f in fields[:PREAMBLE_FIELDS]]
    except ValueError:
        raise DecodeError(f'Preamble is not numeric: "{text.strip()}"') from None
    if not all(math.isfinite(v) for v in values):
        raise DecodeError(f'Preamble has non-finite fields: "{text.strip()}"')
    fmt, typ, points, count, x_inc, x_orig, x_ref, y_inc, y_orig, y_ref = values
    return PreambleRecord(
        format=int(fmt),
        type=int(typ),
        points=int(points),
        count=int(count),
        x_increment=x_inc,
        x_origin=x_orig,
        x_reference=int(x_ref),
        y_increment=y_inc,
        y_origin=y_orig,
        y_reference=y_ref,
    )


def decode_plot_reply(raw: str) -> PlotReply:
    """Split and decode the reply to `dsoplot.scpi.commands.plot_command`.

    Raises
    ------
    DecodeError
        Missing segments, non-numeric fields or an empty acquisition.
    MalformedBlockError
        The data segment has no valid block header.
    """
    if raw is None:
        raise DecodeError("No reply to decode")
    parts = raw.split(";", 2)
    if len(parts) != 3:
        raise DecodeError(
            f"Expected range, preamble and data in the reply, got {len(parts)} part(s)"
        )
    range_text, preamble_text, block = parts
    try:
        vertical_range = float(range_text.strip())
    except ValueError:
        raise DecodeError(f'Vertical range is not a number: "{range_text}"') from None
    if not math.isfinite(vertical_range):
        raise DecodeError(f'Vertical range is not finite: "{range_text.strip()}"')
    logger.debug(f"Ch.range: {range_text.strip()}; Preamble: {preamble_text.strip()}")

    preamble = parse_preamble(preamble_text)
    if preamble.points <= 0:
        raise DecodeError(f"Preamble reports {preamble.points} points")

    samples = split_samples(strip_block_header(block.strip()))
    waveform = Waveform(preamble=preamble, samples=tuple(samples))
    try:
        waveform.values
    except ValueError as e:
        raise DecodeError(f"Waveform data is not numeric: {e}") from e
    if not np.all(np.isfinite(waveform.values)):
        logger.warning("Waveform contains non-finite samples")
    logger.trace(f"Decoded {len(waveform)} samples")
    return PlotReply(vertical_range=vertical_range, preamble=preamble, waveform=waveform)
