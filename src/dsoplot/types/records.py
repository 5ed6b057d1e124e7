"""Value types decoded from instrument replies."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from functools import cached_property
from typing import NamedTuple

import numpy as np
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig


class TimeUnitScale(NamedTuple):
    """Multiplier turning seconds into `unit`, e.g. ``(1e6, "usec")``."""

    multiplier: float
    unit: str


@dataclass(frozen=True)
class PreambleRecord(DataClassDictMixin):
    """Waveform preamble as returned by ``:WAV:PRE?``.

    See the ":WAVeform:PREamble" section of the DSO6000 programmer's guide.
    """

    format: int
    type: int
    points: int
    count: int
    x_increment: float
    x_origin: float
    x_reference: int
    y_increment: float
    y_origin: float
    y_reference: float


@dataclass(frozen=True)
class Waveform:
    """Samples in acquisition order, together with the preamble calibrating them.

    `samples` keeps the text exactly as the instrument sent it so it can be
    handed to the plotter verbatim.
    """

    preamble: PreambleRecord
    samples: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.samples)

    @cached_property
    def values(self) -> np.ndarray:
        return np.array(self.samples, dtype=float)

    def to_text(self) -> str:
        """Number-per-line text."""
        return "\n".join(self.samples)


@dataclass(frozen=True)
class PlotReply:
    """The three replies of a plot command."""

    vertical_range: float
    preamble: PreambleRecord
    waveform: Waveform


@dataclass(frozen=True)
class Calibration:
    """Axis ranges for a waveform, x values already multiplied by `time_scale`."""

    x_min: float
    x_max: float
    y_half_range: float
    time_scale: float
    time_unit: str


def _alias(name: str):
    return field_options(alias=name)


@dataclass(kw_only=True)
class StatusRecord(DataClassDictMixin):
    """Instrument settings shown by the front-end.

    Serialized (`to_dict`) with the key names the calling page expects.
    Operational fields stay empty (None / "") when the instrument could not
    be queried; `err_msg` then says why.
    """

    class Config(BaseConfig):
        serialize_by_alias = True

    wav_sour: str = field(default="", metadata=_alias("wavSour"))
    tim_ref: str = field(default="", metadata=_alias("timRef"))
    wav_poin: int | None = field(default=None, metadata=_alias("wavPoin"))
    tim_rang: float | None = field(default=None, metadata=_alias("timRang"))
    time_scale: float | None = field(default=None, metadata=_alias("timeScale"))
    time_unit: str = field(default="", metadata=_alias("timeUnit"))
    trig_edge_sour: str = field(default="", metadata=_alias("trigEdgeSour"))
    chan_coup: str = field(default="", metadata=_alias("chanCoup"))
    chan_rang: float | None = field(default=None, metadata=_alias("chanRang"))
    chan_scal: float | None = field(default=None, metadata=_alias("chanScal"))
    err_msg: str = field(default="", metadata=_alias("errMsg"))
    time_created: str = field(default_factory=time.ctime, metadata=_alias("timeCreated"))
    was_seen: str = field(default="", metadata=_alias("wasSeen"))

    @property
    def ok(self) -> bool:
        return not self.err_msg
