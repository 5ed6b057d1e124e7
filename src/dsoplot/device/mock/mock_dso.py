from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from loguru import logger

from dsoplot.device.transport import Transport
from dsoplot.types.config import DsoConfig
from dsoplot.types.errors import ConnectError

# where the reference point sits on screen, as a fraction of the time range
_REF_FRACTION = {"LEFT": 0.1, "CENT": 0.5, "RIGH": 0.9}
_CHAN = re.compile(r":CHAN([1-4]):(\w+)(\?)?(?:\s+(.*))?$")


@dataclass
class _Channel:
    display: int = 0
    coupling: str = "DC"
    range: float = 8.0  # volts over the 8 vertical divisions
    offset: float = 0.0
    probe: float = 1.0

    @property
    def scale(self) -> float:
        return self.range / 8


@dataclass
class _State:
    time_range: float = 1e-3
    time_ref: str = "CENT"
    time_pos: float = 0.0
    time_mode: str = "MAIN"
    wav_source: str = "CHAN1"
    wav_points: int = 1000
    wav_point_mode: str = "NORM"
    wav_format: str = "BYTE"
    precision: bool = False
    trig_mode: str = "EDGE"
    trig_source: str = "CHAN1"
    trig_slope: str = "POS"
    channels: dict[int, _Channel] = field(
        default_factory=lambda: {n: _Channel(display=int(n == 1)) for n in range(1, 5)}
    )


def _volts(text: str) -> float:
    return float(text.strip().upper().rstrip("V"))


class MockDSO(Transport):
    """In-process stand-in for a DSO6000 on the other end of a transport.

    Understands the SCPI subset dsoplot uses, keeps the settings it is sent
    and answers queries the way the instrument does (replies to a batch are
    joined with ``;``). Acquired waveforms are a sine wave of two periods per
    screen. Set `online` to False to simulate an unreachable instrument.
    """

    IDN = "AGILENT TECHNOLOGIES,DSO6054L,MY00000000,05.10.0000"

    def __init__(self, config: Optional[DsoConfig] = None, online: bool = True):
        super().__init__(config)
        self.online = online
        self.sent: list[str] = []  # every command line received
        self.errors: list[str] = []  # commands the mock did not understand
        self.state = _State()

    def send(self, host: str, command: str, timeout: Optional[float] = None) -> str:
        host = self._check_host(host)
        if not self.online:
            raise ConnectError(f"Cannot connect {host}, port {self.config.port}: refused")
        self.sent.append(command)
        replies = []
        for cmd in command.split(";"):
            cmd = cmd.strip()
            if not cmd:
                continue
            reply = self._handle(cmd)
            if reply is not None:
                replies.append(reply)
        return ";".join(replies)

    # ----------------------------------------------------------------------

    def _handle(self, cmd: str) -> Optional[str]:
        st = self.state
        head, _, arg = cmd.partition(" ")
        head = head.upper()
        arg = arg.strip()

        if head == "*RST":
            self.state = _State()
            return None
        if head == "*IDN?":
            return self.IDN
        if head == "*OPC?":
            return "1"
        if head in (":SINGLE", ":SING", ":DIG", ":RUN", ":STOP"):
            return None
        if head == ":AUT":
            ch = self._channel_no(arg)
            st.channels[ch].display = 1
            st.channels[ch].range = 4.0
            return None
        if head == ":SYST:PREC":
            st.precision = arg.upper() in ("ON", "1")
            return None

        if head.startswith(":WAV:"):
            return self._wav(head, arg)
        if head.startswith(":TIM:"):
            return self._tim(head, arg)
        if head.startswith(":TRIG:"):
            return self._trig(head, arg)

        match = _CHAN.match(cmd.upper())
        if match:
            return self._chan(int(match.group(1)), match.group(2), bool(match.group(3)), arg)

        logger.warning(f"MockDSO: unknown command {cmd}")
        self.errors.append(cmd)
        return None

    def _channel_no(self, arg: str) -> int:
        match = re.match(r"CHAN([1-4])", arg.upper())
        return int(match.group(1)) if match else 1

    def _wav(self, head: str, arg: str) -> Optional[str]:
        st = self.state
        if head == ":WAV:SOUR":
            st.wav_source = arg.upper()
        elif head == ":WAV:SOUR?":
            return st.wav_source
        elif head == ":WAV:POIN":
            st.wav_points = int(float(arg))
        elif head == ":WAV:POIN?":
            return str(st.wav_points)
        elif head == ":WAV:POIN:MODE":
            st.wav_point_mode = arg.upper()
        elif head == ":WAV:FORM":
            st.wav_format = arg.upper()
        elif head == ":WAV:PRE?":
            return self._preamble()
        elif head == ":WAV:DATA?":
            return self._data_block()
        else:
            self.errors.append(head)
        return None

    def _tim(self, head: str, arg: str) -> Optional[str]:
        st = self.state
        if head == ":TIM:RANG":
            st.time_range = float(arg)
        elif head == ":TIM:RANG?":
            return f"{st.time_range:+.5E}"
        elif head == ":TIM:REF":
            st.time_ref = arg.upper()
        elif head == ":TIM:REF?":
            return st.time_ref
        elif head == ":TIM:POS":
            st.time_pos = float(arg)
        elif head == ":TIM:POS?":
            return f"{st.time_pos:+.5E}"
        elif head == ":TIM:MODE":
            st.time_mode = arg.upper()
        else:
            self.errors.append(head)
        return None

    def _trig(self, head: str, arg: str) -> Optional[str]:
        st = self.state
        if head == ":TRIG:EDGE:SOUR":
            st.trig_source = arg.upper()
        elif head == ":TRIG:EDGE:SOUR?":
            return st.trig_source
        elif head == ":TRIG:MODE":
            st.trig_mode = arg.upper()
        elif head == ":TRIG:EDGE:SLOP":
            st.trig_slope = arg.upper()
        else:
            self.errors.append(head)
        return None

    def _chan(self, n: int, what: str, query: bool, arg: str) -> Optional[str]:
        chan = self.state.channels[n]
        if query:
            replies = {
                "DISP": str(chan.display),
                "COUP": chan.coupling,
                "RANG": f"{chan.range:+.5E}",
                "SCAL": f"{chan.scale:+.5E}",
                "OFFS": f"{chan.offset:+.5E}",
                "PROB": f"{chan.probe:+.5E}",
            }
            if what not in replies:
                self.errors.append(f":CHAN{n}:{what}?")
                return None
            return replies[what]
        if what == "DISP":
            chan.display = int(arg in ("1", "ON"))
        elif what == "COUP":
            chan.coupling = arg.upper()
        elif what == "RANG":
            chan.range = _volts(arg)
        elif what == "SCAL":
            chan.range = _volts(arg) * 8
        elif what == "OFFS":
            chan.offset = _volts(arg)
        elif what == "PROB":
            chan.probe = float(arg)
        else:
            self.errors.append(f":CHAN{n}:{what}")
        return None

    # ----------------------------------------------------------------------

    def _x_origin(self) -> float:
        st = self.state
        return st.time_pos - _REF_FRACTION.get(st.time_ref, 0.5) * st.time_range

    def _preamble(self) -> str:
        st = self.state
        chan = st.channels[self._channel_no(st.wav_source)]
        fields = (
            4 if st.wav_format == "ASC" else 0,
            0,
            st.wav_points,
            1,
            st.time_range / st.wav_points,
            self._x_origin(),
            0,
            chan.range / 256,
            chan.offset,
            0,
        )
        return ",".join(
            f"{v:+d}" if isinstance(v, int) else f"{v:+.8E}" for v in fields
        )

    def samples(self) -> np.ndarray:
        """The waveform the mock acquires with its current settings."""
        st = self.state
        chan = st.channels[self._channel_no(st.wav_source)]
        t = self._x_origin() + np.arange(st.wav_points) * st.time_range / st.wav_points
        return chan.range / 4 * np.sin(4 * math.pi * t / st.time_range) + chan.offset

    def _data_block(self) -> str:
        payload = ",".join(f"{v:.6e}" for v in self.samples())
        return f"#8{len(payload):08d}{payload}"
