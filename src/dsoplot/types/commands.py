"""Operation tags and requests coming from the front-end."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from dsoplot.types.config import DsoConfig
from dsoplot.types.errors import InvalidOperationError, InvalidParameterError

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")


class Operation(str, Enum):
    """The closed set of operations. Values are the front-end's ``mode`` names."""

    PLOT = "Plot"
    AUTO_SCALE = "AutoS"
    SET_TIME_REFERENCE = "TimRef"
    SET_COUPLING = "Coupling"
    SET_TIME_RANGE = "TimRange"
    SET_VERTICAL_RANGE = "VertRange"
    SET_VERTICAL_SCALE = "VertScale"
    SET_TRIGGER_CHANNEL = "TrigCh"
    INITIALIZE = "Init"
    RESET = "Reset"
    STATUS_QUERY = "statReq"

    @classmethod
    def parse(cls, mode: str | Operation) -> Operation:
        if isinstance(mode, Operation):
            return mode
        try:
            return cls(mode)
        except ValueError:
            pass
        # also accept the member names, e.g. "auto_scale"
        try:
            return cls[str(mode).upper()]
        except KeyError:
            raise InvalidOperationError(
                f'Invalid mode "{mode}", check script parameters'
            ) from None


@dataclass(frozen=True, kw_only=True)
class CommandRequest:
    """One abstract operation with its parameters.

    Attributes
    ----------
    operation : Operation
        What to do.
    channel : int | None
        Channel 1-4; None if the caller did not name one (matters for
        `Operation.STATUS_QUERY`, which only switches the source if given).
    color : str
        Plot color, RGB hex without ``#``.
    value : str
        Free parameter; its meaning depends on the operation (coupling,
        reference position, time range, volts, trigger source).
    time_range : str
        Time range for `Operation.INITIALIZE`.
    width, height : int
        Plot size in pixels.
    points : int
        Number of waveform points to request.
    """

    operation: Operation
    channel: int | None = None
    color: str = "ff0000"
    value: str = ""
    time_range: str = ""
    width: int = 800
    height: int = 600
    points: int = 500

    def __post_init__(self):
        object.__setattr__(self, "operation", Operation.parse(self.operation))
        if self.channel is not None and self.channel not in (1, 2, 3, 4):
            raise InvalidParameterError(f"Channel must be 1-4 (got {self.channel})")
        if not _HEX_COLOR.fullmatch(self.color):
            raise InvalidParameterError(
                f'Color must be an RGB hex code like "E69F00" (got "{self.color}")'
            )
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameterError(
                f"Plot size must be positive (got {self.width}x{self.height})"
            )
        if self.points <= 0:
            raise InvalidParameterError(
                f"Waveform points must be positive (got {self.points})"
            )

    @property
    def chan(self) -> int:
        """Channel to operate on, 1 if none was given."""
        return 1 if self.channel is None else self.channel

    @classmethod
    def from_query(
        cls, query: Mapping[str, str], defaults: DsoConfig | None = None
    ) -> CommandRequest:
        """Build a request from the front-end's query parameters.

        Keys: ``mode``, ``cn``, ``color``, ``val``, ``timRang``, ``w``, ``h``,
        ``wP``. Missing keys take the configured defaults.
        """
        defaults = defaults or DsoConfig()
        if "mode" not in query:
            raise InvalidOperationError("No mode given, check script parameters")

        def _int(key: str, default: int | None) -> int | None:
            if key not in query or query[key] in ("", None):
                return default
            try:
                return int(query[key])
            except (TypeError, ValueError):
                raise InvalidParameterError(
                    f'Parameter {key} must be an integer (got "{query[key]}")'
                ) from None

        channel = _int("cn", None)
        if channel is None and Operation.parse(query["mode"]) is not Operation.STATUS_QUERY:
            channel = defaults.channel
        return cls(
            operation=query["mode"],
            channel=channel,
            color=str(query.get("color") or defaults.color).lstrip("#"),
            value=str(query.get("val", "")).strip(),
            time_range=str(query.get("timRang", "")).strip(),
            width=_int("w", defaults.plot_width),
            height=_int("h", defaults.plot_height),
            points=_int("wP", defaults.wave_points),
        )
