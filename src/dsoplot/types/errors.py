"""Exception hierarchy for talking to the oscilloscope.

Every failure raised by dsoplot derives from `DsoError`. The bridge boundary
(`dsoplot.bridge.DsoBridge`) converts the recoverable ones (see `RECOVERABLE`)
into a display-safe message; `InvalidOperationError` is a caller-side contract
violation and is re-raised.
"""

from __future__ import annotations


class DsoError(Exception):
    """Base class for all dsoplot failures."""


class ConfigurationError(DsoError):
    """Missing or invalid configuration, e.g. no instrument address."""


class TransportError(DsoError):
    """The instrument could not be reached or did not answer properly."""


class ConnectError(TransportError):
    """Connection to the instrument was refused or the host is unreachable."""


class ReadTimeoutError(TransportError, TimeoutError):
    """No reply from the instrument within the timeout."""


class ProtocolError(TransportError):
    """The instrument replied with something we cannot interpret."""


class DecodeError(DsoError):
    """A waveform or preamble reply could not be decoded."""


class MalformedBlockError(DecodeError):
    """The data block does not start with a valid IEEE-488.2 header."""


class InvalidOperationError(DsoError):
    """Unknown operation tag."""


class InvalidParameterError(InvalidOperationError):
    """A request parameter is out of range or not a number."""


class ExternalProcessError(DsoError):
    """A helper process (gnuplot, vxi11_cmd) failed to start or exited nonzero.

    Parameters
    ----------
    message : str
        Human readable description.
    returncode : int | None
        Exit status of the process, None when it could not be started at all.
    output : str
        Whatever the process printed before failing.
    """

    def __init__(self, message: str, returncode: int | None = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output

    @property
    def started(self) -> bool:
        return self.returncode is not None


# failures which are reported back to the caller instead of aborting the request
RECOVERABLE = (ConfigurationError, TransportError, DecodeError, ExternalProcessError)
