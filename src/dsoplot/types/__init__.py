"""
Request, configuration, record and error types shared by all of dsoplot.

- `config`: `DsoConfig` settings and `DeviceEndpoint`
- `commands`: the `Operation` enum and `CommandRequest`
- `records`: values decoded from instrument replies
- `errors`: the `DsoError` hierarchy

Examples
--------
```python
from dsoplot.types import CommandRequest, Operation
req = CommandRequest(operation=Operation.SET_COUPLING, channel=2, value="AC")
```
"""

from .commands import CommandRequest, Operation
from .config import DeviceEndpoint, DsoConfig, TransportKind, load_config
from .errors import (
    RECOVERABLE,
    ConfigurationError,
    ConnectError,
    DecodeError,
    DsoError,
    ExternalProcessError,
    InvalidOperationError,
    InvalidParameterError,
    MalformedBlockError,
    ProtocolError,
    ReadTimeoutError,
    TransportError,
)
from .records import (
    Calibration,
    PlotReply,
    PreambleRecord,
    StatusRecord,
    TimeUnitScale,
    Waveform,
)
