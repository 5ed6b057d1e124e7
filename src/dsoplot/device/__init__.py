# -*- coding: utf-8 -*-
"""
Instrument classes and transports for dsoplot.

- `Device`: common base (configuration validation, connection handling)
- `DSO6000`: the oscilloscope, one method per kind of exchange
- `SocketTransport` / `Vxi11Transport`: how commands reach the instrument
- `MockDSO`: in-process instrument for tests and demos

Examples
--------
```python
from dsoplot.device import DSO6000
dso = DSO6000("192.168.0.150")
print(dso.status())
```
"""

from .device import Device
from .dso6000 import DSO6000
from .mock import MockDSO
from .transport import SocketTransport, Transport, Vxi11Transport, make_transport

__all__ = [
    "Device",
    "DSO6000",
    "MockDSO",
    "SocketTransport",
    "Transport",
    "Vxi11Transport",
    "make_transport",
]
