"""
Command-line interface for dsoplot.

This module provides command-line tools for the oscilloscope bridge,
including:

- Running a single web page request (as the CGI script would)
- Printing the instrument status and identification
- Plotting a waveform through gnuplot or to an image file
- A text terminal "oscilloscope" loop

The CLI is built using the Click framework. Every command accepts
``--mock`` to talk to an in-process instrument instead of hardware.

Examples
--------
Status of the instrument at 192.168.0.150, as JSON:
```bash
$ dsoplot status --ip 192.168.0.150 --json
```

Autoscale channel 2, trigger on the external input:
```bash
$ dsoplot run -m AutoS -cn 2 -v E --ip 192.168.0.150
```

Save a plot of the mock instrument:
```bash
$ dsoplot plot --mock --png wave.png
```

See Also
--------
dsoplot.bridge : Request handling and error payloads
dsoplot.device : The instrument and its transports


CLI Tree
--------

```
$ dsoplot --tree
cli
└── config
└── idn
└── plot
└── run
└── status
└── watch
```
"""

from .base import cli, tree_option
