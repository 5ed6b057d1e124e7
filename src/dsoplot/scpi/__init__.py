"""
SCPI dialect of the DSO6000 family.

- `commands`: operations -> command strings
- `waveform`: decoding of preamble and ASCII data blocks
- `calibration`: preamble -> calibrated axes and time units
- `status`: the status query battery
"""

from .calibration import calibrate, sample_times, sample_x, time_unit_scale
from .commands import CommandPlan, build, plot_command, trg_source
from .status import assemble_status
from .waveform import block_to_text, decode_plot_reply, parse_preamble, strip_block_header
