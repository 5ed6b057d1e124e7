# -*- coding: utf-8 -*-

import pathlib

DEFAULT_PORT = 5025  # SCPI raw socket port
DEFAULT_TIMEOUT = 3  # seconds
DEFAULT_VXI11_HELPER = "instruments/vxi11_cmd"
DEFAULT_VISA_BACKEND = "@py"
DEFAULT_GNUPLOT = "gnuplot"
DEFAULT_GNUPLOT_LANG = "en_US.UTF-8"  # avoids iconv warnings leaking into the JS
DEFAULT_PLOT_WIDTH = 800
DEFAULT_PLOT_HEIGHT = 600
DEFAULT_WAVE_POINTS = 500
DEFAULT_CHANNEL = 1
DEFAULT_COLOR = "ff0000"
DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line

CONFIG_DIR = pathlib.Path.home() / ".dsoplot"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "dsoplot.ini"
CONFIG_SECTION = "dsoplot"
DEFAULT_RENDER_TIMEOUT = 30  # seconds for the plotting process
