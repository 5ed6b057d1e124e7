from __future__ import annotations

import os
from typing import Optional

from loguru import logger

from dsoplot.plot.emitter import PlotDescription
from dsoplot.types.config import DsoConfig
from dsoplot.util.defaults import DEFAULT_RENDER_TIMEOUT
from dsoplot.util.process import run_helper


class GnuplotRenderer:
    """Render plot descriptions with an external gnuplot process.

    The output is whatever the script's terminal produces: JavaScript for the
    canvas terminal, ASCII art for the dumb one.
    """

    def __init__(self, config: Optional[DsoConfig] = None, timeout: float = DEFAULT_RENDER_TIMEOUT):
        self.config = config or DsoConfig()
        self.timeout = timeout

    def command(self, desc: PlotDescription) -> list[str]:
        return [self.config.gnuplot, "-e", desc.script]

    def environment(self) -> dict[str, str]:
        env = dict(os.environ)
        # gnuplot reading a pipe garbles its output under some locales
        env["LANG"] = self.config.gnuplot_lang
        return env

    def render(self, desc: PlotDescription) -> str:
        logger.debug("gnuplot script: {}", desc.script)
        return run_helper(
            self.command(desc),
            input_text=desc.data,
            timeout=self.timeout,
            env=self.environment(),
        )
