"""Running external helper programs (gnuplot, vxi11_cmd)."""

from __future__ import annotations

import subprocess
from typing import Mapping, Optional, Sequence

from loguru import logger

from dsoplot.types.errors import ExternalProcessError, ReadTimeoutError
from dsoplot.util.timer import Timer


def run_helper(
    args: Sequence[str],
    input_text: Optional[str] = None,
    timeout: Optional[float] = None,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """Run a helper program and return its merged stdout/stderr.

    Output bytes that do not decode are replaced rather than raised on.

    Parameters
    ----------
    args : Sequence[str]
        Program and its arguments.
    input_text : str, optional
        Text written to the program's stdin (a trailing newline is added).
    timeout : float, optional
        Seconds to wait for the program to finish.
    env : Mapping[str, str], optional
        Environment for the child process.

    Raises
    ------
    ExternalProcessError
        The program could not be started (``returncode`` is None) or exited
        with a nonzero status.
    ReadTimeoutError
        The program did not finish within `timeout`.
    """
    cmd_str = " ".join(args)
    timer = Timer()
    logger.trace("Running \"{}\"", cmd_str)
    try:
        proc = subprocess.run(
            list(args),
            input=None if input_text is None else input_text + "\n",
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
            env=None if env is None else dict(env),
        )
    except subprocess.TimeoutExpired as e:
        raise ReadTimeoutError(
            f'No reply from "{cmd_str}" in {timeout} sec.'
        ) from e
    except OSError as e:
        raise ExternalProcessError(f'Can\'t run "{cmd_str}": {e}') from e

    logger.debug("\"{}\" finished in {} s", args[0], timer.elapsed())
    if proc.returncode != 0:
        raise ExternalProcessError(
            f'Can\'t run "{cmd_str}": exit code {proc.returncode}',
            returncode=proc.returncode,
            output=proc.stdout or "",
        )
    return proc.stdout or ""
