import time

import click
import simplejson as json
from loguru import logger

from dsoplot.bridge import DsoBridge
from dsoplot.device import DSO6000, MockDSO
from dsoplot.plot import GnuplotRenderer, emit_plot, emit_waveform
from dsoplot.types import (
    RECOVERABLE,
    InvalidOperationError,
    Operation,
    TransportKind,
    load_config,
)
from dsoplot.util import DEFAULT_LOGLEVEL, format_error_response, shutdown_log, start_log
from dsoplot.util.js import status_js

MOCK_HOST = "mock"


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


def log_options(f):
    """Logging options shared by all commands."""
    options = [
        click.option(
            "--log-to-file/--no-log-to-file",
            "-ltf/",
            default=False,
            help="Enable/disable logging to file (default: disabled)",
        ),
        click.option(
            "--log-to-stdout/--no-log-to-stdout",
            "-lts/",
            default=True,
            help="Enable/disable console logging, to stderr (default: enabled)",
        ),
        click.option(
            "--log-path",
            "-lp",
            default="",
            help="Custom path for log file (default: ~/.dsoplot/dsoplot.log)",
        ),
        click.option(
            "--clear-prev-log/--no-clear-prev-log",
            "-c/",
            default=False,
            help="Clear previous log file on startup (default: disabled)",
        ),
        click.option(
            "--log-level",
            "-ll",
            default=DEFAULT_LOGLEVEL,
            help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def device_options(f):
    """Instrument address and transport options."""
    options = [
        click.option(
            "--ip",
            "-i",
            default="",
            help="Instrument address (empty: no instrument, plot the imitator)",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False),
            default=None,
            help="INI config file (default: ~/.dsoplot/dsoplot.ini)",
        ),
        click.option(
            "--transport",
            "-t",
            type=click.Choice([k.value for k in TransportKind]),
            default=None,
            help="How to talk to the instrument (default: from config, socket)",
        ),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="Base reply timeout in seconds (default: from config, 3)",
        ),
        click.option(
            "--mock/--no-mock",
            default=False,
            help="Talk to an in-process mock instrument instead of hardware",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _start(kwargs):
    """Pop the common options, start logging and build the bridge."""
    start_log(
        log_to_file=kwargs.pop("log_to_file"),
        log_to_stdout=kwargs.pop("log_to_stdout"),
        log_path=kwargs.pop("log_path"),
        clear_prev=kwargs.pop("clear_prev_log"),
        log_level=kwargs.pop("log_level"),
    )
    try:
        config = load_config(kwargs.pop("config_path")).replace(
            transport=kwargs.pop("transport"), timeout=kwargs.pop("timeout")
        )
    except RECOVERABLE as e:
        raise click.ClickException(str(e)) from e
    transport = MockDSO(config) if kwargs.pop("mock") else None
    ip = kwargs.pop("ip")
    if transport is not None and not ip:
        ip = MOCK_HOST
    return DsoBridge(config, transport=transport), ip


@click.group()
@tree_option
def cli():
    """dsoplot - web bridge to Agilent DSO6000 oscilloscopes.

    Translates front-end requests into SCPI commands, decodes the returned
    waveforms and status, and hands the plots to gnuplot.
    """
    pass


@cli.command()
@click.option(
    "--mode",
    "-m",
    required=True,
    type=click.Choice([op.value for op in Operation]),
    help="Operation, as the web page names it",
)
@click.option("--channel", "-cn", type=int, default=None, help="Channel 1-4")
@click.option("--color", default=None, help="Plot color, RGB hex (default: ff0000)")
@click.option("--value", "-v", default="", help="Operation parameter (val)")
@click.option("--time-range", default="", help="Time range for Init (timRang)")
@click.option("--width", "-w", type=int, default=None, help="Plot width in pixels")
@click.option("--height", "-h", type=int, default=None, help="Plot height in pixels")
@click.option("--points", "-p", type=int, default=None, help="Waveform points (wP)")
@device_options
@log_options
def run(**kwargs):
    """Handle one web page request and print the payload.

    The output is what the page receives: gnuplot canvas JavaScript for Plot,
    the dsoStatus() function for everything else, or the statMsg() error
    message.
    """
    bridge, ip = _start(kwargs)
    query = {
        "mode": kwargs["mode"],
        "ip": ip,
        "cn": kwargs["channel"],
        "color": kwargs["color"],
        "val": kwargs["value"],
        "timRang": kwargs["time_range"],
        "w": kwargs["width"],
        "h": kwargs["height"],
        "wP": kwargs["points"],
    }
    query = {k: v for k, v in query.items() if v is not None}
    try:
        click.echo(bridge.handle_query(query))
    except InvalidOperationError as e:
        raise click.UsageError(str(e)) from e
    finally:
        shutdown_log()


@cli.command()
@click.option("--channel", "-cn", type=int, default=None, help="Switch to channel first")
@click.option("--json/--no-json", "as_json", default=False, help="Print as JSON")
@device_options
@log_options
def status(channel, as_json, **kwargs):
    """Print the instrument settings."""
    bridge, ip = _start(kwargs)
    try:
        record = bridge.run(
            bridge.request(Operation.STATUS_QUERY, channel=channel), ip
        )
    except InvalidOperationError as e:
        raise click.UsageError(str(e)) from e
    finally:
        shutdown_log()
    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
    else:
        click.echo(status_js(record))
    if not record.ok:
        raise click.ClickException(record.err_msg)


@cli.command()
@click.option("--channel", "-cn", type=int, default=None, help="Channel 1-4")
@click.option("--points", "-p", type=int, default=None, help="Waveform points")
@click.option("--color", default=None, help="Plot color, RGB hex")
@click.option("--width", "-w", type=int, default=None, help="Plot width in pixels")
@click.option("--height", "-h", type=int, default=None, help="Plot height in pixels")
@click.option(
    "--png",
    type=click.Path(dir_okay=False),
    default=None,
    help="Save the plot with matplotlib to this file instead of running gnuplot",
)
@click.option(
    "--script/--no-script",
    default=False,
    help="Only print the gnuplot script and data",
)
@device_options
@log_options
def plot(png, script, **kwargs):
    """Acquire one waveform and plot it."""
    bridge, ip = _start(kwargs)
    try:
        req = bridge.request(
            Operation.PLOT,
            channel=kwargs["channel"],
            points=kwargs["points"],
            color=kwargs["color"],
            width=kwargs["width"],
            height=kwargs["height"],
        )
        device = bridge.device(ip)
        reply = None if device.simulate else device.fetch_waveform(req.chan, req.points)
        desc = emit_plot(reply, req.chan, req.color, req.width, req.height)
        if script:
            click.echo(desc.script)
            if desc.data is not None:
                click.echo(desc.data)
        elif png:
            from dsoplot.plot.mpl import save_plot

            save_plot(desc, png)
        else:
            click.echo(bridge.renderer.render(desc))
    except InvalidOperationError as e:
        raise click.UsageError(str(e)) from e
    except RECOVERABLE as e:
        logger.debug(format_error_response())
        raise click.ClickException(str(e)) from e
    finally:
        shutdown_log()


@cli.command()
@click.option("--channel", "-cn", type=int, default=None, help="Channel 1-4")
@click.option("--points", "-p", type=int, default=100, help="Waveform points (default: 100)")
@click.option("--count", "-n", type=int, default=0, help="Number of frames, 0 = until Ctrl-C")
@click.option("--interval", type=float, default=0.0, help="Pause between frames in seconds")
@device_options
@log_options
def watch(channel, points, count, interval, **kwargs):
    """Oscilloscope for the poor: redraw the waveform on the terminal.

    Grabs `points` samples again and again and draws them with gnuplot's dumb
    (ASCII) terminal.
    """
    bridge, ip = _start(kwargs)
    if not ip:
        shutdown_log()
        raise click.UsageError("watch needs an instrument address (--ip) or --mock")
    try:
        req = bridge.request(Operation.PLOT, channel=channel, points=points)
        device = bridge.device(ip)
        frame = 0
        while not count or frame < count:
            reply = device.fetch_waveform(req.chan, req.points)
            desc = emit_waveform(
                reply, req.chan, req.color, req.width, req.height, terminal="dumb"
            )
            click.echo(bridge.renderer.render(desc))
            frame += 1
            if interval:
                time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except InvalidOperationError as e:
        raise click.UsageError(str(e)) from e
    except RECOVERABLE as e:
        raise click.ClickException(str(e)) from e
    finally:
        shutdown_log()


@cli.command()
@device_options
@log_options
def idn(**kwargs):
    """Print the instrument identification (*IDN?)."""
    bridge, ip = _start(kwargs)
    try:
        _, ident = bridge.device(ip).open()
    except RECOVERABLE as e:
        raise click.ClickException(str(e)) from e
    finally:
        shutdown_log()
    click.echo(ident)


@cli.command(name="config")
@click.option("--json/--no-json", "as_json", default=False, help="Print as JSON")
@device_options
@log_options
def show_config(as_json, **kwargs):
    """Show the effective configuration."""
    bridge, _ = _start(kwargs)
    shutdown_log()
    values = bridge.config.to_dict()
    if as_json:
        click.echo(json.dumps(values, indent=2))
        return
    click.echo("[dsoplot]")
    for key, value in values.items():
        click.echo(f"{key} = {value}")
