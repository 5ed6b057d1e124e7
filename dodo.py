# -*- coding: utf-8 -*-
# pydoit task file
# see https://pydoit.org/
# run from this dir with `doit`, or `doit list`, `doit help` etc. (pip install doit 1st)

from doit.action import CmdAction

_HELP_PARAM = {"name": "help", "long": "help", "default": False, "type": bool}


def _build_pytest_command(test_dir, keyword="", retry=False, print_logs=False, show_time=False):
    """Helper function to build pytest commands for test tasks."""
    cmd = ["pytest", "--color=yes", "-vv"]
    if print_logs:
        cmd.append("--capture=no")
    if show_time:
        cmd.append("--durations=0")
    if retry:
        cmd.append("--lf")
    if keyword:
        cmd.extend(["-k", f'"{keyword}"'])
    cmd.append(test_dir)
    return " ".join(cmd)


def _test_task(test_dir, title, example_kw):
    def router(keyword, retry, print_logs, show_time, help=False):
        if help:
            return f"""echo '
{title}
{"=" * len(title)}

  -k, --keyword TEXT    Only run tests matching the keyword expression
  -r, --retry           Only run previously failed tests
  -p, --print-logs      Print test logs to console instead of capturing
  -t, --show-time       Display duration of all tests

Example:
  doit {test_dir.strip("/").replace("/", "_")} -k {example_kw}
  '"""
        return _build_pytest_command(test_dir, keyword, retry, print_logs, show_time)

    return {
        "actions": [CmdAction(router)],
        "params": [
            _HELP_PARAM,
            {"name": "keyword", "short": "k", "default": ""},
            {"name": "retry", "short": "r", "default": False, "type": bool},
            {"name": "print_logs", "short": "p", "default": False, "type": bool},
            {"name": "show_time", "short": "t", "default": False, "type": bool},
        ],
        "verbosity": 2,
    }


def task_make_env():
    """Create a conda environment"""
    return {
        "actions": ["conda create --prefix ./conda_env python=3.11"],
        "targets": ["./conda_env"],
        "uptodate": [True],  # Only run if target doesn't exist
        "verbosity": 2,
    }


def task_install():
    """Install dsoplot in editable mode, with test dependencies"""
    return {
        "actions": ["pip install -e .[test]"],
        "task_dep": ["make_env"],
        "verbosity": 2,
    }


def task_test_logic():
    """Run the logic test suite (tests in test/logic/, no instrument needed)."""
    return _test_task("test/logic/", "Test Logic Runner Help", "waveform")


def task_test_hardware():
    """Run the hardware test suite (tests in test/hardware/, set DSO_IP)."""
    return _test_task("test/hardware/", "Test Hardware Runner Help", "status")


def task_format():
    """Format code using ruff."""
    return {
        "actions": [
            f"ruff check --select I --fix {target} && ruff format {target}"
            for target in ("src/dsoplot", "test/", "dodo.py")
        ],
        "verbosity": 2,
    }


def task_docs():
    """Generate HTML documentation into docs/ using pdoc3."""
    return {
        "actions": [
            "pdoc3 --output-dir docs/ --html --force --skip-errors ./src/dsoplot/"
        ],
        "verbosity": 2,
    }
