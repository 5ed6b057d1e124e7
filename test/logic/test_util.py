from loguru import logger

from dsoplot.types import ConfigurationError, StatusRecord
from dsoplot.util import get_log_filename, shutdown_log, start_log
from dsoplot.util.js import message_js, sanitize, status_js
from dsoplot.util.timer import Timer


class TestSanitize:
    def test_quotes(self):
        assert sanitize("Can't connect") == "Can&#39;t connect"

    def test_trailing_newlines(self):
        assert sanitize("line one\nline two\r\n\n") == "line one\nline two"

    def test_exception(self):
        assert sanitize(ConfigurationError("No instrument IP address given\n")) == (
            "No instrument IP address given"
        )

    def test_none(self):
        assert sanitize(None) == ""


def test_message_js():
    assert message_js("Unexpected reply \"0\" to *OPC? command\n") == (
        "function cs() { statMsg('Unexpected reply \"0\" to *OPC? command'); }"
    )


def test_status_js_escapes_values():
    js = status_js(StatusRecord(err_msg="it's gone", time_created="now"))
    assert "errMsg: 'it&#39;s gone'" in js


def test_timer():
    timer = Timer(fmt="%.1f", reset=False)
    assert timer.seconds() >= 0
    assert float(timer.elapsed()) >= 0
    assert timer.elapsed(fmt="took %.0f s").startswith("took ")


class TestLogging:
    def test_log_to_file(self, tmp_path):
        path = tmp_path / "dsoplot.log"
        start_log(log_to_file=True, log_to_stdout=False, log_path=str(path), log_level="DEBUG")
        logger.debug("hello scope")
        shutdown_log()
        assert get_log_filename() == str(path)
        assert "hello scope" in path.read_text()

    def test_clear_previous(self, tmp_path):
        path = tmp_path / "dsoplot.log"
        path.write_text("old run\n")
        start_log(log_to_file=True, log_path=str(path), clear_prev=True)
        shutdown_log()
        assert "old run" not in path.read_text()

    def test_keep_previous(self, tmp_path):
        path = tmp_path / "dsoplot.log"
        path.write_text("old run\n")
        start_log(log_to_file=True, log_path=str(path), clear_prev=False)
        shutdown_log()
        assert path.read_text().startswith("old run")

    def test_no_file_no_filename(self, tmp_path):
        start_log(log_to_file=True, log_path=str(tmp_path / "dsoplot.log"))
        start_log(log_to_file=False, log_to_stdout=False, clear_prev=False)
        shutdown_log()
        assert get_log_filename() == ""
