"""Tests against a real oscilloscope.

Set DSO_IP to the instrument address (and DSO_TRANSPORT=vxi11 to go through
the vxi11_cmd helper). The instrument settings are changed by these tests.
"""

import os

import pytest
from loguru import logger

import dsoplot.util
from dsoplot.bridge import DsoBridge
from dsoplot.device import DSO6000
from dsoplot.types import CommandRequest, DsoConfig, Operation
from dsoplot.util import TEST_LOGLEVEL

DSO_IP = os.environ.get("DSO_IP", "")

pytestmark = [
    pytest.mark.hardware,
    pytest.mark.skipif(not DSO_IP, reason="DSO_IP not set, no oscilloscope"),
]


@pytest.fixture(scope="module")
def config():
    return DsoConfig(transport=os.environ.get("DSO_TRANSPORT", "socket"))


@pytest.fixture(scope="module", autouse=True)
def client_log():
    dsoplot.util.start_log(log_to_file=True, log_level=TEST_LOGLEVEL)
    yield
    dsoplot.util.shutdown_log()


@pytest.fixture
def dso(config):
    dso = DSO6000(DSO_IP, config=config)
    dso.open()
    yield dso
    dso.close()


def test_idn(dso):
    assert dso.is_connected()
    logger.info(f"Testing {dso.unroll_metadata()['idn']}")


def test_initialize_and_status(dso):
    dso.execute(CommandRequest(operation=Operation.INITIALIZE, channel=1, time_range="0.001"))
    status = dso.status()
    assert status.ok, status.err_msg
    assert status.tim_ref == "LEFT"
    assert status.tim_rang == pytest.approx(1e-3)
    assert status.chan_coup == "AC"


@pytest.mark.parametrize("points", [500, 2000])
def test_waveform(dso, points):
    reply = dso.fetch_waveform(channel=1, points=points)
    assert reply.preamble.points > 0
    assert len(reply.waveform) == reply.preamble.points
    logger.info(f"Got {len(reply.waveform)} points, range {reply.vertical_range} V")


@pytest.mark.slow
def test_time_reference(dso):
    for reference in ("LEFT", "CENT", "RIGH"):
        dso.execute(CommandRequest(operation=Operation.SET_TIME_REFERENCE, value=reference))
        assert dso.status().tim_ref == reference


def test_bridge_status_payload(config):
    payload = DsoBridge(config).handle_query({"mode": "statReq", "ip": DSO_IP})
    assert "errMsg: ''" in payload
