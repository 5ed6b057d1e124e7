from unittest.mock import MagicMock, patch

import pytest

from dsoplot.device import DSO6000, MockDSO
from dsoplot.scpi.status import STATUS_BATTERY, channel_battery, split_reply
from dsoplot.types import (
    ConnectError,
    DsoConfig,
    ProtocolError,
    ReadTimeoutError,
    StatusRecord,
)
from dsoplot.util.js import status_js

OPERATIONAL = (
    "wav_sour",
    "tim_ref",
    "wav_poin",
    "tim_rang",
    "time_scale",
    "time_unit",
    "trig_edge_sour",
    "chan_coup",
    "chan_rang",
    "chan_scal",
)


def scripted_device(*replies, adaptive=True):
    transport = MagicMock()
    transport.send.side_effect = list(replies)
    return DSO6000("10.0.0.7", DsoConfig(adaptive_timeout=adaptive), transport), transport


def test_split_reply():
    assert split_reply("CHAN1;LEFT\n;500", 3) == ["CHAN1", "LEFT", "500"]


def test_split_reply_count_mismatch():
    with pytest.raises(ProtocolError):
        split_reply("CHAN1;LEFT", 3)


def test_channel_battery():
    assert channel_battery("CHAN2") == ":CHAN2:COUP?; :CHAN2:RANG?; :CHAN2:SCAL?"


class TestAssemble:
    def test_from_replies(self):
        dso, transport = scripted_device(
            "+5.00000E-03\n",
            "CHAN2;LEFT;1000;+5.00000E-03;EXT\n",
            "AC;+1.60000E+01;+2.00000E+00\n",
        )
        record = dso.status()
        assert record.ok
        assert record.wav_sour == "CHAN2"
        assert record.tim_ref == "LEFT"
        assert record.wav_poin == 1000
        assert record.tim_rang == pytest.approx(5e-3)
        assert (record.time_scale, record.time_unit) == (1000.0, "msec")
        assert record.trig_edge_sour == "EXT"
        assert record.chan_coup == "AC"
        assert record.chan_rang == 16.0
        assert record.chan_scal == 2.0
        assert record.time_created

        calls = [c.args for c in transport.send.call_args_list]
        assert calls[0][1] == ":TIM:RANG?"
        assert calls[1][1] == "; ".join(STATUS_BATTERY)
        assert calls[1][2] == 3  # time range added to the base timeout
        assert calls[2][1] == ":CHAN2:COUP?; :CHAN2:RANG?; :CHAN2:SCAL?"

    def test_long_time_range_extends_timeout(self):
        dso, transport = scripted_device(
            "+5.00000E+00",
            "CHAN1;CENT;1000;+5.00000E+00;CHAN1",
            "DC;+8.0E+00;+1.0E+00",
        )
        dso.status()
        assert transport.send.call_args_list[1].args[2] == 8

    def test_fixed_timeout(self):
        dso, transport = scripted_device(
            "CHAN1;CENT;1000;+5.00000E+00;CHAN1",
            "DC;+8.0E+00;+1.0E+00",
            adaptive=False,
        )
        assert dso.status().ok
        assert transport.send.call_count == 2
        assert transport.send.call_args_list[0].args[2] == 3

    def test_prior_error_is_sanitized(self, dso):
        record = dso.status(prior_error="Can't set it\r\n")
        assert record.err_msg == "Can&#39;t set it"
        assert record.wav_sour == "CHAN1"

    @pytest.mark.parametrize(
        "error", [ConnectError("Cannot connect 10.0.0.7, port 5025: refused"), ReadTimeoutError("")]
    )
    def test_transport_failure_is_captured(self, error):
        transport = MagicMock()
        transport.send.side_effect = error
        record = DSO6000("10.0.0.7", transport=transport).status()
        assert not record.ok
        assert record.err_msg
        for name in OPERATIONAL:
            assert getattr(record, name) in (None, "")

    def test_failure_message_is_display_safe(self):
        transport = MagicMock()
        transport.send.side_effect = ConnectError("Can't connect\n")
        record = DSO6000("10.0.0.7", transport=transport).status()
        assert record.err_msg == "Can&#39;t connect"
        assert "'" not in record.err_msg

    def test_empty_host(self):
        record = DSO6000("", transport=MockDSO()).status()
        assert record.err_msg == "No instrument IP address given"

    def test_garbled_reply(self):
        dso, _ = scripted_device("+1.0E-03", "CHAN1;LEFT", "")
        record = dso.status()
        assert "Expected 5 replies" in record.err_msg
        assert record.wav_sour == ""

    def test_non_numeric_reply(self):
        dso, _ = scripted_device(
            "+1.0E-03", "CHAN1;LEFT;many;+1.0E-03;CHAN1", "DC;+8.0E+00;+1.0E+00"
        )
        assert "Expected a number" in dso.status().err_msg

    @pytest.mark.parametrize("tim_rang", ["nan", "inf", "-inf"])
    def test_non_finite_reply(self, tim_rang):
        dso, _ = scripted_device(
            "+1.0E-03", f"CHAN1;LEFT;1000;{tim_rang};CHAN1", "DC;+8.0E+00;+1.0E+00"
        )
        record = dso.status()
        assert "Expected a number" in record.err_msg
        assert record.wav_sour == ""

    def test_non_finite_point_count(self):
        dso, _ = scripted_device(
            "+1.0E-03", "CHAN1;LEFT;inf;+1.0E-03;CHAN1", "DC;+8.0E+00;+1.0E+00"
        )
        assert "Expected a number" in dso.status().err_msg

    def test_non_ascii_reply(self):
        with patch("dsoplot.device.transport.pyvisa.ResourceManager") as rm_cls:
            inst = rm_cls.return_value.open_resource.return_value
            inst.read.side_effect = UnicodeDecodeError(
                "ascii", b"\xb5s", 0, 1, "ordinal not in range(128)"
            )
            record = DSO6000("10.0.0.7").status()
        assert not record.ok
        assert "undecodable reply" in record.err_msg
        assert record.wav_sour == ""


class TestStatusJs:
    def test_keys_and_order(self):
        record = StatusRecord(
            wav_sour="CHAN1",
            tim_ref="LEFT",
            wav_poin=500,
            tim_rang=0.001,
            time_scale=1000.0,
            time_unit="msec",
            trig_edge_sour="CHAN1",
            chan_coup="DC",
            chan_rang=8.0,
            chan_scal=1.0,
            time_created="Mon Oct 19 10:00:00 2026",
        )
        js = status_js(record)
        assert js.startswith("function dsoStatus() { \n  return { wavSour: 'CHAN1',\n")
        assert js.endswith("wasSeen: ''}\n};\n")
        keys = [line.strip().split(":")[0] for line in js.splitlines()[1:-1]]
        keys[0] = keys[0].replace("return { ", "")
        assert keys == [
            "wavSour",
            "timRef",
            "wavPoin",
            "timRang",
            "timeScale",
            "timeUnit",
            "trigEdgeSour",
            "chanCoup",
            "chanRang",
            "chanScal",
            "errMsg",
            "timeCreated",
            "wasSeen",
        ]
        assert "timeScale: '1000'" in js
        assert "timRang: '0.001'" in js
        assert "timeCreated: 'Mon Oct 19 10:00:00 2026'" in js

    def test_empty_record(self):
        js = status_js(StatusRecord(err_msg="No instrument IP address given"))
        assert "wavPoin: ''" in js
        assert "errMsg: 'No instrument IP address given'" in js
