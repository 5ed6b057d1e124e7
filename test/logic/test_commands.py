import pytest

from dsoplot.scpi.commands import (
    BUILDERS,
    build,
    plot_command,
    precision_command,
    reply_number,
    time_position_command,
    trg_source,
)
from dsoplot.types import (
    CommandRequest,
    DsoConfig,
    InvalidOperationError,
    InvalidParameterError,
    Operation,
    ProtocolError,
)


def req(operation, **kwargs):
    return CommandRequest(operation=operation, **kwargs)


class TestPlotCommand:
    @pytest.mark.parametrize("points", [1001, 2000, 8000000])
    def test_precision_on_before_points(self, points):
        cmd = plot_command(1, points)
        assert cmd.startswith(f":SYST:PREC ON; :WAV:POIN {points};")

    @pytest.mark.parametrize("points", [1, 500, 1000])
    def test_precision_off(self, points):
        cmd = plot_command(1, points)
        assert cmd.startswith(f":SYST:PREC OFF; :WAV:POIN {points};")

    def test_threshold(self):
        assert precision_command(1000) == ":SYST:PREC OFF"
        assert precision_command(1001) == ":SYST:PREC ON"

    def test_full_command(self):
        assert plot_command(2, 500) == (
            ":SYST:PREC OFF; :WAV:POIN 500; :WAV:SOUR CHAN2; :SINGLE; "
            ":CHAN2:DISP 1; :WAV:FORM ASC; :CHAN2:RANG?; :WAV:PRE?; :WAV:DATA?"
        )

    def test_build_plot(self):
        plan = build(req(Operation.PLOT, channel=3, points=1500))
        assert plan.follow_up is None
        assert plan.command == plot_command(3, 1500)


class TestTrgSource:
    def test_external(self):
        assert trg_source("E", 1) == "EXT"

    def test_channel_digit(self):
        assert trg_source("3", 1) == "CHAN3"

    @pytest.mark.parametrize("value", ["9", "", "0", "e", "CHAN2", "12"])
    def test_fallback_to_request_channel(self, value):
        assert trg_source(value, 2) == "CHAN2"


class TestSimpleOperations:
    def test_auto_scale(self):
        plan = build(req(Operation.AUTO_SCALE, channel=2, value="E"))
        assert plan.command == (
            ":AUT CHAN2; :WAV:SOUR CHAN2; :CHAN2:DISP 1; :TRIG:EDGE:SOUR EXT"
        )

    def test_auto_scale_trigger_fallback(self):
        plan = build(req(Operation.AUTO_SCALE, channel=4, value="x"))
        assert plan.command.endswith(":TRIG:EDGE:SOUR CHAN4")

    @pytest.mark.parametrize("value,coupling", [("AC", "AC"), ("DC", "DC"), ("ac", "DC"), ("", "DC")])
    def test_coupling(self, value, coupling):
        plan = build(req(Operation.SET_COUPLING, channel=1, value=value))
        assert plan.command == f":CHAN1:COUP {coupling}"

    def test_vertical_range(self):
        plan = build(req(Operation.SET_VERTICAL_RANGE, channel=3, value="1.6"))
        assert plan.command == ":CHAN3:RANG 1.6V"

    def test_vertical_scale(self):
        plan = build(req(Operation.SET_VERTICAL_SCALE, channel=1, value="0.05"))
        assert plan.command == ":CHAN1:SCAL 0.05V"

    @pytest.mark.parametrize("value", ["", "abc", "1; *RST", "nan", "inf"])
    def test_vertical_range_rejects_non_numbers(self, value):
        with pytest.raises(InvalidParameterError):
            build(req(Operation.SET_VERTICAL_RANGE, channel=1, value=value))

    def test_trigger_channel(self):
        plan = build(req(Operation.SET_TRIGGER_CHANNEL, channel=1, value="4"))
        assert plan.command == ":TRIG:EDGE:SOUR CHAN4"

    def test_reset(self):
        assert build(req(Operation.RESET)).command == "*RST"

    def test_initialize(self):
        plan = build(req(Operation.INITIALIZE, channel=2, time_range="0.001"))
        assert plan.command == (
            "*RST; :WAV:POIN:MODE NORM; :CHAN2:PROB 10; :CHAN2:COUP AC; "
            ":CHAN2:RANG 16; :CHAN2:OFFS 0; :TIM:MODE MAIN; :TIM:REF LEFT; "
            ":TIM:POS 0; :TIM:RANG 0.001; :TRIG:MODE EDGE; "
            ":TRIG:EDGE:SOUR CHAN2; :TRIG:EDGE:SLOP EITH"
        )

    def test_initialize_needs_time_range(self):
        with pytest.raises(InvalidParameterError):
            build(req(Operation.INITIALIZE, channel=1))

    def test_status_query_without_channel(self):
        assert build(req(Operation.STATUS_QUERY)).command == ""

    def test_status_query_with_channel(self):
        plan = build(req(Operation.STATUS_QUERY, channel=3))
        assert plan.command == ":WAV:SOUR CHAN3"


class TestTimebase:
    @pytest.mark.parametrize(
        "reference,expected",
        [
            ("LEFT", ":TIM:REF LEFT; :TIM:POS 0.0001"),
            ("CENT", ":TIM:REF CENT; :TIM:POS 0"),
            ("RIGH", ":TIM:REF RIGH; :TIM:POS -0.0001"),
        ],
    )
    def test_time_reference(self, reference, expected):
        plan = build(req(Operation.SET_TIME_REFERENCE, value=reference))
        assert plan.command == ":TIM:RANG?"
        assert plan.follow_up("+1.00000E-03\n") == expected

    def test_time_reference_rejects_unknown(self):
        with pytest.raises(InvalidParameterError):
            build(req(Operation.SET_TIME_REFERENCE, value="TOP"))

    @pytest.mark.parametrize(
        "reply,expected",
        [("LEFT\n", ":TIM:POS 0.0005"), ("RIGH", ":TIM:POS -0.0005"), ("CENT", ":TIM:POS 0")],
    )
    def test_time_range_uses_requested_range(self, reply, expected):
        plan = build(req(Operation.SET_TIME_RANGE, value="0.005"))
        assert plan.command == ":TIM:RANG 0.005; :SINGLE; :TIM:REF?"
        assert plan.follow_up(reply) == expected

    def test_position_command(self):
        assert time_position_command("left", 2.0) == ":TIM:POS 0.2"


class TestRequests:
    def test_every_operation_has_a_builder(self):
        assert set(BUILDERS) == set(Operation)

    @pytest.mark.parametrize("mode", ["Plot", "AutoS", "statReq", "auto_scale"])
    def test_parse_mode(self, mode):
        assert isinstance(Operation.parse(mode), Operation)

    def test_invalid_mode(self):
        with pytest.raises(InvalidOperationError, match='Invalid mode "Zoom"'):
            Operation.parse("Zoom")

    @pytest.mark.parametrize("channel", [0, 5, -1])
    def test_channel_range(self, channel):
        with pytest.raises(InvalidParameterError):
            req(Operation.PLOT, channel=channel)

    def test_bad_color(self):
        with pytest.raises(InvalidParameterError):
            req(Operation.PLOT, color="red")

    def test_from_query_defaults(self):
        request = CommandRequest.from_query({"mode": "Plot"}, DsoConfig(channel=2))
        assert request.operation is Operation.PLOT
        assert request.channel == 2
        assert (request.width, request.height, request.points) == (800, 600, 500)
        assert request.color == "ff0000"

    def test_from_query_status_keeps_channel_unset(self):
        request = CommandRequest.from_query({"mode": "statReq"})
        assert request.channel is None
        assert request.chan == 1

    def test_from_query_values(self):
        request = CommandRequest.from_query(
            {"mode": "TimRange", "cn": "3", "val": " 0.01 ", "w": "640", "wP": "2000"}
        )
        assert request.channel == 3
        assert request.value == "0.01"
        assert request.width == 640
        assert request.points == 2000

    def test_from_query_bad_integer(self):
        with pytest.raises(InvalidParameterError):
            CommandRequest.from_query({"mode": "Plot", "w": "wide"})

    def test_from_query_without_mode(self):
        with pytest.raises(InvalidOperationError):
            CommandRequest.from_query({"cn": "1"})


class TestReplyNumber:
    def test_value(self):
        assert reply_number("+1.00000E-03\n") == pytest.approx(1e-3)

    @pytest.mark.parametrize("reply", ["", "many", "nan", "+inf", "-INF"])
    def test_not_a_finite_number(self, reply):
        with pytest.raises(ProtocolError, match="Expected a number"):
            reply_number(reply)

    def test_infinite_time_range_in_follow_up(self):
        plan = build(req(Operation.SET_TIME_REFERENCE, value="LEFT"))
        with pytest.raises(ProtocolError):
            plan.follow_up("inf")
