import dsoplot.util
from dsoplot.device import DSO6000, MockDSO
from dsoplot.plot import emit_plot
from dsoplot.plot.mpl import save_plot
from dsoplot.types import CommandRequest, DsoConfig, Operation

CHANNEL = 2
POINTS = 1000

dsoplot.util.start_log(log_to_stdout=True, log_level="INFO")

config = DsoConfig()
# swap MockDSO() for None and "mock" for the instrument address to use hardware
dso = DSO6000("mock", config=config, transport=MockDSO(config))
dso.open()

dso.execute(CommandRequest(operation=Operation.INITIALIZE, channel=CHANNEL, time_range="0.002"))
dso.execute(CommandRequest(operation=Operation.SET_COUPLING, channel=CHANNEL, value="AC"))
print(dso.status().to_dict())

reply = dso.fetch_waveform(channel=CHANNEL, points=POINTS)
desc = emit_plot(reply, CHANNEL, "ff0000", config.plot_width, config.plot_height)
print(desc.script)
print(save_plot(desc, "mock_waveform.png"))

dsoplot.util.shutdown_log()
