import pytest
from ttl_queue.meters.frequency_meter import FrequencyMeter
from ttl_queue.storage_backend import DoubleStackBackend


class FakeClock:
    """Manually advanced clock for deterministic tests"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_tick_counts_events_in_window(clock):
    meter = FrequencyMeter(1.0, clock=clock)
    counts = []
    for _ in range(8):
        counts.append(meter.tick())
        clock.advance(0.25)
    # a 1s window holds the current tick plus the four before it
    assert counts == [1, 2, 3, 4, 5, 5, 5, 5]


def test_hundred_hz_for_one_second(clock):
    meter = FrequencyMeter(1.0, clock=clock, backend=DoubleStackBackend())
    for _ in range(100):
        meter.tick()
        clock.advance(0.01)
    assert 95 <= meter.count() <= 105
    assert meter.rate_hz() == pytest.approx(meter.count())
    assert meter.frequency_hz() == pytest.approx(100.0)


def test_count_drops_when_idle(clock):
    meter = FrequencyMeter(0.5, clock=clock)
    meter.tick()
    meter.tick()
    assert meter.count() == 2
    clock.advance(1.0)
    assert meter.count() == 0
    assert meter.rate_hz() == 0.0


def test_mean_interval_and_frequency(clock):
    meter = FrequencyMeter(10.0, clock=clock)
    assert meter.mean_interval() is None
    assert meter.frequency_hz() is None
    meter.tick()
    clock.advance(0.5)
    meter.tick()
    assert meter.mean_interval() == pytest.approx(0.5)
    assert meter.frequency_hz() == pytest.approx(2.0)


def test_frequency_none_for_simultaneous_events(clock):
    meter = FrequencyMeter(1.0, clock=clock)
    meter.tick()
    meter.tick()
    assert meter.mean_interval() == 0.0
    assert meter.frequency_hz() is None


def test_zero_window(clock):
    meter = FrequencyMeter(0.0, clock=clock)
    assert meter.tick() == 1
    assert meter.rate_hz() == 0.0
    clock.advance(0.1)
    assert meter.count() == 0


def test_snapshot(clock):
    meter = FrequencyMeter(2.0, clock=clock)
    for _ in range(4):
        meter.tick()
        clock.advance(0.25)
    snapshot = meter.snapshot()
    assert snapshot["count"] == 4
    assert snapshot["rate_hz"] == pytest.approx(2.0)
    assert snapshot["mean_interval"] == pytest.approx(0.25)
    assert snapshot["frequency_hz"] == pytest.approx(4.0)
    assert snapshot["window"] == 2.0


def test_reset(clock):
    meter = FrequencyMeter(1.0, clock=clock)
    meter.tick()
    meter.reset()
    assert meter.count() == 0


def test_negative_window_rejected():
    with pytest.raises(ValueError):
        FrequencyMeter(-1.0)


def test_window_is_read_only(clock):
    meter = FrequencyMeter(2.0, clock=clock)
    with pytest.raises(AttributeError):
        meter.window = 5.0
    assert meter.window == 2.0
    assert meter._events.ttl == 2.0


def test_non_numeric_window_rejected():
    with pytest.raises(TypeError):
        FrequencyMeter("1")
