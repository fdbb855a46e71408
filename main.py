import os
import asyncio
import logging
import math
import time
from ttl_queue.meters.frequency_meter import FrequencyMeter
from ttl_queue.storage_backend import backend_from_name

#logging.getLogger("TtlQueue").setLevel(logging.DEBUG)


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
        assert math.isfinite(value) and value >= 0
    except Exception:
        logger.error(f"Cannot convert {name}={raw} to a valid finite non-negative number")
        exit(1)
    return value


# FPS counter setup, in seconds
FPS_WINDOW      = _read_float("FPS_WINDOW", "1.0")
TARGET_HZ       = _read_float("TARGET_HZ", "100")
RUN_SECONDS     = _read_float("RUN_SECONDS", "5")
REPORT_INTERVAL = _read_float("REPORT_INTERVAL", "1.0")
QUEUE_BACKEND_NAME = os.getenv("QUEUE_BACKEND", "DEQUE")

if TARGET_HZ == 0:
    logger.error("TARGET_HZ must be greater than zero")
    exit(1)

QUEUE_BACKEND = backend_from_name(QUEUE_BACKEND_NAME)

logger.info(f"""
----------------------------------------------
FPS counter started:
fps_window      : {FPS_WINDOW}
target_hz       : {TARGET_HZ}
run_seconds     : {RUN_SECONDS or 'until interrupted'}
report_interval : {REPORT_INTERVAL}
queue_backend   : {QUEUE_BACKEND.__class__.__name__}
----------------------------------------------
""")


async def frame_task(meter: FrequencyMeter) -> None:
    """Simulates a frame source ticking at TARGET_HZ"""
    period = 1.0 / TARGET_HZ
    while True:
        start = time.monotonic()
        meter.tick()
        end = time.monotonic()
        await asyncio.sleep(max(0, period - (end - start))) # already spent some time


async def report_task(meter: FrequencyMeter) -> None:
    while True:
        await asyncio.sleep(REPORT_INTERVAL)
        snapshot = meter.snapshot()
        frequency = snapshot["frequency_hz"]
        logger.info(
            f"fps={snapshot['count']} in last {snapshot['window']}s, "
            f"rate={snapshot['rate_hz']:.1f}Hz, "
            f"frequency={'n/a' if frequency is None else f'{frequency:.1f}Hz'}"
        )


async def main():
    meter = FrequencyMeter(FPS_WINDOW, backend=QUEUE_BACKEND)
    tasks: list[asyncio.Task] = []

    try:
        tasks.append(asyncio.create_task(frame_task(meter)))
        if REPORT_INTERVAL > 0:
            tasks.append(asyncio.create_task(report_task(meter)))

        if RUN_SECONDS > 0:
            await asyncio.sleep(RUN_SECONDS)
        else:
            await asyncio.Event().wait()

        logger.info(f"Final count: {meter.count()} frames in the last {FPS_WINDOW}s")

    except asyncio.CancelledError:
        logger.info("Shutdown signal received...")
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted")
