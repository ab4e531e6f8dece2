# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the synthetic telemetry source and the loop that sends it.
"""
import asyncio
import datetime
import logging
import random
import uuid
from typing import Iterator, Optional
from azure.iot.device import Message
from . import constant
from .hub_connection import HubConnection
from .models import TelemetrySample

logger = logging.getLogger(__name__)


class TelemetryGenerator(object):
    """Produces an unbounded sequence of simulated sensor readings.

    Each field is its fixed baseline plus an independent uniform offset.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def next_sample(self) -> TelemetrySample:
        values = {
            name: baseline + self._rng.random() * jitter
            for name, baseline, jitter in constant.TELEMETRY_BASELINES
        }
        return TelemetrySample(**values)

    def __iter__(self) -> Iterator[TelemetrySample]:
        while True:
            yield self.next_sample()


def create_message(sample: TelemetrySample) -> Message:
    """Build the IoT Hub message for a sample.

    The body is the JSON-serialized reading. The 'temperatureAlert' application property
    carries "true" or "false" so an IoT Hub route can filter without reading the body.
    """
    msg = Message(sample.to_json().encode("ascii"))
    msg.message_id = str(uuid.uuid4())
    msg.content_encoding = "utf-8"
    msg.content_type = "application/json"
    msg.custom_properties[constant.TEMPERATURE_ALERT_PROPERTY] = (
        "true" if sample.temperature_alert else "false"
    )
    return msg


async def send_telemetry(
    hub: HubConnection,
    generator: Optional[TelemetryGenerator] = None,
    interval: float = constant.DEFAULT_TELEMETRY_INTERVAL,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Send a reading every `interval` seconds until stopped.

    Returns only once `stop_event` is set (or the task running it is cancelled). Nothing is
    sent after the stop is observed. Send failures are not retried and propagate.

    :param hub: An open HubConnection
    :param generator: Source of readings. A new TelemetryGenerator is used if not provided.
    :param float interval: Seconds to wait between messages
    :param stop_event: Event that ends the loop when set
    """
    if generator is None:
        generator = TelemetryGenerator()
    if stop_event is None:
        stop_event = asyncio.Event()

    for sample in generator:
        if stop_event.is_set():
            break

        message = create_message(sample)
        await hub.send(message)
        logger.info(
            "{} > Sending message: {}".format(datetime.datetime.now(), message.data.decode("ascii"))
        )

        if await _wait_for_stop(stop_event, interval):
            break

    logger.info("Telemetry stopped")


async def _wait_for_stop(stop_event: asyncio.Event, timeout: float) -> bool:
    """Wait up to `timeout` seconds. Return True if the stop event was set."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True
