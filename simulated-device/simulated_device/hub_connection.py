# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import asyncio
import functools
import logging
from typing import Any, Awaitable, Optional, Type, TypeVar
from types import TracebackType
from azure.iot.device import Message
from azure.iot.device import exceptions as iot_exceptions
from azure.iot.device.aio import IoTHubDeviceClient
from .exceptions import SessionError, TransportError

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


async def handle_result(coro: Awaitable[_T]) -> _T:
    try:
        return await coro
    except iot_exceptions.CredentialError as e:
        raise TransportError("Credentials invalid, could not connect") from e
    except iot_exceptions.ConnectionFailedError as e:
        raise TransportError("Could not connect to IoTHub") from e
    except iot_exceptions.ConnectionDroppedError as e:
        raise TransportError("Lost connection to IoTHub") from e
    except iot_exceptions.NoConnectionError as e:
        raise TransportError("Not connected to IoTHub") from e
    except iot_exceptions.ClientError as e:
        raise TransportError("Error in the IoTHub client") from e
    except (iot_exceptions.OperationTimeout, iot_exceptions.OperationCancelled) as e:
        raise TransportError("Could not complete operation") from e


def _requires_connection(f):
    """Decorator to indicate a method requires the HubConnection to already be open."""

    @functools.wraps(f)
    def check_connection_wrapper(*args, **kwargs):
        this = args[0]  # a.k.a. self
        if not this.is_open:
            raise SessionError("HubConnection not open")
        else:
            return f(*args, **kwargs)

    return check_connection_wrapper


class HubConnection:
    """An authenticated connection to the IoT Hub a device was assigned to.

    Use as an async context manager so the connection is released on every exit path:

        async with HubConnection(hostname=..., device_id=..., symmetric_key=...) as hub:
            await hub.send(message)
    """

    def __init__(
        self, *, hostname: str, device_id: str, symmetric_key: str, **client_options: Any
    ) -> None:
        """
        :param str hostname: Hostname of the IoT Hub the device should connect to
        :param str device_id: The device identity on the IoT Hub
        :param str symmetric_key: The symmetric key bound to the device identity

        Additional keyword arguments (e.g. 'websockets', 'keep_alive', 'proxy_options') are
        passed through to the Azure IoT Device SDK client factory.

        :raises: ValueError if the hostname or device id are missing
        """
        if not hostname:
            raise ValueError("HubConnection requires a hostname")
        if not device_id:
            raise ValueError("HubConnection requires a device id")
        self.hostname = hostname
        self.device_id = device_id
        self._symmetric_key = symmetric_key
        self._client_options = client_options
        self._device_client: Optional[IoTHubDeviceClient] = None

    @property
    def is_open(self) -> bool:
        return self._device_client is not None

    @property
    def connected(self) -> bool:
        """Whether the underlying client currently has a live connection"""
        return self._device_client is not None and self._device_client.connected

    async def open(self) -> None:
        """Connect to the IoT Hub.

        :raises: TransportError if connecting fails
        """
        if self._device_client is not None:
            logger.debug("HubConnection already open")
            return

        logger.debug("Creating Symmetric Key DeviceClient for {}".format(self.device_id))
        try:
            device_client = IoTHubDeviceClient.create_from_symmetric_key(
                symmetric_key=self._symmetric_key,
                hostname=self.hostname,
                device_id=self.device_id,
                **self._client_options
            )
        except (ValueError, TypeError) as e:
            raise TransportError("Could not create IoTHub client") from e

        try:
            await handle_result(device_client.connect())
        except (Exception, asyncio.CancelledError):
            # Release the client if something goes wrong
            await device_client.shutdown()
            raise
        self._device_client = device_client
        logger.info("HubConnection open to {}".format(self.hostname))

    @_requires_connection
    async def send(self, message: Message) -> None:
        """Send a telemetry message to the IoT Hub.

        Returns once the message is sent. There is no further acknowledgement.

        :raises: SessionError if the HubConnection is not open
        :raises: TransportError if sending fails
        """
        await handle_result(self._device_client.send_message(message))

    async def close(self) -> None:
        """Disconnect from the IoT Hub and release the underlying client. Safe to call twice."""
        device_client = self._device_client
        if device_client is None:
            return
        self._device_client = None
        logger.debug("Shutting down DeviceClient")
        await device_client.shutdown()
        logger.info("HubConnection closed")

    async def __aenter__(self) -> "HubConnection":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()
