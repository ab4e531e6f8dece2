# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the DeviceAgent, which runs the provision -> connect -> send lifecycle.
"""
import asyncio
import logging
from typing import Callable, Optional
from .config import AgentConfig
from .credential import EnrollmentCredential
from .exceptions import ProvisioningRejected
from .hub_connection import HubConnection
from .provisioning_client import ProvisioningClient
from .telemetry import TelemetryGenerator, send_telemetry

logger = logging.getLogger(__name__)


class DeviceAgent(object):
    """
    Provisions a device, connects it to its assigned IoT Hub, and streams telemetry.

    The agent owns the HubConnection for the duration of :meth:`run`. The connection is
    closed however the run ends, including cancellation.
    """

    def __init__(
        self,
        credential: EnrollmentCredential,
        config: AgentConfig,
        provisioning_client: Optional[ProvisioningClient] = None,
        hub_connection_factory: Optional[Callable[..., HubConnection]] = None,
        generator: Optional[TelemetryGenerator] = None,
    ) -> None:
        """
        :param credential: The enrollment credential to provision with
        :param config: The run configuration
        :param provisioning_client: Client used to register. Built from `config` if not provided.
        :param hub_connection_factory: Callable accepting `hostname`, `device_id`,
            `symmetric_key` and client options, returning a HubConnection.
            Defaults to :class:`HubConnection`.
        :param generator: Source of telemetry readings
        """
        self._credential = credential
        self._config = config
        if provisioning_client is None:
            provisioning_client = ProvisioningClient(
                provisioning_host=config.provisioning_host, **config.client_options()
            )
        self._provisioning_client = provisioning_client
        self._hub_connection_factory = hub_connection_factory or HubConnection
        self._generator = generator or TelemetryGenerator()

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Run the device until `stop_event` is set or the task is cancelled.

        :raises: ProvisioningRejected if the device is not assigned to an IoT Hub
        :raises: TransportError if the Provisioning Service or IoT Hub cannot be reached, or a
            send fails
        """
        logger.info("RegistrationID = {}".format(self._credential.registration_id))

        logger.info("ProvisioningClient RegisterAsync . . .")
        result = await self._provisioning_client.register(self._credential)

        # Never connect with an identity from an unassigned registration
        if not result.is_assigned:
            raise ProvisioningRejected(
                "Registration status is not 'assigned': {}".format(result.status)
            )

        logger.info("Creating Symmetric Key DeviceClient authentication")
        hub = self._hub_connection_factory(
            hostname=result.assigned_hub,
            device_id=result.device_id,
            symmetric_key=self._credential.primary_key,
            **self._config.client_options()
        )

        logger.info("Simulated Device. Ctrl-C to exit.")
        logger.info("DeviceClient OpenAsync.")
        async with hub:
            logger.info("Start reading and sending device telemetry...")
            await send_telemetry(
                hub,
                generator=self._generator,
                interval=self._config.telemetry_interval,
                stop_event=stop_event,
            )
