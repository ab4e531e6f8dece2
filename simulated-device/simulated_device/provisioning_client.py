# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""
This module contains the client used to register the simulated device with the Device
Provisioning Service. The symmetric key attestation itself is performed by the
Azure IoT Device SDK.
"""
import logging
from typing import Any, Awaitable, TypeVar
from azure.iot.device import exceptions as iot_exceptions
from azure.iot.device.aio import ProvisioningDeviceClient
from . import constant
from .credential import EnrollmentCredential
from .exceptions import ProvisioningRejected, TransportError
from .models import AssignmentResult

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


async def handle_result(coro: Awaitable[_T]) -> _T:
    try:
        return await coro
    except iot_exceptions.ServiceError as e:
        raise ProvisioningRejected("Provisioning Service rejected the registration") from e
    except iot_exceptions.CredentialError as e:
        raise TransportError("Credentials invalid, could not connect") from e
    except iot_exceptions.ConnectionFailedError as e:
        raise TransportError("Could not connect to Provisioning Service") from e
    except iot_exceptions.ConnectionDroppedError as e:
        raise TransportError("Lost connection to Provisioning Service") from e
    except iot_exceptions.ClientError as e:
        if _caused_by_service_error(e):
            raise ProvisioningRejected("Provisioning Service rejected the registration") from e
        raise TransportError("Error in the Provisioning client") from e
    except (iot_exceptions.OperationTimeout, iot_exceptions.OperationCancelled) as e:
        raise TransportError("Could not complete registration") from e


class ProvisioningClient(object):
    """
    Registers a device with the Device Provisioning Service using a symmetric key enrollment.
    No state is retained between registrations.
    """

    def __init__(
        self, provisioning_host: str = constant.PROVISIONING_GLOBAL_ENDPOINT, **client_options: Any
    ) -> None:
        """
        :param str provisioning_host: The provisioning endpoint you wish to provision with.
            If not provided, defaults to 'global.azure-devices-provisioning.net'

        Additional keyword arguments (e.g. 'websockets', 'keep_alive', 'proxy_options') are
        passed through to the Azure IoT Device SDK client factory.
        """
        self.provisioning_host = provisioning_host
        self._client_options = client_options

    async def register(self, credential: EnrollmentCredential) -> AssignmentResult:
        """Register the device described by the credential.

        :returns: AssignmentResult with status 'assigned' and a non-empty hub and device id
        :rtype: :class:`simulated_device.AssignmentResult`

        :raises: ProvisioningRejected if the registration ended in any status other than
            'assigned', or the service reported a failure
        :raises: TransportError if the Provisioning Service could not be reached
        """
        logger.debug(
            "Creating ProvisioningDeviceClient for {} (host: {})".format(
                credential.registration_id, self.provisioning_host
            )
        )
        try:
            provisioning_device_client = ProvisioningDeviceClient.create_from_symmetric_key(
                provisioning_host=self.provisioning_host,
                registration_id=credential.registration_id,
                id_scope=credential.id_scope,
                symmetric_key=credential.primary_key,
                **self._client_options
            )
        except (ValueError, TypeError) as e:
            raise TransportError("Could not create Provisioning client") from e

        registration_result = await handle_result(provisioning_device_client.register())

        result = _to_assignment_result(registration_result)
        logger.info("Device Registration Status: {}".format(result.status))
        logger.info(
            "ProvisioningClient AssignedHub: {}; DeviceID: {}".format(
                result.assigned_hub, result.device_id
            )
        )

        if not result.is_assigned:
            raise ProvisioningRejected(
                "Registration status is not 'assigned': {}".format(result.status)
            )
        if not (result.assigned_hub and result.device_id):
            raise ProvisioningRejected("Registration was assigned without a hub or device id")
        return result


def _to_assignment_result(registration_result) -> AssignmentResult:
    if registration_result is None:
        raise ProvisioningRejected("Provisioning Service returned no registration result")
    registration_state = registration_result.registration_state
    if registration_state is None:
        return AssignmentResult(status=registration_result.status)
    return AssignmentResult(
        status=registration_result.status,
        assigned_hub=registration_state.assigned_hub,
        device_id=registration_state.device_id,
        sub_status=registration_state.sub_status,
    )


def _caused_by_service_error(e: BaseException) -> bool:
    cause = e.__cause__
    while cause is not None:
        if isinstance(cause, iot_exceptions.ServiceError):
            return True
        cause = cause.__cause__
    return False
