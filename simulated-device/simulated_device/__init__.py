# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Simulated IoT Device

This package provisions a device with the Azure IoT Device Provisioning Service using a
symmetric key enrollment, then streams synthetic telemetry to the assigned IoT Hub.
"""

from .constant import VERSION
from .config import AgentConfig
from .credential import EnrollmentCredential, derive_device_key
from .models import RegistrationStatus, AssignmentResult, TelemetrySample
from .provisioning_client import ProvisioningClient
from .hub_connection import HubConnection
from .telemetry import TelemetryGenerator, create_message, send_telemetry
from .agent import DeviceAgent
from .exceptions import (
    SimulatedDeviceError,
    ConfigurationError,
    ProvisioningRejected,
    TransportError,
    SessionError,
)

__version__ = VERSION

__all__ = [
    "AgentConfig",
    "EnrollmentCredential",
    "derive_device_key",
    "RegistrationStatus",
    "AssignmentResult",
    "TelemetrySample",
    "ProvisioningClient",
    "HubConnection",
    "TelemetryGenerator",
    "create_message",
    "send_telemetry",
    "DeviceAgent",
    "SimulatedDeviceError",
    "ConfigurationError",
    "ProvisioningRejected",
    "TransportError",
    "SessionError",
]
