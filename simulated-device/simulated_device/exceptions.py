# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define simulated device exceptions to be shared across package"""


class SimulatedDeviceError(Exception):
    """Base class for failures raised by the simulated device"""

    pass


class ConfigurationError(SimulatedDeviceError):
    """Represents missing or invalid configuration, detected before any network activity"""

    pass


class ProvisioningRejected(SimulatedDeviceError):
    """Represents a terminal registration outcome other than 'assigned'"""

    pass


class TransportError(SimulatedDeviceError):
    """Represents a network or client failure talking to the Provisioning Service or IoT Hub"""

    pass


class SessionError(SimulatedDeviceError):
    """Represents an operation attempted on a HubConnection that is not open"""

    pass
