# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the data passed between the provisioning and telemetry stages.
"""
import json
from enum import Enum
from . import constant
from .exceptions import ProvisioningRejected


class RegistrationStatus(Enum):
    UNASSIGNED = "unassigned"
    ASSIGNING = "assigning"
    ASSIGNED = "assigned"
    FAILED = "failed"
    DISABLED = "disabled"

    @classmethod
    def parse(cls, value):
        """Return the member for a status string reported by the Provisioning Service.

        :raises: ProvisioningRejected if the status is not recognized
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ProvisioningRejected("Unrecognized registration status: {}".format(value))

    def __str__(self):
        return self.value


class AssignmentResult(object):
    """
    The outcome of a registration with the Provisioning Service.

    :ivar status: The terminal registration status
    :ivar assigned_hub: Hostname of the IoT Hub the device was assigned to
    :ivar device_id: Device identity on the assigned IoT Hub
    :ivar sub_status: Substatus for 'assigned' devices, e.g. "initialAssignment"
    """

    def __init__(self, status, assigned_hub=None, device_id=None, sub_status=None):
        self._status = RegistrationStatus.parse(status)
        self._assigned_hub = assigned_hub
        self._device_id = device_id
        self._sub_status = sub_status

    @property
    def status(self):
        return self._status

    @property
    def assigned_hub(self):
        return self._assigned_hub

    @property
    def device_id(self):
        return self._device_id

    @property
    def sub_status(self):
        return self._sub_status

    @property
    def is_assigned(self):
        return self._status is RegistrationStatus.ASSIGNED

    def __repr__(self):
        return "{}(status={}, assigned_hub={!r}, device_id={!r})".format(
            type(self).__name__, self._status, self._assigned_hub, self._device_id
        )


class TelemetrySample(object):
    """A single synthetic sensor reading"""

    def __init__(self, temperature, humidity, pressure, latitude, longitude):
        self.temperature = temperature
        self.humidity = humidity
        self.pressure = pressure
        self.latitude = latitude
        self.longitude = longitude

    @property
    def temperature_alert(self):
        return self.temperature > constant.TEMPERATURE_ALERT_THRESHOLD

    def as_dict(self):
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    def to_json(self):
        return json.dumps(self.as_dict())

    def __repr__(self):
        return "{}({})".format(type(self).__name__, self.to_json())
