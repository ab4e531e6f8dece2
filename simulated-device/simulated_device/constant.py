# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the simulated_device package
"""

VERSION = "1.0.0"
PROVISIONING_GLOBAL_ENDPOINT = "global.azure-devices-provisioning.net"

# Seconds between telemetry messages
DEFAULT_TELEMETRY_INTERVAL = 1

TEMPERATURE_ALERT_THRESHOLD = 30.0
TEMPERATURE_ALERT_PROPERTY = "temperatureAlert"

# Telemetry field -> (baseline, jitter). Values are drawn uniformly from
# [baseline, baseline + jitter). Order is the order of the serialized body.
TELEMETRY_BASELINES = (
    ("temperature", 20.0, 15.0),
    ("humidity", 60.0, 20.0),
    ("pressure", 1013.25, 12.0),
    ("latitude", 39.810492, 0.5),
    ("longitude", -98.556061, 0.5),
)
