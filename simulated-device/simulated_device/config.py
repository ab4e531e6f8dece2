# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import os
from typing import Any, Dict, Mapping, Optional
from azure.iot.device import ProxyOptions
from . import constant
from .credential import EnrollmentCredential
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# The max keep alive is determined by the load balancer currently.
MAX_KEEP_ALIVE_SECS = 1740

# Environment variable names, matching the Azure IoT Device SDK samples where they overlap
ENV_PROVISIONING_HOST = "PROVISIONING_HOST"
ENV_ID_SCOPE = "PROVISIONING_IDSCOPE"
ENV_REGISTRATION_ID = "PROVISIONING_REGISTRATION_ID"
ENV_PRIMARY_KEY = "PROVISIONING_SYMMETRIC_KEY"
ENV_SECONDARY_KEY = "PROVISIONING_SECONDARY_SYMMETRIC_KEY"
ENV_GROUP_PRIMARY_KEY = "PROVISIONING_GROUP_SYMMETRIC_KEY"
ENV_GROUP_SECONDARY_KEY = "PROVISIONING_GROUP_SECONDARY_SYMMETRIC_KEY"
ENV_TELEMETRY_INTERVAL = "TELEMETRY_INTERVAL"
ENV_PROXY_TYPE = "PROXY_TYPE"
ENV_PROXY_ADDRESS = "PROXY_ADDRESS"
ENV_PROXY_PORT = "PROXY_PORT"


class AgentConfig:
    """
    Class for storing all configurations/options of a simulated device run.
    Constructed once at startup and handed to the components that need it.
    """

    def __init__(
        self,
        *,
        id_scope: Optional[str] = None,
        registration_id: Optional[str] = None,
        primary_key: Optional[str] = None,
        secondary_key: Optional[str] = None,
        group_primary_key: Optional[str] = None,
        group_secondary_key: Optional[str] = None,
        provisioning_host: str = constant.PROVISIONING_GLOBAL_ENDPOINT,
        telemetry_interval: float = constant.DEFAULT_TELEMETRY_INTERVAL,
        websockets: bool = False,
        keep_alive: int = 60,
        proxy_options: Optional[ProxyOptions] = None,
    ) -> None:
        """Initializer for AgentConfig

        :param str id_scope: The ID scope of the Provisioning Service instance
        :param str registration_id: The device registration identity being provisioned
        :param str primary_key: Individual enrollment primary key
        :param str secondary_key: Individual enrollment secondary key
        :param str group_primary_key: Group enrollment primary key. Used to derive the device
            keys when individual enrollment keys are not provided.
        :param str group_secondary_key: Group enrollment secondary key
        :param str provisioning_host: The provisioning endpoint. Defaults to
            'global.azure-devices-provisioning.net'
        :param float telemetry_interval: Seconds to wait between telemetry messages
        :param bool websockets: Enabling/disabling websockets in MQTT. This feature is relevant
            if a firewall blocks port 8883 from use.
        :param int keep_alive: Maximum period in seconds between MQTT communications
        :param proxy_options: Details of proxy configuration
        :type proxy_options: :class:`azure.iot.device.ProxyOptions`

        :raises: ConfigurationError if the interval or keep alive are invalid
        """
        # Identity
        self.id_scope = id_scope
        self.registration_id = registration_id
        self.primary_key = primary_key
        self.secondary_key = secondary_key
        self.group_primary_key = group_primary_key
        self.group_secondary_key = group_secondary_key

        # Network
        self.provisioning_host = provisioning_host or constant.PROVISIONING_GLOBAL_ENDPOINT
        self.websockets = websockets
        self.keep_alive = _sanitize_keep_alive(keep_alive)
        self.proxy_options = proxy_options

        # Telemetry
        self.telemetry_interval = _sanitize_interval(telemetry_interval)

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "AgentConfig":
        """Build a config from environment variables.

        Keyword overrides replace environment values, unless they are None.

        :raises: ConfigurationError if a value is malformed
        """
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {
            "id_scope": environ.get(ENV_ID_SCOPE),
            "registration_id": environ.get(ENV_REGISTRATION_ID),
            "primary_key": environ.get(ENV_PRIMARY_KEY),
            "secondary_key": environ.get(ENV_SECONDARY_KEY),
            "group_primary_key": environ.get(ENV_GROUP_PRIMARY_KEY),
            "group_secondary_key": environ.get(ENV_GROUP_SECONDARY_KEY),
        }
        if environ.get(ENV_PROVISIONING_HOST):
            values["provisioning_host"] = environ[ENV_PROVISIONING_HOST]
        if environ.get(ENV_TELEMETRY_INTERVAL):
            values["telemetry_interval"] = environ[ENV_TELEMETRY_INTERVAL]
        if environ.get(ENV_PROXY_ADDRESS):
            values["proxy_options"] = _proxy_options_from_environment(environ)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def create_credential(self) -> EnrollmentCredential:
        """Build the enrollment credential described by this config.

        Individual enrollment keys take precedence. If neither is set, device keys are derived
        from the group enrollment keys.

        :raises: ConfigurationError if required values are missing or invalid
        """
        if not _is_blank(self.primary_key) or not _is_blank(self.secondary_key):
            logger.debug("Using individual enrollment keys")
            return EnrollmentCredential(
                registration_id=self.registration_id,
                primary_key=self.primary_key,
                secondary_key=self.secondary_key,
                id_scope=self.id_scope,
            )
        elif not _is_blank(self.group_primary_key):
            logger.debug("Deriving device keys from group enrollment keys")
            return EnrollmentCredential.from_group_keys(
                registration_id=self.registration_id,
                group_primary_key=self.group_primary_key,
                # Secondary group key is optional
                group_secondary_key=self.group_secondary_key or self.group_primary_key,
                id_scope=self.id_scope,
            )
        else:
            raise ConfigurationError(
                "Invalid configuration provided, must provide individual enrollment keys"
            )

    def client_options(self) -> Dict[str, Any]:
        """Return the keyword options forwarded to Azure IoT Device SDK client factories"""
        options: Dict[str, Any] = {
            "websockets": self.websockets,
            "keep_alive": self.keep_alive,
        }
        if self.proxy_options is not None:
            options["proxy_options"] = self.proxy_options
        return options


# Sanitization #


def _is_blank(value: Optional[str]) -> bool:
    return not (value and value.strip())


def _sanitize_interval(interval):
    try:
        interval = float(interval)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(
            "Invalid type for 'telemetry interval'. Must be a numeric value."
        ) from e

    if interval <= 0:
        raise ConfigurationError("'telemetry interval' must be greater than 0")

    return interval


def _sanitize_keep_alive(keep_alive):
    try:
        keep_alive = int(keep_alive)
    except (ValueError, TypeError) as e:
        raise ConfigurationError("Invalid type for 'keep alive'. Must be a numeric value.") from e

    if keep_alive <= 0:
        # Not allowing a keep alive of 0 as this would mean frequent ping exchanges.
        raise ConfigurationError("'keep alive' must be greater than 0")

    if keep_alive > MAX_KEEP_ALIVE_SECS:
        raise ConfigurationError("'keep_alive' cannot exceed 1740 seconds (29 minutes)")

    return keep_alive


def _proxy_options_from_environment(environ):
    proxy_type = environ.get(ENV_PROXY_TYPE) or "HTTP"
    proxy_port = environ.get(ENV_PROXY_PORT) or _derive_default_proxy_port(proxy_type)
    try:
        return ProxyOptions(proxy_type, environ[ENV_PROXY_ADDRESS], int(proxy_port))
    except (ValueError, TypeError) as e:
        raise ConfigurationError("Invalid proxy configuration") from e


def _derive_default_proxy_port(proxy_type):
    if proxy_type == "HTTP":
        return 8080
    else:
        return 1080
