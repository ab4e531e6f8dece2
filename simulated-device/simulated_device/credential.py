# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the symmetric key enrollment credential used to provision a device.
"""
import base64
import binascii
import hashlib
import hmac
from .exceptions import ConfigurationError


class EnrollmentCredential(object):
    """Symmetric key material for an individual enrollment, plus the ID scope of the
    Provisioning Service instance it is enrolled with.

    Keys are stored as base64 text, which is the form the Azure IoT SDK consumes.

    :ivar registration_id: The registration identity of the device
    :ivar primary_key: The primary symmetric key (base64)
    :ivar secondary_key: The secondary symmetric key (base64)
    :ivar id_scope: The ID scope of the Provisioning Service instance
    """

    def __init__(self, registration_id, primary_key, secondary_key, id_scope):
        """
        :param str registration_id: The registration identity of the device
        :param str primary_key: The primary symmetric key (base64)
        :param str secondary_key: The secondary symmetric key (base64)
        :param str id_scope: The ID scope of the Provisioning Service instance

        :raises: ConfigurationError if any value is missing or blank, or a key is not base64
        """
        self._registration_id = _validate_required("registration_id", registration_id)
        self._primary_key = _validate_key("primary_key", primary_key)
        self._secondary_key = _validate_key("secondary_key", secondary_key)
        self._id_scope = _validate_required("id_scope", id_scope)

    @classmethod
    def from_group_keys(cls, registration_id, group_primary_key, group_secondary_key, id_scope):
        """Create a credential for a device enrolled through a group enrollment.

        The device keys are derived from the group keys with :func:`derive_device_key`.
        """
        registration_id = _validate_required("registration_id", registration_id)
        group_primary_key = _validate_key("group_primary_key", group_primary_key)
        group_secondary_key = _validate_key("group_secondary_key", group_secondary_key)
        return cls(
            registration_id=registration_id,
            primary_key=derive_device_key(registration_id, group_primary_key),
            secondary_key=derive_device_key(registration_id, group_secondary_key),
            id_scope=id_scope,
        )

    @property
    def registration_id(self):
        return self._registration_id

    @property
    def primary_key(self):
        return self._primary_key

    @property
    def secondary_key(self):
        return self._secondary_key

    @property
    def id_scope(self):
        return self._id_scope

    @property
    def primary_key_bytes(self):
        return base64.b64decode(self._primary_key)

    def __repr__(self):
        # Never include key material
        return "{}(registration_id={!r}, id_scope={!r})".format(
            type(self).__name__, self._registration_id, self._id_scope
        )


def derive_device_key(registration_id, group_key):
    """
    The registration ID and the group key are encoded into "utf-8".
    The decoded group key is used to compute an HMAC-SHA256 of the encoded registration ID,
    and the digest is converted into Base64 format.

    :param str registration_id: The registration identity of the device
    :param str group_key: The base64 symmetric key of the group enrollment
    :returns: The device key, as base64 text
    :rtype: str
    """
    message = registration_id.encode("utf-8")
    signing_key = base64.b64decode(group_key.encode("utf-8"))
    signed_hmac = hmac.HMAC(signing_key, message, hashlib.sha256)
    device_key_encoded = base64.b64encode(signed_hmac.digest())
    return device_key_encoded.decode("utf-8")


def _validate_required(name, value):
    if not (value and value.strip()):
        raise ConfigurationError("'{}' can not be none, empty or blank".format(name))
    return value


def _validate_key(name, value):
    _validate_required(name, value)
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError("'{}' is not a valid base64 symmetric key".format(name)) from e
    return value
