# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
from simulated_device.config import AgentConfig
from simulated_device.credential import EnrollmentCredential

FAKE_REGISTRATION_ID = "dev1"
FAKE_ID_SCOPE = "0ne00000000"
FAKE_PRIMARY_KEY = "Zm9vYmFy"
FAKE_SECONDARY_KEY = "YmFyYmF6"

"""
NOTE: Tests that need a non-specific, arbitrary exception should use one of the following
fixtures. A subclass of Exception or BaseException that is not defined anywhere else is
guaranteed to be unexpected and unhandled except by broad all-encompassing handling.
"""


@pytest.fixture
def unexpected_exception():
    class UnexpectedException(Exception):
        pass

    e = UnexpectedException()
    return e


@pytest.fixture
def unexpected_base_exception():
    class UnexpectedBaseException(BaseException):
        pass

    return UnexpectedBaseException()


@pytest.fixture
def credential():
    return EnrollmentCredential(
        registration_id=FAKE_REGISTRATION_ID,
        primary_key=FAKE_PRIMARY_KEY,
        secondary_key=FAKE_SECONDARY_KEY,
        id_scope=FAKE_ID_SCOPE,
    )


@pytest.fixture
def agent_config():
    return AgentConfig(
        id_scope=FAKE_ID_SCOPE,
        registration_id=FAKE_REGISTRATION_ID,
        primary_key=FAKE_PRIMARY_KEY,
        secondary_key=FAKE_SECONDARY_KEY,
        telemetry_interval=0.01,
    )
