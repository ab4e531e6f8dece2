# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import pytest
from azure.iot.device import exceptions as iot_exceptions
from simulated_device import constant
from simulated_device import provisioning_client as pc
from simulated_device.models import AssignmentResult, RegistrationStatus
from simulated_device.exceptions import ProvisioningRejected, TransportError

FAKE_REGISTRATION_ID = "dev1"
FAKE_ID_SCOPE = "0ne00000000"
FAKE_PRIMARY_KEY = "Zm9vYmFy"
FAKE_HOSTNAME = "fake.azure-devices-provisioning.net"
FAKE_HUB = "myhub.example.net"
FAKE_DEVICE_ID = "dev1"

# ~~~~~ Helpers ~~~~~~


def create_registration_result(mocker, status, assigned_hub=FAKE_HUB, device_id=FAKE_DEVICE_ID):
    """Mimic the RegistrationResult returned by the Azure IoT Device SDK"""
    result = mocker.MagicMock()
    result.status = status
    result.registration_state.assigned_hub = assigned_hub
    result.registration_state.device_id = device_id
    result.registration_state.sub_status = "initialAssignment"
    return result


def service_failure():
    # The SDK reports a 'failed' registration as a ClientError caused by a ServiceError
    e = iot_exceptions.ClientError("Unexpected failure")
    e.__cause__ = iot_exceptions.ServiceError("failed registration status")
    return e


# ~~~~~ Fixtures ~~~~~~

# Mock out the underlying client in order to not do network operations
@pytest.fixture(autouse=True)
def mock_client_cls(mocker):
    mock_cls = mocker.patch.object(pc, "ProvisioningDeviceClient")
    mock_client = mock_cls.create_from_symmetric_key.return_value
    mock_client.register = mocker.AsyncMock(
        return_value=create_registration_result(mocker, "assigned")
    )
    return mock_cls


@pytest.fixture
def mock_client(mock_client_cls):
    return mock_client_cls.create_from_symmetric_key.return_value


@pytest.fixture
def client():
    return pc.ProvisioningClient(provisioning_host=FAKE_HOSTNAME)


@pytest.mark.describe("ProvisioningClient -- Instantiation")
class TestProvisioningClientInstantiation:
    @pytest.mark.it("Uses the Global Provisioning Endpoint if no `provisioning_host` is provided")
    def test_default_host(self):
        client = pc.ProvisioningClient()
        assert client.provisioning_host == constant.PROVISIONING_GLOBAL_ENDPOINT

    @pytest.mark.it("Uses the provided `provisioning_host`")
    def test_custom_host(self):
        client = pc.ProvisioningClient(provisioning_host=FAKE_HOSTNAME)
        assert client.provisioning_host == FAKE_HOSTNAME


@pytest.mark.describe("ProvisioningClient - .register()")
class TestProvisioningClientRegister:
    @pytest.mark.it(
        "Creates a symmetric key ProvisioningDeviceClient from the credential's registration id, id scope and primary key"
    )
    async def test_creates_client(self, mocker, client, credential, mock_client_cls):
        await client.register(credential)

        assert mock_client_cls.create_from_symmetric_key.call_count == 1
        assert mock_client_cls.create_from_symmetric_key.call_args == mocker.call(
            provisioning_host=FAKE_HOSTNAME,
            registration_id=FAKE_REGISTRATION_ID,
            id_scope=FAKE_ID_SCOPE,
            symmetric_key=FAKE_PRIMARY_KEY,
        )

    @pytest.mark.it("Passes additional client options to the ProvisioningDeviceClient factory")
    async def test_client_options(self, credential, mock_client_cls):
        client = pc.ProvisioningClient(
            provisioning_host=FAKE_HOSTNAME, websockets=True, keep_alive=34
        )
        await client.register(credential)

        kwargs = mock_client_cls.create_from_symmetric_key.call_args[1]
        assert kwargs["websockets"] is True
        assert kwargs["keep_alive"] == 34

    @pytest.mark.it("Creates a new ProvisioningDeviceClient for each registration")
    async def test_no_state(self, client, credential, mock_client_cls):
        await client.register(credential)
        await client.register(credential)
        assert mock_client_cls.create_from_symmetric_key.call_count == 2

    @pytest.mark.it(
        "Returns an AssignmentResult containing the assigned hub and device id, if the registration is assigned"
    )
    async def test_assigned(self, client, credential, mock_client):
        result = await client.register(credential)

        assert mock_client.register.await_count == 1
        assert isinstance(result, AssignmentResult)
        assert result.status is RegistrationStatus.ASSIGNED
        assert result.assigned_hub == FAKE_HUB
        assert result.device_id == FAKE_DEVICE_ID

    @pytest.mark.it("Raises ProvisioningRejected if the registration status is not 'assigned'")
    @pytest.mark.parametrize("status", ["failed", "disabled", "unassigned", "assigning"])
    async def test_not_assigned(self, mocker, client, credential, mock_client, status):
        mock_client.register.return_value = create_registration_result(mocker, status)
        with pytest.raises(ProvisioningRejected):
            await client.register(credential)

    @pytest.mark.it("Raises ProvisioningRejected if the registration status is not recognized")
    async def test_unknown_status(self, mocker, client, credential, mock_client):
        mock_client.register.return_value = create_registration_result(mocker, "bogus")
        with pytest.raises(ProvisioningRejected):
            await client.register(credential)

    @pytest.mark.it("Raises ProvisioningRejected if no registration result is returned")
    async def test_no_result(self, client, credential, mock_client):
        mock_client.register.return_value = None
        with pytest.raises(ProvisioningRejected):
            await client.register(credential)

    @pytest.mark.it(
        "Raises ProvisioningRejected if the registration is assigned without a hub or device id"
    )
    @pytest.mark.parametrize(
        "assigned_hub, device_id",
        [
            pytest.param("", FAKE_DEVICE_ID, id="Empty hub"),
            pytest.param(None, FAKE_DEVICE_ID, id="No hub"),
            pytest.param(FAKE_HUB, "", id="Empty device id"),
            pytest.param(FAKE_HUB, None, id="No device id"),
        ],
    )
    async def test_incomplete(
        self, mocker, client, credential, mock_client, assigned_hub, device_id
    ):
        mock_client.register.return_value = create_registration_result(
            mocker, "assigned", assigned_hub=assigned_hub, device_id=device_id
        )
        with pytest.raises(ProvisioningRejected):
            await client.register(credential)

    @pytest.mark.it(
        "Raises an error with the original error as its cause, if the ProvisioningDeviceClient raises an error"
    )
    @pytest.mark.parametrize(
        "error, expected_error",
        [
            pytest.param(
                iot_exceptions.ConnectionFailedError(), TransportError, id="ConnectionFailedError"
            ),
            pytest.param(
                iot_exceptions.ConnectionDroppedError(),
                TransportError,
                id="ConnectionDroppedError",
            ),
            pytest.param(iot_exceptions.CredentialError(), TransportError, id="CredentialError"),
            pytest.param(iot_exceptions.ClientError(), TransportError, id="ClientError"),
            pytest.param(iot_exceptions.OperationTimeout(), TransportError, id="OperationTimeout"),
            pytest.param(
                iot_exceptions.OperationCancelled(), TransportError, id="OperationCancelled"
            ),
            pytest.param(iot_exceptions.ServiceError(), ProvisioningRejected, id="ServiceError"),
            pytest.param(
                service_failure(), ProvisioningRejected, id="ClientError caused by ServiceError"
            ),
        ],
    )
    async def test_sdk_error(self, client, credential, mock_client, error, expected_error):
        mock_client.register.side_effect = error
        with pytest.raises(expected_error) as e_info:
            await client.register(credential)
        assert e_info.value.__cause__ is error

    @pytest.mark.it("Allows any unexpected errors to propagate")
    async def test_unexpected_error(self, client, credential, mock_client, unexpected_exception):
        mock_client.register.side_effect = unexpected_exception
        with pytest.raises(type(unexpected_exception)) as e_info:
            await client.register(credential)
        assert e_info.value is unexpected_exception

    @pytest.mark.it(
        "Raises TransportError if the ProvisioningDeviceClient cannot be created from the credential"
    )
    async def test_create_fails(self, client, credential, mock_client_cls):
        mock_client_cls.create_from_symmetric_key.side_effect = ValueError()
        with pytest.raises(TransportError):
            await client.register(credential)
