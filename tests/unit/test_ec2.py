"""Tests for EC2Gateway against moto's in-process EC2."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, NoCredentialsError
from moto import mock_aws

from vmprovision.core.interfaces import ComputeGateway
from vmprovision.providers.aws.compute import EC2Gateway
from vmprovision.providers.aws.constants import DRY_RUN_INSTANCE_ID
from vmprovision.providers.exceptions import (
    ProviderAPIError,
    ProviderCredentialsError,
)


@pytest.fixture(scope="function")
def gateway(aws_credentials):
    """Return EC2Gateway backed by moto."""
    with mock_aws():
        yield EC2Gateway(region="us-east-1")


@pytest.fixture
def registered_ami(gateway) -> str:
    """Register an AMI for testing.

    Parameters
    ----------
    gateway : EC2Gateway
        EC2Gateway fixture

    Returns
    -------
    str
        AMI ID of registered image
    """
    response = gateway.ec2_client.register_image(
        Name="test-ami-image",
        Description="Test AMI",
        Architecture="x86_64",
        RootDeviceName="/dev/sda1",
        VirtualizationType="hvm",
    )
    return response["ImageId"]


def _instance_tags(gateway: EC2Gateway, instance_id: str) -> dict[str, str]:
    response = gateway.ec2_client.describe_instances(InstanceIds=[instance_id])
    instance = response["Reservations"][0]["Instances"][0]
    return {tag["Key"]: tag["Value"] for tag in instance.get("Tags", [])}


def _instance_state(gateway: EC2Gateway, instance_id: str) -> str:
    response = gateway.ec2_client.describe_instances(InstanceIds=[instance_id])
    return response["Reservations"][0]["Instances"][0]["State"]["Name"]


def test_gateway_satisfies_protocol(gateway) -> None:
    assert isinstance(gateway, ComputeGateway)


def test_client_built_with_timeouts() -> None:
    factory = MagicMock()

    EC2Gateway(region="us-west-2", timeout=12, boto3_client_factory=factory)

    args, kwargs = factory.call_args
    assert args == ("ec2",)
    assert kwargs["region_name"] == "us-west-2"
    assert kwargs["config"].connect_timeout == 12
    assert kwargs["config"].read_timeout == 12


def test_run_instance_launches_one(gateway, registered_ami) -> None:
    instance_id = gateway.run_instance(registered_ami, "t2.micro")

    response = gateway.ec2_client.describe_instances()
    instances = [
        i for r in response["Reservations"] for i in r["Instances"]
    ]
    assert [i["InstanceId"] for i in instances] == [instance_id]
    assert instances[0]["InstanceType"] == "t2.micro"
    assert instances[0]["ImageId"] == registered_ami


def test_create_tags(gateway, registered_ami) -> None:
    instance_id = gateway.run_instance(registered_ami, "t2.micro")

    gateway.create_tags([instance_id], "env", "dev,prod")

    assert _instance_tags(gateway, instance_id) == {"env": "dev,prod"}


def test_find_instances_by_tag(gateway, registered_ami) -> None:
    ids = {}
    for env in ("dev", "prod", "staging"):
        ids[env] = gateway.run_instance(registered_ami, "t2.micro")
        gateway.create_tags([ids[env]], "env", env)

    found = gateway.find_instances([{"Name": "tag:env", "Values": ["dev", "prod"]}])

    assert sorted(found) == sorted([ids["dev"], ids["prod"]])


def test_find_instances_no_match(gateway, registered_ami) -> None:
    gateway.run_instance(registered_ami, "t2.micro")

    assert gateway.find_instances([{"Name": "tag:env", "Values": ["dev"]}]) == []


def test_terminate_instances(gateway, registered_ami) -> None:
    first = gateway.run_instance(registered_ami, "t2.micro")
    second = gateway.run_instance(registered_ami, "t2.micro")

    terminated = gateway.terminate_instances([first, second])

    assert sorted(terminated) == sorted([first, second])
    assert _instance_state(gateway, first) in ("shutting-down", "terminated")


def test_terminate_unknown_instance_raises(gateway) -> None:
    with pytest.raises(ProviderAPIError) as exc_info:
        gateway.terminate_instances(["i-0123456789abcdef0"])

    assert exc_info.value.error_code.startswith("InvalidInstanceID")


def test_dry_run_does_not_launch(aws_credentials, registered_ami, gateway) -> None:
    dry_gateway = EC2Gateway(region="us-east-1", dry_run=True)

    assert dry_gateway.run_instance(registered_ami, "t2.micro") == DRY_RUN_INSTANCE_ID
    assert gateway.find_instances([]) == []


def test_dry_run_terminate_keeps_instance(aws_credentials, registered_ami, gateway) -> None:
    instance_id = gateway.run_instance(registered_ami, "t2.micro")
    dry_gateway = EC2Gateway(region="us-east-1", dry_run=True)

    assert dry_gateway.terminate_instances([instance_id]) == [instance_id]
    assert _instance_state(gateway, instance_id) == "running"


def test_client_error_translated() -> None:
    client = MagicMock()
    client.run_instances.side_effect = ClientError(
        {"Error": {"Code": "UnauthorizedOperation", "Message": "not allowed"}},
        "RunInstances",
    )
    gateway = EC2Gateway(boto3_client_factory=lambda *a, **kw: client)

    with pytest.raises(ProviderAPIError) as exc_info:
        gateway.run_instance("ami-1", "t2.micro")

    assert exc_info.value.error_code == "UnauthorizedOperation"
    assert exc_info.value.operation == "RunInstances"
    assert str(exc_info.value) == "not allowed"


def test_dry_run_error_code_without_dry_run_is_an_error() -> None:
    client = MagicMock()
    client.create_tags.side_effect = ClientError(
        {"Error": {"Code": "DryRunOperation", "Message": "would succeed"}},
        "CreateTags",
    )
    gateway = EC2Gateway(boto3_client_factory=lambda *a, **kw: client)

    with pytest.raises(ProviderAPIError):
        gateway.create_tags(["i-1"], "env", "dev")


def test_missing_credentials_translated() -> None:
    client = MagicMock()
    client.get_paginator.return_value.paginate.side_effect = NoCredentialsError()
    gateway = EC2Gateway(boto3_client_factory=lambda *a, **kw: client)

    with pytest.raises(ProviderCredentialsError):
        gateway.find_instances([{"Name": "tag:env", "Values": ["dev"]}])


def test_run_instance_without_instances_raises() -> None:
    client = MagicMock()
    client.run_instances.return_value = {"Instances": []}
    gateway = EC2Gateway(boto3_client_factory=lambda *a, **kw: client)

    with pytest.raises(ProviderAPIError, match="no instances"):
        gateway.run_instance("ami-1", "t2.micro")


def test_run_instance_requests_exactly_one() -> None:
    client = MagicMock()
    client.run_instances.return_value = {"Instances": [{"InstanceId": "i-abc"}]}
    gateway = EC2Gateway(boto3_client_factory=lambda *a, **kw: client)

    assert gateway.run_instance("ami-1", "t3.small") == "i-abc"
    client.run_instances.assert_called_once_with(
        ImageId="ami-1",
        InstanceType="t3.small",
        MinCount=1,
        MaxCount=1,
        DryRun=False,
    )


def test_default_factory_is_boto3_client(aws_credentials) -> None:
    with mock_aws():
        gateway = EC2Gateway()

    assert gateway.boto3_client_factory is boto3.client
