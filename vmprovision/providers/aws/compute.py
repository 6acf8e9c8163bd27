"""EC2 gateway for vmprovision."""

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from vmprovision.constants import DEFAULT_TIMEOUT_SECONDS, INSTANCE_COUNT
from vmprovision.providers.aws.constants import (
    DRY_RUN_ERROR_CODE,
    DRY_RUN_INSTANCE_ID,
)
from vmprovision.providers.aws.errors import handle_aws_errors
from vmprovision.providers.exceptions import ProviderAPIError

logger = logging.getLogger(__name__)


class EC2Gateway:
    """Issue EC2 requests on behalf of the lifecycle handlers.

    Parameters
    ----------
    region : str | None
        AWS region for EC2 operations. None lets boto3 resolve it from the
        environment or the shared config file
    timeout : int
        Connect and read timeout applied to every request, in seconds
    dry_run : bool
        Set the DryRun flag on mutating requests
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients. If None, uses boto3.client
    """

    def __init__(
        self,
        region: str | None = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        dry_run: bool = False,
        boto3_client_factory: Any | None = None,
    ) -> None:
        self.region = region
        self.timeout = timeout
        self.dry_run = dry_run
        self.boto3_client_factory = boto3_client_factory or boto3.client
        self.ec2_client = self.boto3_client_factory(
            "ec2",
            region_name=region,
            config=Config(connect_timeout=timeout, read_timeout=timeout),
        )

    def _is_dry_run_success(self, error: ClientError) -> bool:
        return (
            self.dry_run
            and error.response.get("Error", {}).get("Code") == DRY_RUN_ERROR_CODE
        )

    def run_instance(self, image_id: str, instance_type: str) -> str:
        """Launch a single EC2 instance.

        Parameters
        ----------
        image_id : str
            AMI to launch
        instance_type : str
            Instance type to launch

        Returns
        -------
        str
            ID of the launched instance, or a placeholder ID when a dry run
            validated successfully

        Raises
        ------
        ProviderAPIError
            If EC2 rejects the request or returns no instance
        """
        with handle_aws_errors():
            try:
                response = self.ec2_client.run_instances(
                    ImageId=image_id,
                    InstanceType=instance_type,
                    MinCount=INSTANCE_COUNT,
                    MaxCount=INSTANCE_COUNT,
                    DryRun=self.dry_run,
                )
            except ClientError as e:
                if self._is_dry_run_success(e):
                    logger.info("Dry run: RunInstances would have succeeded")
                    return DRY_RUN_INSTANCE_ID
                raise

        instances = response.get("Instances", [])
        if not instances:
            raise ProviderAPIError(
                "RunInstances returned no instances", operation="RunInstances"
            )

        instance_id = instances[0]["InstanceId"]
        logger.debug("Launched instance %s from %s", instance_id, image_id)
        return instance_id

    def create_tags(self, resource_ids: list[str], key: str, value: str) -> None:
        """Attach a tag to EC2 resources.

        Parameters
        ----------
        resource_ids : list[str]
            Resources to tag
        key : str
            Tag key
        value : str
            Tag value, stored verbatim
        """
        with handle_aws_errors():
            try:
                self.ec2_client.create_tags(
                    Resources=resource_ids,
                    Tags=[{"Key": key, "Value": value}],
                    DryRun=self.dry_run,
                )
            except ClientError as e:
                if self._is_dry_run_success(e):
                    logger.info("Dry run: CreateTags would have succeeded")
                    return
                raise

    def find_instances(self, filters: list[dict[str, Any]]) -> list[str]:
        """Find instances matching describe filters across all reservations.

        Parameters
        ----------
        filters : list[dict[str, Any]]
            EC2 describe filters, e.g. ``[{"Name": "tag:env", "Values": ["dev"]}]``

        Returns
        -------
        list[str]
            Matching instance IDs in the order EC2 returned them
        """
        instance_ids = []

        with handle_aws_errors():
            paginator = self.ec2_client.get_paginator("describe_instances")

            for page in paginator.paginate(Filters=filters):
                for reservation in page["Reservations"]:
                    for instance in reservation["Instances"]:
                        instance_ids.append(instance["InstanceId"])

        return instance_ids

    def terminate_instances(self, instance_ids: list[str]) -> list[str]:
        """Terminate EC2 instances.

        Parameters
        ----------
        instance_ids : list[str]
            Instances to terminate

        Returns
        -------
        list[str]
            IDs reported as terminating. On a successful dry run, the IDs
            that would have been terminated
        """
        with handle_aws_errors():
            try:
                response = self.ec2_client.terminate_instances(
                    InstanceIds=instance_ids,
                    DryRun=self.dry_run,
                )
            except ClientError as e:
                if self._is_dry_run_success(e):
                    logger.info("Dry run: TerminateInstances would have succeeded")
                    return list(instance_ids)
                raise

        return [
            instance["InstanceId"]
            for instance in response.get("TerminatingInstances", [])
        ]
