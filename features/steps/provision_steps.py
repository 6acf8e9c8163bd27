"""Step definitions for provisioning scenarios."""

import io
import json
import shlex
from contextlib import redirect_stderr, redirect_stdout

import boto3
from behave import given, then, when
from behave.runner import Context

from vmprovision.cli.main import main

TEST_REGION = "us-east-1"


def _ec2_client():
    return boto3.client("ec2", region_name=TEST_REGION)


def _running_instance_ids(filters: list[dict] | None = None) -> list[str]:
    all_filters = [{"Name": "instance-state-name", "Values": ["running"]}]
    all_filters.extend(filters or [])
    response = _ec2_client().describe_instances(Filters=all_filters)
    return [i["InstanceId"] for r in response["Reservations"] for i in r["Instances"]]


@given("a registered machine image")
def step_registered_image(context: Context) -> None:
    response = _ec2_client().register_image(
        Name="vmprovision-test-image",
        Architecture="x86_64",
        RootDeviceName="/dev/sda1",
        VirtualizationType="hvm",
    )
    context.image_id = response["ImageId"]


@given('a configuration file with instance type "{instance_type}"')
def step_configuration_file(context: Context, instance_type: str) -> None:
    context.config_path.write_text(
        json.dumps({"instance_type": instance_type, "image_id": context.image_id})
    )


@given('an instance tagged "{key}" = "{value}"')
def step_existing_instance(context: Context, key: str, value: str) -> None:
    _ec2_client().run_instances(
        ImageId=context.image_id,
        InstanceType="t2.micro",
        MinCount=1,
        MaxCount=1,
        TagSpecifications=[
            {"ResourceType": "instance", "Tags": [{"Key": key, "Value": value}]}
        ],
    )


@when('I run "{arguments}"')
def step_run(context: Context, arguments: str) -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()
    context.exit_code = 0

    with redirect_stdout(stdout), redirect_stderr(stderr):
        try:
            main(shlex.split(arguments))
        except SystemExit as e:
            context.exit_code = int(e.code or 0)

    context.stdout = stdout.getvalue()
    context.stderr = stderr.getvalue()


@then("the exit code is {code:d}")
def step_exit_code(context: Context, code: int) -> None:
    assert context.exit_code == code, (
        f"Expected exit code {code}, got {context.exit_code}\n"
        f"stdout: {context.stdout}\nstderr: {context.stderr}"
    )


@then('the output contains "{text}"')
def step_output_contains(context: Context, text: str) -> None:
    assert text in context.stdout, f"'{text}' not in stdout: {context.stdout}"


@then('the error output contains "{text}"')
def step_error_output_contains(context: Context, text: str) -> None:
    assert text in context.stderr, f"'{text}' not in stderr: {context.stderr}"


@then('{count:d} running instance is tagged "{key}" = "{value}"')
@then('{count:d} running instances are tagged "{key}" = "{value}"')
def step_running_tagged(context: Context, count: int, key: str, value: str) -> None:
    ids = _running_instance_ids([{"Name": f"tag:{key}", "Values": [value]}])
    assert len(ids) == count, f"Expected {count} instances tagged {key}={value}, got {ids}"


@then("no instances exist")
def step_no_instances(context: Context) -> None:
    assert _running_instance_ids() == []
