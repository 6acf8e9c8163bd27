"""AWS-specific constants for EC2 operations."""

DRY_RUN_ERROR_CODE = "DryRunOperation"
"""Error code EC2 returns when a DryRun request would have succeeded."""

DRY_RUN_INSTANCE_ID = "i-dryrun"
"""Placeholder instance ID reported when RunInstances is only validated."""

NOT_FOUND_ERROR_PREFIXES = ("InvalidAMIID.", "InvalidInstanceID.")
"""Error code prefixes for references to resources that do not exist."""

QUOTA_ERROR_CODES = frozenset(
    (
        "InstanceLimitExceeded",
        "RequestLimitExceeded",
        "VcpuLimitExceeded",
    )
)
"""Error codes signalling an account quota or request throttle was hit."""

EXPIRED_CREDENTIAL_ERROR_CODES = frozenset(
    (
        "ExpiredToken",
        "RequestExpired",
        "ExpiredTokenException",
    )
)
"""Error codes signalling the caller's temporary credentials have expired."""
