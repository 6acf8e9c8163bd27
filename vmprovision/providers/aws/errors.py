"""Translation of botocore exceptions into provider exceptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)

from vmprovision.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)

logger = logging.getLogger(__name__)


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Re-raise botocore errors as provider exceptions.

    Yields
    ------
    None
        Control to the wrapped block

    Raises
    ------
    ProviderCredentialsError
        If AWS credentials are missing or incomplete
    ProviderAPIError
        If AWS returned an error response
    ProviderConnectionError
        If the endpoint is unreachable or the call timed out
    """
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError) as e:
        raise ProviderCredentialsError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        error_code = error.get("Code")
        logger.debug("AWS %s failed with %s", e.operation_name, error_code)
        raise ProviderAPIError(
            error.get("Message") or str(e),
            error_code=error_code,
            operation=e.operation_name,
        ) from e
    except (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as e:
        raise ProviderConnectionError(str(e)) from e
