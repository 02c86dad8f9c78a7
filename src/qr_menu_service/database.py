"""DynamoDB resource handle shared by the repositories.

The handle is built once at startup and passed to every repository and to
the readiness check. Connecting twice returns the existing resource.
"""

import logging
import threading
import time
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

SLOW_WARMUP_MS = 2000


class DynamoDBHandle:
    """Process-wide owner of the boto3 DynamoDB resource."""

    def __init__(
        self,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        """Initialize the handle without connecting.

        Args:
            region: AWS region of the tables
            endpoint_url: Local DynamoDB endpoint for development, None for AWS
            access_key: Access key for a local endpoint
            secret_key: Secret key for a local endpoint
        """
        self.region = region
        self.endpoint_url = endpoint_url
        self.access_key = access_key
        self.secret_key = secret_key
        self._resource: Any | None = None
        self._warmed_up = False
        self._lock = threading.Lock()

    def connect(self) -> Any:
        """Create the boto3 resource on first call and return it.

        Returns:
            Boto3 DynamoDB resource
        """
        with self._lock:
            if self._resource is not None:
                return self._resource

            if self.endpoint_url:
                logger.info(f"Using local DynamoDB at {self.endpoint_url}")
                self._resource = boto3.resource(
                    "dynamodb",
                    endpoint_url=self.endpoint_url,
                    region_name=self.region,
                    aws_access_key_id=self.access_key,
                    aws_secret_access_key=self.secret_key,
                )
            else:
                logger.info(f"Using AWS DynamoDB in region {self.region}")
                # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
                self._resource = boto3.resource("dynamodb", region_name=self.region)

            return self._resource

    def is_enabled(self) -> bool:
        """Whether the resource has been created."""
        return self._resource is not None

    @property
    def resource(self) -> Any:
        """The connected resource.

        Raises:
            RuntimeError: If connect() has not been called
        """
        if self._resource is None:
            raise RuntimeError("DynamoDB handle is not connected")
        return self._resource

    def warmup(self) -> bool:
        """Issue a cheap request so the first menu read does not pay for it.

        Returns:
            True if DynamoDB answered, False otherwise
        """
        if self._warmed_up:
            return True

        resource = self.connect()
        start = time.monotonic()

        try:
            resource.meta.client.list_tables(Limit=1)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB warmup failed: {e}")
            return False

        duration_ms = int((time.monotonic() - start) * 1000)
        self._warmed_up = True
        logger.info(f"DynamoDB connection ready ({duration_ms}ms)")

        if duration_ms > SLOW_WARMUP_MS:
            logger.warning(f"[SLOW] DynamoDB warmup took {duration_ms}ms")

        return True

    def ping(self) -> bool:
        """Check that DynamoDB is reachable right now."""
        if not self.is_enabled():
            return False

        try:
            self.resource.meta.client.list_tables(Limit=1)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB ping failed: {e}")
            return False
