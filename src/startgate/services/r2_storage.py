"""Cloudflare R2 collaborator.

R2 speaks the S3 API, so the client is a boto3 S3 client pointed at the
account endpoint. Only bucket reachability is needed at startup; object upload
and deletion are not part of this package.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from startgate.core.exceptions import DependencyCheckError
from startgate.core.logging_config import StructuredLogger, get_logger

MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class R2StorageClient:
    """Bucket-level access to Cloudflare R2."""

    def __init__(
        self,
        *,
        access_key_id: str,
        secret_access_key: str,
        bucket_name: str,
        account_id: str,
        logger: StructuredLogger | None = None,
        timeout: float = 7.0,
    ) -> None:
        self.bucket_name = bucket_name
        self.account_id = account_id
        self.logger = logger or get_logger(__name__)
        self._client_kwargs: dict[str, Any] = {
            "region_name": "auto",
            "endpoint_url": self.endpoint_url,
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
            "config": Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1},
            ),
        }
        self._client: Any = None

    @property
    def endpoint_url(self) -> str:
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("s3", **self._client_kwargs)
        return self._client

    async def test_connection(self) -> bool:
        """Check that the bucket exists and is reachable.

        Returns False when R2 answers that the bucket does not exist; raises
        ``DependencyCheckError`` for any other failure.
        """
        log = self.logger.child(bucket=self.bucket_name)
        log.info("Testing R2 connection")

        try:
            client = self._get_client()
            await asyncio.to_thread(client.head_bucket, Bucket=self.bucket_name)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))

            if error_code in MISSING_BUCKET_CODES:
                log.error("R2 bucket not found", extra={"error_code": error_code})
                return False

            log.error(
                "R2 connection test failed",
                extra={"error_code": error_code, "error": error_message},
            )
            msg = f"R2 error ({error_code}): {error_message}"
            raise DependencyCheckError(msg, "cloudflare-r2") from e
        except BotoCoreError as e:
            log.error("R2 connection test failed", extra={"error": str(e)})
            msg = f"R2 is unreachable: {e!s}"
            raise DependencyCheckError(msg, "cloudflare-r2") from e

        log.info("R2 connection test successful")
        return True
