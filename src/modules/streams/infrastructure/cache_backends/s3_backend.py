"""S3-compatible object store cache backend."""

from __future__ import annotations

import asyncio
from datetime import UTC
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.modules.streams.domain.exceptions import (
    CacheNotFoundError,
    CacheReadError,
    CacheWriteError,
)
from src.modules.streams.domain.ports import CacheBackend, CacheBlob

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def create_s3_client(
    *,
    endpoint_url: str | None = None,
    access_key: str | None = None,
    secret_key: str | None = None,
    region: str | None = None,
) -> Any:
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name=region,
    )


class S3CacheBackend(CacheBackend):
    """Store blobs as objects in one bucket.

    Last-modified comes from the object's metadata, not from the payload.
    """

    name = "s3"

    def __init__(self, bucket: str, client: Any) -> None:
        self.bucket = bucket
        self.client = client

    async def get(self, key: str) -> CacheBlob:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, key, data)

    def _read(self, key: str) -> CacheBlob:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            data = response["Body"].read()
            last_modified = response["LastModified"]
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                raise CacheNotFoundError(f"s3://{self.bucket}/{key}") from e
            raise CacheReadError(f"Cannot read s3://{self.bucket}/{key}: {e}") from e
        except (BotoCoreError, KeyError) as e:
            raise CacheReadError(f"Cannot read s3://{self.bucket}/{key}: {e}") from e

        if last_modified.tzinfo is None:
            last_modified = last_modified.replace(tzinfo=UTC)
        return CacheBlob(data=data, last_modified=last_modified)

    def _write(self, key: str, data: bytes) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            raise CacheWriteError(f"Cannot write s3://{self.bucket}/{key}: {e}") from e
