import logging
from pathlib import Path
from typing import Iterator, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from weekly_reports.errors import ObjectNotFound, StoreUnavailable
from weekly_reports.stores.base import BaseObjectStore, ReportDescriptor

logger = logging.getLogger(__name__)

# head_object reports a bare HTTP status, get_object reports NoSuchKey
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in NOT_FOUND_CODES


class S3ObjectStore(BaseObjectStore):
    """Synchronous S3 access for one bucket. Not thread-safe; one instance per manager."""

    def __init__(self, bucket: str, region: str, access_key: str, secret_key: str):
        self.bucket = bucket
        self.region = region
        try:
            self.client = boto3.client(
                "s3",
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        except BotoCoreError as e:
            logger.error("Failed to create S3 client for region %s: %s", region, e)
            raise StoreUnavailable(f"Failed to create S3 client for region {region}") from e
        self._closed = False
        logger.info("S3 client initialized for bucket: %s (%s)", bucket, region)

    def iter_keys(self, prefix: str) -> Iterator[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        count = 0
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    key = obj.get("Key", "")
                    if not key or key.endswith("/"):
                        continue
                    count += 1
                    yield key
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to list objects under s3://%s/%s: %s", self.bucket, prefix, e)
            raise StoreUnavailable(f"Failed to list objects under {prefix}") from e
        logger.info("Found %d objects under s3://%s/%s", count, self.bucket, prefix)

    def get_object(self, key: str, local_path: Union[str, Path]) -> Path:
        path = Path(local_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.client.download_file(self.bucket, key, str(path))
        except ClientError as e:
            if _is_not_found(e):
                logger.error("Report %s no longer exists in %s", key, self.bucket)
                raise ObjectNotFound(key) from e
            logger.error("Failed to download report %s: %s", key, e)
            raise StoreUnavailable(f"Failed to download {key}") from e
        except BotoCoreError as e:
            logger.error("Failed to download report %s: %s", key, e)
            raise StoreUnavailable(f"Failed to download {key}") from e

        logger.info("Downloaded report %s to %s", key, path)
        return path

    def head_object(self, key: str) -> ReportDescriptor:
        try:
            resp = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                raise ObjectNotFound(key) from e
            logger.error("Failed to get metadata for report %s: %s", key, e)
            raise StoreUnavailable(f"Failed to get metadata for {key}") from e
        except BotoCoreError as e:
            logger.error("Failed to get metadata for report %s: %s", key, e)
            raise StoreUnavailable(f"Failed to get metadata for {key}") from e

        logger.info("Retrieved metadata for report: %s", key)
        return ReportDescriptor(
            key=key,
            size_bytes=int(resp.get("ContentLength", 0)),
            last_modified=resp.get("LastModified"),
            content_type=resp.get("ContentType"),
            etag=(resp.get("ETag") or "").strip('"') or None,
        )

    def object_exists(self, key: str) -> bool:
        try:
            self.head_object(key)
        except ObjectNotFound:
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self.client.close()
        self._closed = True
        logger.info("S3 client closed")
