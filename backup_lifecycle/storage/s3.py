"""Amazon S3 store — boto3 upload under a named credential profile."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from backup_lifecycle.storage.base import RemoteStore


class S3Store(RemoteStore):
    """
    Upload staged backups to ``s3://<bucket>/<key>``.

    Equivalent to ``aws s3 mv --storage-class <class> --profile <profile>``:
    the local file is removed only after ``upload_file`` returns.
    """

    def __init__(
        self,
        bucket: str,
        profile: str = "",
        region: str = "",
        prefix: str = "",
        client: Any = None,
    ) -> None:
        super().__init__(prefix)
        self._bucket = bucket
        self._profile = profile
        self._region = region
        self._client = client

    @property
    def name(self) -> str:
        return "s3"

    @property
    def bucket(self) -> str:
        return self._bucket

    def describe(self, key: str) -> str:
        return f"s3://{self._bucket}/{key}"

    def _get_client(self) -> Any:
        if self._client is None:
            session_kwargs = {}
            if self._profile:
                session_kwargs["profile_name"] = self._profile
            if self._region:
                session_kwargs["region_name"] = self._region
            session = boto3.Session(**session_kwargs)
            self._client = session.client("s3")
        return self._client

    def _put(self, local_path: Path, key: str, storage_class: str) -> bool:
        extra_args = {"StorageClass": storage_class} if storage_class else None
        try:
            self._get_client().upload_file(
                str(local_path), self._bucket, key, ExtraArgs=extra_args
            )
        except (Boto3Error, BotoCoreError, ClientError, OSError) as e:
            logger.error(f"S3 upload of {local_path.name} to {self.describe(key)} failed: {e}")
            return False
        return True
