"""Tests for the remote store implementations."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from backup_lifecycle.config import ConfigError, RemoteSettings
from backup_lifecycle.models.backup_file import RemoteCategory
from backup_lifecycle.storage import create_store
from backup_lifecycle.storage.directory import DirectoryStore
from backup_lifecycle.storage.s3 import S3Store


@pytest.fixture
def staged(tmp_path: Path) -> Path:
    path = tmp_path / "uploadtoaws" / "2024-05-01"
    path.parent.mkdir()
    path.write_bytes(b"daily backup")
    return path


class TestS3Store:
    def test_upload_then_local_removed(self, staged: Path) -> None:
        client = MagicMock()
        store = S3Store("pacemisbackups", client=client)

        ok = store.move(staged, RemoteCategory.DAILY, "2024-05-01", staged.name, "INTELLIGENT_TIERING")

        assert ok
        client.upload_file.assert_called_once_with(
            str(staged),
            "pacemisbackups",
            "Daily/2024-05-01/2024-05-01",
            ExtraArgs={"StorageClass": "INTELLIGENT_TIERING"},
        )
        assert not staged.exists()

    def test_client_error_keeps_file(self, staged: Path) -> None:
        client = MagicMock()
        client.upload_file.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        store = S3Store("pacemisbackups", client=client)

        ok = store.move(staged, RemoteCategory.DAILY, "2024-05-01", staged.name, "STANDARD_IA")

        assert not ok
        assert staged.exists()

    def test_upload_failed_error_keeps_file(self, staged: Path) -> None:
        client = MagicMock()
        client.upload_file.side_effect = S3UploadFailedError("network down")
        store = S3Store("pacemisbackups", client=client)

        assert not store.move(staged, RemoteCategory.WEEKLY_FULL, "2024-05-01", staged.name, "")
        assert staged.exists()

    def test_describe(self) -> None:
        store = S3Store("bucket", prefix="mis", client=MagicMock())
        key = store.key_for(RemoteCategory.WEEKLY_FULL, "2024-05-05", "f")
        assert store.describe(key) == "s3://bucket/mis/WeeklyFull/2024-05-05/f"


class TestDirectoryStore:
    def test_move(self, staged: Path, tmp_path: Path) -> None:
        store = DirectoryStore(tmp_path / "nas")

        assert store.move(staged, RemoteCategory.DAILY, "2024-05-01", staged.name, "")

        assert (tmp_path / "nas" / "Daily" / "2024-05-01" / "2024-05-01").read_bytes() == b"daily backup"
        assert not staged.exists()

    def test_unwritable_target_keeps_file(self, staged: Path, tmp_path: Path) -> None:
        blocker = tmp_path / "nas"
        blocker.write_text("not a directory")
        store = DirectoryStore(blocker)

        assert not store.move(staged, RemoteCategory.DAILY, "2024-05-01", staged.name, "")
        assert staged.exists()


class TestFactory:
    def _remote(self, **overrides) -> RemoteSettings:
        values = dict(
            kind="s3",
            bucket="pacemisbackups",
            profile="miss3backup",
            region="",
            prefix="",
            storage_class="INTELLIGENT_TIERING",
            target_dir=None,
        )
        values.update(overrides)
        return RemoteSettings(**values)

    def test_s3(self) -> None:
        store = create_store(self._remote())
        assert isinstance(store, S3Store)
        assert store.bucket == "pacemisbackups"

    def test_directory(self, tmp_path: Path) -> None:
        store = create_store(self._remote(kind="directory", target_dir=tmp_path))
        assert isinstance(store, DirectoryStore)
        assert store.root == tmp_path


class TestLocalCleanupFailure:
    def test_stored_but_not_removed_still_succeeds(self, staged: Path, tmp_path: Path, monkeypatch) -> None:
        store = DirectoryStore(tmp_path / "nas")
        real_unlink = Path.unlink

        def failing_unlink(self, missing_ok=False):
            if self == staged:
                raise PermissionError("read-only staging area")
            return real_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", failing_unlink)

        assert store.move(staged, RemoteCategory.DAILY, "2024-05-01", staged.name, "")
        assert staged.exists()
        assert (tmp_path / "nas" / "Daily" / "2024-05-01" / "2024-05-01").exists()

    def test_upload_reports_leftover_copy_not_upload_failure(
        self, settings, staged: Path, tmp_path: Path, monkeypatch
    ) -> None:
        from backup_lifecycle.core.upload import UploadTransition

        staging = settings.staging_dir
        staging.mkdir()
        local = staging / staged.name
        staged.rename(local)
        real_unlink = Path.unlink

        def failing_unlink(self, missing_ok=False):
            if self == local:
                raise PermissionError("read-only staging area")
            return real_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", failing_unlink)

        result = UploadTransition(settings, DirectoryStore(tmp_path / "nas")).run()

        assert result.done == []
        assert len(result.errors) == 1
        assert "could not remove the staged copy" in result.errors[0]
        assert "Failed to upload" not in result.errors[0]


class TestFactoryValidation:
    def test_directory_without_target(self) -> None:
        remote = RemoteSettings(
            kind="directory",
            bucket="",
            profile="",
            region="",
            prefix="",
            storage_class="",
            target_dir=None,
        )
        with pytest.raises(ConfigError):
            create_store(remote)
