"""Tests for object storage and concurrent bulk upload."""
import threading
import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, MagicMock, patch

from app.services import storage
from app.services.storage import StorageError, build_object_path, bulk_upload


@pytest.fixture
def local_settings(tmp_path):
    with patch("app.services.storage.settings") as mock_settings:
        mock_settings.storage_backend = "local"
        mock_settings.upload_base_dir = tmp_path
        mock_settings.public_base_url = "http://localhost:8000/uploads"
        mock_settings.upload_concurrency = 3
        mock_settings.upload_max_retries = 3
        mock_settings.max_upload_file_size_mb = 1
        mock_settings.product_images_bucket = "product-images"
        yield mock_settings


@pytest.fixture
def supabase_settings():
    with patch("app.services.storage.settings") as mock_settings:
        mock_settings.storage_backend = "supabase"
        mock_settings.supabase_url = "https://proj.supabase.co"
        mock_settings.storage_service_key = "service-key"
        yield mock_settings


class TestObjectPath:
    def test_format(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        path = build_object_path("foto final (1).jpg", now=now)
        prefix, rest = path.split("/", 1)
        timestamp, random, name = rest.split("_", 2)
        assert prefix == "uploads"
        assert timestamp == str(int(now.timestamp() * 1000))
        assert len(random) == 7
        assert name == "foto_final__1_.jpg"

    def test_paths_are_unique(self):
        assert build_object_path("a.png") != build_object_path("a.png")


class TestLocalBackend:
    def test_upload_writes_bytes_unmodified(self, local_settings, tmp_path):
        entry = storage.upload_file("media-packs", "clip.mp4", b"\x00\x01binary", "video/mp4")
        assert entry["name"] == "clip.mp4"
        assert entry["type"] == "video/mp4"
        assert entry["size"] == 8
        path = storage.path_from_url("media-packs", entry["url"])
        assert (tmp_path / "media-packs" / path).read_bytes() == b"\x00\x01binary"

    def test_delete_objects(self, local_settings, tmp_path):
        entry = storage.upload_file("media-packs", "a.txt", b"x")
        path = storage.path_from_url("media-packs", entry["url"])
        storage.delete_objects("media-packs", [path, "uploads/missing.txt"])
        assert not (tmp_path / "media-packs" / path).exists()

    def test_path_from_foreign_url(self, local_settings):
        assert storage.path_from_url("media-packs", "https://elsewhere.com/x.png") is None


class TestSupabaseBackend:
    @pytest.fixture
    def bucket(self, supabase_settings):
        client = MagicMock()
        objects = client.storage.from_.return_value
        objects.get_public_url.side_effect = (
            lambda path: f"https://proj.supabase.co/storage/v1/object/public/product-images/{path}?"
        )
        with patch("app.services.storage.get_supabase_client", return_value=client):
            yield client, objects

    def test_upload_through_storage_client(self, bucket):
        client, objects = bucket

        entry = storage.upload_file("product-images", "a.png", b"img", "image/png")

        client.storage.from_.assert_called_with("product-images")
        path, content = objects.upload.call_args.args
        assert path.startswith("uploads/")
        assert content == b"img"
        assert objects.upload.call_args.kwargs["file_options"] == {
            "content-type": "image/png", "upsert": "true",
        }
        assert entry["url"] == f"https://proj.supabase.co/storage/v1/object/public/product-images/{path}"
        assert storage.path_from_url("product-images", entry["url"]) == path

    def test_upload_rejected(self, bucket):
        _, objects = bucket
        objects.upload.side_effect = RuntimeError("Payload too large")
        with pytest.raises(StorageError, match="too large"):
            storage.upload_file("product-images", "a.png", b"img", "image/png")

    def test_remove(self, bucket):
        client, objects = bucket
        storage.delete_objects("media-packs", ("uploads/a.png", "uploads/b.png"))
        client.storage.from_.assert_called_with("media-packs")
        objects.remove.assert_called_once_with(["uploads/a.png", "uploads/b.png"])

    def test_remove_failure_becomes_storage_error(self, bucket):
        _, objects = bucket
        objects.remove.side_effect = RuntimeError("Bucket not found")
        with pytest.raises(StorageError):
            storage.delete_objects("media-packs", ["uploads/a.png"])

    def test_client_built_once_with_service_key(self, supabase_settings):
        with patch("app.services.storage._supabase", None), \
                patch("app.services.storage.create_client") as create:
            first = storage.get_supabase_client()
            second = storage.get_supabase_client()

        create.assert_called_once_with("https://proj.supabase.co", "service-key")
        assert first is second


class TestBulkUpload:
    def _files(self, n):
        return [(f"f{i}.jpg", b"x" * i, "image/jpeg") for i in range(n)]

    def test_results_follow_input_order(self, local_settings):
        result = bulk_upload("media-packs", self._files(8), concurrency=4)
        assert [e["name"] for e in result.uploaded] == [f"f{i}.jpg" for i in range(8)]
        assert result.failed == []

    def test_empty_input(self, local_settings):
        result = bulk_upload("media-packs", [])
        assert result.uploaded == [] and result.failed == []

    def test_retries_with_exponential_backoff(self, local_settings):
        calls = {"n": 0}

        def flaky(bucket, filename, content, content_type):
            calls["n"] += 1
            if calls["n"] < 3:
                raise StorageError("503")
            return {"name": filename, "url": "u", "type": content_type, "size": len(content)}

        sleep = Mock()
        with patch("app.services.storage.upload_file", side_effect=flaky):
            result = bulk_upload("media-packs", self._files(1), max_retries=3, sleep=sleep)

        assert len(result.uploaded) == 1
        assert [c.args[0] for c in sleep.call_args_list] == [2, 4]

    def test_gives_up_after_max_retries(self, local_settings):
        sleep = Mock()
        with patch("app.services.storage.upload_file", side_effect=StorageError("boom")) as upload:
            result = bulk_upload("media-packs", self._files(2), max_retries=2, sleep=sleep)

        assert result.uploaded == []
        assert [f["name"] for f in result.failed] == ["f0.jpg", "f1.jpg"]
        assert all(f["error"] == "boom" for f in result.failed)
        assert upload.call_count == 4

    def test_partial_failure(self, local_settings):
        def upload(bucket, filename, content, content_type):
            if filename == "f1.jpg":
                raise StorageError("rejected")
            return {"name": filename, "url": "u", "type": content_type, "size": len(content)}

        with patch("app.services.storage.upload_file", side_effect=upload):
            result = bulk_upload("media-packs", self._files(3), max_retries=1)

        assert [e["name"] for e in result.uploaded] == ["f0.jpg", "f2.jpg"]
        assert [f["name"] for f in result.failed] == ["f1.jpg"]

    def test_concurrency_is_bounded(self, local_settings):
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}
        release = threading.Event()

        def upload(bucket, filename, content, content_type):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            release.wait(0.05)
            with lock:
                state["active"] -= 1
            return {"name": filename, "url": "u", "type": content_type, "size": 0}

        with patch("app.services.storage.upload_file", side_effect=upload):
            bulk_upload("media-packs", self._files(10), concurrency=2)

        assert state["peak"] <= 2

    def test_progress_callback(self, local_settings):
        events = []
        bulk_upload("media-packs", self._files(3), on_progress=lambda c, f, t: events.append((c, f, t)))
        assert len(events) == 3
        assert (3, 0, 3) in events


class TestStoreImage:
    def _upload(self, content_type, content=b"png"):
        upload = Mock()
        upload.content_type = content_type
        upload.filename = "banner.png"
        upload.file.read.return_value = content
        return upload

    def test_stores_image(self, local_settings):
        url = storage.store_image(self._upload("image/png"))
        assert url.startswith("http://localhost:8000/uploads/product-images/uploads/")

    def test_rejects_non_image(self, local_settings):
        with pytest.raises(ValueError, match="image"):
            storage.store_image(self._upload("application/pdf"))

    def test_rejects_oversized(self, local_settings):
        with pytest.raises(ValueError, match="MB"):
            storage.store_image(self._upload("image/png", b"x" * (1024 * 1024 + 1)))
