"""Tests for media pack management and the user media library."""
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from app.models.media_pack import AdminMediaPack
from app.models.plan import PlanType
from app.services.storage import BulkUploadResult

CREATED = datetime(2026, 2, 1, tzinfo=timezone.utc)


def _entry(n):
    return {"name": f"{n}.jpg", "url": f"https://cdn/media-packs/uploads/{n}.jpg", "type": "image/jpeg", "size": 3}


def _pack(id=1, files=(), min_plan=PlanType.FREE):
    files = list(files)
    return AdminMediaPack(
        id=id, name=f"Pack {id}", pack_type="images", min_plan=min_plan,
        media_files=files, file_count=len(files), created_at=CREATED,
    )


class TestAdminPacks:
    def test_create(self, client_with_admin, fake_refresh):
        client, db, _ = client_with_admin
        db.refresh.side_effect = fake_refresh

        resp = client.post("/admin/media-packs", json={"name": "Verão", "min_plan": "pro"})

        assert resp.status_code == 201
        data = resp.json()
        assert data["file_count"] == 0
        assert data["media_files"] == []
        assert data["min_plan"] == "pro"

    def test_bulk_upload_appends_successes(self, client_with_admin):
        client, db, _ = client_with_admin
        pack = _pack(files=[_entry(0)])
        db.first.return_value = pack
        result = BulkUploadResult(uploaded=[_entry(1)], failed=[{"name": "2.jpg", "error": "503"}])

        with patch("app.routers.admin_media.bulk_upload", return_value=result) as upload:
            resp = client.post("/admin/media-packs/1/files", files=[
                ("files", ("1.jpg", b"abc", "image/jpeg")),
                ("files", ("2.jpg", b"def", "image/jpeg")),
            ])

        assert resp.status_code == 200
        data = resp.json()
        assert data["file_count"] == 2
        assert [f["name"] for f in data["failed"]] == ["2.jpg"]
        assert pack.file_count == len(pack.media_files) == 2
        names = [item[0] for item in upload.call_args.args[1]]
        assert names == ["1.jpg", "2.jpg"]

    def test_all_uploads_failing_is_502(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.return_value = _pack()
        result = BulkUploadResult(failed=[{"name": "1.jpg", "error": "503"}])

        with patch("app.routers.admin_media.bulk_upload", return_value=result):
            resp = client.post("/admin/media-packs/1/files", files=[("files", ("1.jpg", b"abc", "image/jpeg"))])

        assert resp.status_code == 502
        db.commit.assert_not_called()

    def test_remove_files_deletes_objects(self, client_with_admin):
        client, db, _ = client_with_admin
        pack = _pack(files=[_entry(1), _entry(2)])
        db.first.return_value = pack

        with patch("app.routers.admin_media._delete_from_storage") as delete:
            resp = client.post("/admin/media-packs/1/files/remove", json={"urls": [_entry(1)["url"]]})

        assert resp.status_code == 200
        assert resp.json()["file_count"] == 1
        delete.assert_called_once_with([_entry(1)])

    def test_transfer_between_packs(self, client_with_admin):
        client, db, _ = client_with_admin
        source = _pack(1, files=[_entry(1), _entry(2)])
        target = _pack(2)
        db.first.side_effect = [source, target]

        resp = client.post("/admin/media-packs/1/transfer", json={
            "target_pack_id": 2, "urls": [_entry(2)["url"]],
        })

        assert resp.status_code == 200
        assert resp.json() == {"moved": 1, "source_file_count": 1, "target_file_count": 1}
        db.commit.assert_called_once()

    def test_transfer_to_same_pack_is_400(self, client_with_admin):
        client, db, _ = client_with_admin
        pack = _pack(1, files=[_entry(1)])
        db.first.side_effect = [pack, pack]
        resp = client.post("/admin/media-packs/1/transfer", json={"target_pack_id": 1, "urls": [_entry(1)["url"]]})
        assert resp.status_code == 400
        db.commit.assert_not_called()

    def test_delete_pack_removes_storage_objects(self, client_with_admin):
        client, db, _ = client_with_admin
        pack = _pack(files=[_entry(1)])
        db.first.return_value = pack

        with patch("app.routers.admin_media._delete_from_storage") as delete:
            resp = client.delete("/admin/media-packs/1")

        assert resp.status_code == 204
        db.delete.assert_called_once_with(pack)
        delete.assert_called_once_with([_entry(1)])


class TestLibrary:
    @pytest.fixture(autouse=True)
    def library_enabled(self):
        with patch("app.routers.admin_media.feature_settings.is_enabled", return_value=True) as enabled:
            yield enabled

    def test_list_flags_accessible_packs(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_pack(1), _pack(2, min_plan=PlanType.PRO)]

        with patch("app.routers.admin_media.resolve_current_plan", return_value=PlanType.BASIC):
            resp = client.get("/media-packs")

        assert [p["accessible"] for p in resp.json()] == [True, False]

    def test_locked_pack_is_403(self, client_with_user):
        client, db, _ = client_with_user
        db.first.return_value = _pack(2, min_plan=PlanType.AGENCY)

        with patch("app.routers.admin_media.resolve_current_plan", return_value=PlanType.PRO):
            resp = client.get("/media-packs/2")

        assert resp.status_code == 403

    def test_disabled_library(self, client_with_user, library_enabled):
        client, _, _ = client_with_user
        library_enabled.return_value = False
        assert client.get("/media-packs").status_code == 403
