"""Tests for media pack file list operations."""
import pytest

from app.models.media_pack import AdminMediaPack
from app.models.plan import PlanType
from app.services.media_packs import add_files, remove_files, transfer_files, is_accessible


def _entry(n):
    return {"name": f"{n}.jpg", "url": f"https://cdn/{n}.jpg", "type": "image/jpeg", "size": n}


def _pack(id, files=(), min_plan=PlanType.FREE):
    files = list(files)
    return AdminMediaPack(id=id, name=f"Pack {id}", media_files=files, file_count=len(files), min_plan=min_plan)


def test_add_files_keeps_count_in_sync():
    pack = _pack(1, [_entry(1)])
    original = pack.media_files
    assert add_files(pack, [_entry(2), _entry(3)]) == 2
    assert pack.file_count == 3 == len(pack.media_files)
    assert pack.media_files is not original


def test_remove_files_returns_removed():
    pack = _pack(1, [_entry(1), _entry(2), _entry(3)])
    removed = remove_files(pack, ["https://cdn/2.jpg", "https://cdn/404.jpg"])
    assert removed == [_entry(2)]
    assert [e["name"] for e in pack.media_files] == ["1.jpg", "3.jpg"]
    assert pack.file_count == 2


class TestTransfer:
    def test_moves_selected_files(self):
        source = _pack(1, [_entry(1), _entry(2)])
        target = _pack(2, [_entry(9)])
        assert transfer_files(source, target, ["https://cdn/1.jpg"]) == 1
        assert source.media_files == [_entry(2)]
        assert target.media_files == [_entry(9), _entry(1)]
        assert source.file_count + target.file_count == 3

    def test_same_pack_rejected(self):
        pack = _pack(1, [_entry(1)])
        with pytest.raises(ValueError):
            transfer_files(pack, pack, ["https://cdn/1.jpg"])

    def test_nothing_selected_leaves_packs_untouched(self):
        source = _pack(1, [_entry(1)])
        target = _pack(2)
        with pytest.raises(ValueError):
            transfer_files(source, target, ["https://cdn/none.jpg"])
        assert source.file_count == 1 and target.file_count == 0


def test_is_accessible():
    pro_pack = _pack(1, min_plan=PlanType.PRO)
    assert is_accessible(pro_pack, PlanType.AGENCY)
    assert not is_accessible(pro_pack, PlanType.BASIC)
