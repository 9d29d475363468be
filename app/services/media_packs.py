"""
Media pack file list operations.

``media_files`` is a JSON array; every change assigns a new list so the ORM
sees the update, and ``file_count`` is kept equal to its length.
"""
from typing import Iterable, List

from app.models.media_pack import AdminMediaPack
from app.models.plan import PlanType
from app.services.subscriptions import plan_allows


def _set_files(pack: AdminMediaPack, files: List[dict]):
    pack.media_files = files
    pack.file_count = len(files)


def add_files(pack: AdminMediaPack, entries: Iterable[dict]) -> int:
    entries = list(entries)
    _set_files(pack, list(pack.media_files or []) + entries)
    return len(entries)


def remove_files(pack: AdminMediaPack, urls: Iterable[str]) -> List[dict]:
    """Drop files whose URL is in ``urls`` and return the removed entries."""
    urls = set(urls)
    kept, removed = [], []
    for entry in pack.media_files or []:
        (removed if entry.get("url") in urls else kept).append(entry)
    _set_files(pack, kept)
    return removed


def transfer_files(source: AdminMediaPack, target: AdminMediaPack, urls: Iterable[str]) -> int:
    """
    Move the selected files from ``source`` to ``target``.

    Both packs are modified in memory; the caller commits once so the move
    is atomic. Raises ValueError when nothing matches or the packs are the same.
    """
    if source.id == target.id:
        raise ValueError("Source and target pack must be different")
    moved = remove_files(source, urls)
    if not moved:
        raise ValueError("None of the selected files belong to the source pack")
    add_files(target, moved)
    return len(moved)


def is_accessible(pack: AdminMediaPack, user_plan: PlanType) -> bool:
    return plan_allows(user_plan, pack.min_plan or PlanType.FREE)
