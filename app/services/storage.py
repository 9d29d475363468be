"""
Object storage for product images and media packs.

Two backends, selected by ``STORAGE_BACKEND``:

- ``supabase``: the Supabase Storage client (``supabase`` SDK) authenticated
  with the service key; objects are served from the public bucket URL.
- ``local``: files written under ``UPLOAD_BASE_DIR/{bucket}/{path}`` and
  served from ``PUBLIC_BASE_URL``.

Uploaded bytes are forwarded unmodified. Object paths are
``uploads/{timestamp}_{random}_{safe_name}``.
"""
import logging
import re
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from supabase import Client, create_client

from app.config import settings

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")

# (filename, content, content_type)
FileInput = Tuple[str, bytes, Optional[str]]

_supabase: Optional[Client] = None


class StorageError(Exception):
    """Upload or delete rejected by the storage provider."""


@dataclass
class BulkUploadResult:
    uploaded: List[dict] = field(default_factory=list)
    failed: List[dict] = field(default_factory=list)


def get_supabase_client() -> Client:
    """Lazily build the service-key client shared by all uploads."""
    global _supabase
    if _supabase is None:
        _supabase = create_client(settings.supabase_url, settings.storage_service_key)
    return _supabase


def build_object_path(filename: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    timestamp = int(now.timestamp() * 1000)
    random = uuid.uuid4().hex[:7]
    safe_name = _UNSAFE_CHARS.sub("_", filename or "file")
    return f"uploads/{timestamp}_{random}_{safe_name}"


def public_url(bucket: str, path: str) -> str:
    if settings.storage_backend == "supabase":
        return f"{settings.supabase_url.rstrip('/')}/storage/v1/object/public/{bucket}/{path}"
    return f"{settings.public_base_url.rstrip('/')}/{bucket}/{path}"


def path_from_url(bucket: str, url: str) -> Optional[str]:
    """Inverse of public_url; None when the URL is not in ``bucket``."""
    prefix = public_url(bucket, "")
    url = (url or "").split("?", 1)[0]
    if url.startswith(prefix):
        return url[len(prefix):]
    return None


def _put_object(bucket: str, path: str, content: bytes, content_type: Optional[str]) -> str:
    """Write one object and return its public URL."""
    if settings.storage_backend == "supabase":
        objects = get_supabase_client().storage.from_(bucket)
        try:
            objects.upload(
                path,
                content,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "upsert": "true",
                },
            )
        except Exception as e:
            raise StorageError(str(e)) from e
        return objects.get_public_url(path).split("?", 1)[0]

    target = Path(settings.upload_base_dir) / bucket / path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as e:
        raise StorageError(str(e)) from e
    return public_url(bucket, path)


def upload_file(bucket: str, filename: str, content: bytes, content_type: Optional[str] = None) -> dict:
    """
    Store one file and return its media entry.

    Returns:
        ``{"name", "url", "type", "size"}`` as kept in ``media_files``.
    """
    path = build_object_path(filename)
    url = _put_object(bucket, path, content, content_type)
    return {
        "name": filename,
        "url": url,
        "type": content_type or "application/octet-stream",
        "size": len(content),
    }


def delete_objects(bucket: str, paths: Sequence[str]):
    if not paths:
        return

    if settings.storage_backend == "supabase":
        try:
            get_supabase_client().storage.from_(bucket).remove(list(paths))
        except Exception as e:
            raise StorageError(str(e)) from e
        return

    base = Path(settings.upload_base_dir) / bucket
    for path in paths:
        (base / path).unlink(missing_ok=True)


class _Progress:
    def __init__(self, total: int, callback: Optional[Callable[[int, int, int], None]]):
        self.total = total
        self.completed = 0
        self.failed = 0
        self._callback = callback
        self._lock = threading.Lock()

    def record(self, ok: bool):
        with self._lock:
            if ok:
                self.completed += 1
            else:
                self.failed += 1
            completed, failed = self.completed, self.failed
        if self._callback:
            self._callback(completed, failed, self.total)


def bulk_upload(
    bucket: str,
    files: Sequence[FileInput],
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
    on_progress: Optional[Callable[[int, int, int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BulkUploadResult:
    """
    Upload many files with at most ``concurrency`` in flight.

    Each file is tried up to ``max_retries`` times, waiting ``2 ** attempt``
    seconds between attempts. Uploaded entries come back in input order;
    files that never succeed are listed in ``failed`` with the last error.
    """
    concurrency = max(1, concurrency or settings.upload_concurrency)
    max_retries = max(1, max_retries or settings.upload_max_retries)
    progress = _Progress(len(files), on_progress)

    def worker(item: FileInput):
        filename, content, content_type = item
        for attempt in range(1, max_retries + 1):
            try:
                entry = upload_file(bucket, filename, content, content_type)
            except StorageError as e:
                if attempt == max_retries:
                    logger.warning("Upload of %s failed after %d attempts: %s", filename, attempt, e)
                    progress.record(False)
                    return None, {"name": filename, "error": str(e)}
                sleep(2 ** attempt)
            else:
                progress.record(True)
                return entry, None

    result = BulkUploadResult()
    if not files:
        return result

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        for entry, failure in pool.map(worker, files):
            if entry is not None:
                result.uploaded.append(entry)
            else:
                result.failed.append(failure)

    logger.info(
        "Bulk upload to %s: %d uploaded, %d failed",
        bucket, len(result.uploaded), len(result.failed),
    )
    return result


def store_image(upload) -> str:
    """
    Store an uploaded image in the product images bucket and return its URL.

    Raises ValueError for non-image or oversized files, StorageError when the
    provider rejects the upload.
    """
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValueError("Only image files are accepted")
    content = upload.file.read()
    if len(content) > settings.max_upload_file_size_mb * 1024 * 1024:
        raise ValueError(f"File exceeds {settings.max_upload_file_size_mb} MB")
    entry = upload_file(settings.product_images_bucket, upload.filename or "image", content, content_type)
    return entry["url"]
