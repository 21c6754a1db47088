"""In-memory stand-ins for Supabase, ffmpeg, Groq and OpenRouter."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

from postgrest import APIError
from storage3.exceptions import StorageApiError
from supabase_auth.errors import AuthApiError

from vdfy.services.transcoder import TranscodeError

_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


@dataclass
class StoredBlob:
    data: bytes
    content_type: str
    created_at: datetime


class FakeBucket:
    def __init__(self, storage: FakeStorage, name: str) -> None:
        self._storage = storage
        self._name = name

    @property
    def blobs(self) -> dict[str, StoredBlob]:
        return self._storage.buckets.setdefault(self._name, {})

    async def upload(self, path: str, file: bytes, file_options: dict[str, str] | None = None) -> None:
        self._storage.calls.append(("upload", path))
        if self._storage.fail_upload_suffix and path.endswith(self._storage.fail_upload_suffix):
            raise StorageApiError("Upload rejected", self._storage.fail_code, self._storage.fail_status)
        content_type = (file_options or {}).get("content-type", "application/octet-stream")
        self._storage.clock += 1
        self.blobs[path] = StoredBlob(
            data=file,
            content_type=content_type,
            created_at=_BASE_TIME + timedelta(seconds=self._storage.clock),
        )

    async def remove(self, paths: list[str]) -> list[dict[str, Any]]:
        self._storage.calls.append(("remove", *paths))
        removed = []
        for path in paths:
            if self._storage.fail_removes:
                raise StorageApiError("Remove rejected", self._storage.fail_code, self._storage.fail_status)
            if self.blobs.pop(path, None) is not None:
                removed.append({"name": path})
        return removed

    async def download(self, path: str) -> bytes:
        blob = self.blobs.get(path)
        if blob is None:
            raise StorageApiError("Object not found", "NoSuchKey", 404)
        return blob.data

    async def list(self, path: str | None = None, options: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        if self._storage.fail_lists:
            raise StorageApiError("List rejected", "InternalError", 500)
        folder = (path or "").strip("/")
        prefix = f"{folder}/" if folder else ""
        files: dict[str, StoredBlob] = {}
        folders: set[str] = set()
        for key, blob in self.blobs.items():
            if not key.startswith(prefix):
                continue
            head, sep, _ = key[len(prefix) :].partition("/")
            if sep:
                folders.add(head)
            else:
                files[head] = blob

        entries: list[dict[str, Any]] = [{"name": name, "id": None} for name in sorted(folders)]
        for name in sorted(files):
            entries.append(
                {
                    "name": name,
                    "id": f"obj-{name}",
                    "created_at": files[name].created_at.isoformat().replace("+00:00", "Z"),
                }
            )
        options = options or {}
        offset = int(options.get("offset", 0))
        limit = int(options.get("limit", 100))
        return entries[offset : offset + limit]


class FakeStorage:
    def __init__(self) -> None:
        self.buckets: dict[str, dict[str, StoredBlob]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.fail_upload_suffix: str | None = None
        self.fail_removes = False
        self.fail_lists = False
        # Provider error code and status the failure knobs above raise with.
        self.fail_code = "InternalError"
        self.fail_status = 500
        self.clock = 0

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def mutations(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] in {"upload", "remove"}]


class FakeQuery:
    def __init__(self, table: FakeTable) -> None:
        self._table = table
        self._op = "select"
        self._payload: dict[str, Any] | None = None
        self._filters: list[tuple[str, Any]] = []
        self._limit: int | None = None

    def select(self, _columns: str = "*") -> FakeQuery:
        self._op = "select"
        return self

    def insert(self, row: dict[str, Any]) -> FakeQuery:
        self._op = "insert"
        self._payload = row
        return self

    def delete(self) -> FakeQuery:
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append((column, value))
        return self

    def limit(self, count: int) -> FakeQuery:
        self._limit = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    async def execute(self) -> SimpleNamespace:
        table = self._table
        if table.error is not None:
            raise table.error
        if self._op == "insert":
            assert self._payload is not None
            if any(row["id"] == self._payload["id"] for row in table.rows):
                raise APIError({"code": "23505", "message": "duplicate key value violates unique constraint"})
            table.rows.append(dict(self._payload))
            return SimpleNamespace(data=[dict(self._payload)])
        if self._op == "delete":
            deleted = [row for row in table.rows if self._matches(row)]
            table.rows[:] = [row for row in table.rows if not self._matches(row)]
            return SimpleNamespace(data=deleted)
        found = [dict(row) for row in table.rows if self._matches(row)]
        if self._limit is not None:
            found = found[: self._limit]
        return SimpleNamespace(data=found)


class FakeTable:
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.error: Exception | None = None


class FakeAuth:
    """`auth.get_user` that knows a fixed set of first-party tokens."""

    def __init__(self) -> None:
        self.users: dict[str, tuple[str, str | None]] = {}

    async def get_user(self, jwt: str | None = None) -> SimpleNamespace:
        if jwt not in self.users:
            raise AuthApiError("invalid JWT", 401, "bad_jwt")
        user_id, email = self.users[jwt]
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


class FakeSupabase:
    def __init__(self) -> None:
        self.storage = FakeStorage()
        self.tables: dict[str, FakeTable] = {}
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))

    def rows(self, name: str = "short_links") -> list[dict[str, Any]]:
        return self.tables.setdefault(name, FakeTable()).rows

    def fail_table(self, error: Exception, name: str = "short_links") -> None:
        self.tables.setdefault(name, FakeTable()).error = error


@dataclass
class FakeTranscoder:
    error: str | None = None
    calls: list[tuple[pathlib.Path, pathlib.Path]] = field(default_factory=list)

    async def __call__(self, input_path: pathlib.Path, output_path: pathlib.Path) -> pathlib.Path:
        self.calls.append((input_path, output_path))
        if self.error is not None:
            raise TranscodeError(self.error)
        output_path.write_bytes(b"h264:" + input_path.read_bytes())
        return output_path


@dataclass
class FakeTranscriber:
    text: str = "  hello from the recording\n"
    error: Exception | None = None
    calls: list[pathlib.Path] = field(default_factory=list)

    async def __call__(self, media_path: pathlib.Path) -> str:
        self.calls.append(media_path)
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeSummarizer:
    summary: str = "A short summary."
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def __call__(self, text: str) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.summary


def short_links_outage() -> APIError:
    return APIError({"code": "PGRST301", "message": "table unavailable"})
