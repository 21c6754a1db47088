"""Tests for best-effort cleanup steps."""

from vdfy.core.cleanup import remove_local_file, run_cleanup


def test_remove_existing_file(tmp_path):
    path = tmp_path / "upload_1"
    path.write_bytes(b"x")

    result = remove_local_file(path)

    assert result.ok
    assert not path.exists()


def test_remove_absent_file_is_ok(tmp_path):
    assert remove_local_file(tmp_path / "never-written").ok
    assert remove_local_file(None).ok


def test_remove_failure_is_reported(tmp_path):
    directory = tmp_path / "a-directory"
    directory.mkdir()

    result = remove_local_file(directory)

    assert not result.ok
    assert result.error


async def test_run_cleanup_captures_errors():
    async def boom():
        raise RuntimeError("remote delete failed")

    result = await run_cleanup("users/a/b/rec_1.txt", boom)

    assert result.target == "users/a/b/rec_1.txt"
    assert not result.ok
    assert result.error == "remote delete failed"


async def test_run_cleanup_success():
    async def noop():
        return None

    assert (await run_cleanup("target", noop)).ok
