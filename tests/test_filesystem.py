import os
import shutil
import time
from collections import namedtuple

from housekeeper.filesystem import (
    delete_old_files,
    file_age_days,
    get_fs_usage,
    list_regular_files,
)

DAY = 86400
DiskUsage = namedtuple("DiskUsage", "total used free")


def make_file(path, age_days, now, content=b"x" * 10):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    mtime = now - age_days * DAY - 60
    os.utime(path, (mtime, mtime))
    return path


def test_usage_is_rounded_up_like_df(monkeypatch):
    # 5% reserved blocks are not counted as available
    monkeypatch.setattr(shutil, "disk_usage", lambda path: DiskUsage(100, 50, 40))
    assert get_fs_usage("/") == 56


def test_usage_exact_percentage(monkeypatch):
    monkeypatch.setattr(shutil, "disk_usage", lambda path: DiskUsage(200, 170, 30))
    assert get_fs_usage("/") == 85


def test_file_age_is_floored(tmp_path):
    now = time.time()
    path = make_file(tmp_path / "a.log", 3, now)
    assert file_age_days(str(path), now) == 3
    assert file_age_days(str(path), now + DAY / 2) == 3


def test_delete_old_files_uses_strictly_greater_age(tmp_path):
    now = time.time()
    kept = make_file(tmp_path / "seven.tmp", 7, now)
    removed = make_file(tmp_path / "nested" / "eight.tmp", 8, now)

    count, size = delete_old_files(str(tmp_path), 7, now=now)

    assert (count, size) == (1, 10)
    assert kept.exists()
    assert not removed.exists()


def test_delete_old_files_with_patterns(tmp_path):
    now = time.time()
    log = make_file(tmp_path / "app.log", 40, now)
    archive = make_file(tmp_path / "app.log.1.gz", 40, now)
    other = make_file(tmp_path / "app.conf", 40, now)

    count, _ = delete_old_files(str(tmp_path), 30, ("*.log", "*.gz"), now=now)

    assert count == 2
    assert not log.exists()
    assert not archive.exists()
    assert other.exists()


def test_delete_old_files_dry_run_keeps_files(tmp_path):
    now = time.time()
    old = make_file(tmp_path / "old.bin", 100, now, b"y" * 2048)

    assert delete_old_files(str(tmp_path), 90, dry_run=True, now=now) == (1, 2048)
    assert old.exists()


def test_delete_old_files_leaves_symlinks(tmp_path):
    now = time.time()
    target = make_file(tmp_path / "keep" / "target.txt", 0, now)
    link = tmp_path / "old-link"
    os.symlink(target, link)
    os.utime(link, (now - 50 * DAY, now - 50 * DAY), follow_symlinks=False)

    assert delete_old_files(str(tmp_path), 1, now=now) == (0, 0)
    assert os.path.islink(link)


def test_delete_old_files_missing_directory(tmp_path):
    assert delete_old_files(str(tmp_path / "missing"), 1) == (0, 0)


def test_list_regular_files_skips_directories(tmp_path):
    (tmp_path / "b.csv").write_text("b")
    (tmp_path / "a.csv").write_text("a")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.csv").write_text("c")

    assert list_regular_files(str(tmp_path)) == ["a.csv", "b.csv"]
