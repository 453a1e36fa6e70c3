import sys

import pytest

from rakudict import paths


@pytest.fixture
def posix_home(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def windows_appdata(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path))
    return tmp_path


def test_dict_dir_posix(posix_home):
    assert paths.dict_dir() == posix_home / ".config" / "rakukan" / "dict"


def test_user_dict_path_posix(posix_home):
    assert paths.user_dict_path() == posix_home / ".config" / "rakukan" / "user_dict.toml"


def test_dict_dir_windows(windows_appdata):
    assert paths.dict_dir() == windows_appdata / "rakukan" / "dict"


def test_user_dict_path_windows(windows_appdata):
    assert paths.user_dict_path() == windows_appdata / "rakukan" / "user_dict.toml"


def test_missing_home_gives_none(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.delenv("HOME", raising=False)
    assert paths.dict_dir() is None
    assert paths.user_dict_path() is None
    assert paths.find_mozc_dict() is None
    assert paths.find_skk_jisyo() == []


def test_missing_appdata_gives_none(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("APPDATA", raising=False)
    assert paths.dict_dir() is None


def test_find_mozc_dict_absent(posix_home):
    assert paths.find_mozc_dict() is None


def test_find_mozc_dict_present(posix_home):
    directory = paths.dict_dir()
    directory.mkdir(parents=True)
    (directory / "rakukan.dict").write_bytes(b"RKND")
    assert paths.find_mozc_dict() == directory / "rakukan.dict"


def test_find_skk_jisyo_priority_order(posix_home):
    directory = paths.dict_dir()
    directory.mkdir(parents=True)
    for name in ("SKK-JISYO.S", "SKK-JISYO.L", "SKK-JISYO.M"):
        (directory / name).write_text("", encoding="utf-8")
    found = paths.find_skk_jisyo()
    assert [p.name for p in found] == ["SKK-JISYO.L", "SKK-JISYO.M", "SKK-JISYO.S"]


def test_find_skk_jisyo_none_installed(posix_home):
    assert paths.find_skk_jisyo() == []