"""Unit tests for locator.py - game log discovery."""

from pathlib import Path

import pytest

from strikers_notifier.errors import LocatorError
from strikers_notifier.locator import find_log_file, find_steam_library

LIBRARY_FOLDERS = """\
"libraryfolders"
{
\t"0"
\t{
\t\t"path"\t\t"/home/player/.local/share/Steam"
\t\t"label"\t\t""
\t\t"apps"
\t\t{
\t\t\t"228980"\t\t"295825422"
\t\t}
\t}
\t"1"
\t{
\t\t"path"\t\t"/mnt/games/Steam Library"
\t\t"apps"
\t\t{
\t\t\t"1869590"\t\t"4313451212"
\t\t}
\t}
}
"""


@pytest.fixture
def steam_home(tmp_path: Path) -> Path:
    vdf = tmp_path / ".local/share/Steam/config/libraryfolders.vdf"
    vdf.parent.mkdir(parents=True)
    vdf.write_text(LIBRARY_FOLDERS)
    return tmp_path


class TestFindSteamLibrary:
    def test_library_containing_game(self, steam_home: Path):
        vdf = steam_home / ".local/share/Steam/config/libraryfolders.vdf"

        assert find_steam_library(vdf) == Path("/mnt/games/Steam Library")

    def test_game_not_installed(self, steam_home: Path):
        vdf = steam_home / ".local/share/Steam/config/libraryfolders.vdf"

        with pytest.raises(LocatorError, match="app 42"):
            find_steam_library(vdf, app_id=42)

    def test_unreadable_file(self, tmp_path: Path):
        with pytest.raises(LocatorError, match="Cannot read"):
            find_steam_library(tmp_path / "missing.vdf")


class TestFindLogFile:
    def test_linux_proton_prefix(self, steam_home: Path):
        log_path = find_log_file(platform="linux", home=steam_home)

        assert log_path == Path(
            "/mnt/games/Steam Library/steamapps/compatdata/1869590/pfx/drive_c/users/steamuser"
            "/AppData/Local/OmegaStrikers/Saved/Logs/OmegaStrikers.log"
        )

    def test_linux_without_steam(self, tmp_path: Path):
        with pytest.raises(LocatorError):
            find_log_file(platform="linux", home=tmp_path)

    def test_windows_appdata(self, tmp_path: Path):
        log_path = find_log_file(platform="win32", home=tmp_path)

        assert log_path == tmp_path / "AppData/Local/OmegaStrikers/Saved/Logs/OmegaStrikers.log"

    def test_unsupported_platform(self, tmp_path: Path):
        with pytest.raises(LocatorError, match="Unsupported operating system"):
            find_log_file(platform="darwin", home=tmp_path)
