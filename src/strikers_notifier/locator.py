"""Locate the Omega Strikers log file.

Unix-based systems: the game runs under Proton, so the Steam library holding
the game is found through Steam's ``libraryfolders.vdf`` and the log is read
from the matching ``compatdata`` prefix.

Windows: the log lives in the user's local AppData folder.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .errors import LocatorError
from .notifier import STEAM_APP_ID

logger = logging.getLogger(__name__)

LIBRARY_FOLDERS_VDF = Path(".local/share/Steam/config/libraryfolders.vdf")
GAME_LOG_SUBPATH = Path("AppData/Local/OmegaStrikers/Saved/Logs/OmegaStrikers.log")
PROTON_USER_DIR = Path(f"steamapps/compatdata/{STEAM_APP_ID}/pfx/drive_c/users/steamuser")


def find_log_file(platform: str | None = None, home: Path | None = None) -> Path:
    """Return the path to the game's log file.

    Args:
        platform: Override for ``sys.platform``.
        home: Override for the user's home directory.

    Raises:
        LocatorError: If the platform is unsupported or the Steam library
            holding the game cannot be found.
    """
    platform = platform or sys.platform
    home = home or Path.home()

    if platform.startswith("win"):
        log_path = home / GAME_LOG_SUBPATH
    elif platform.startswith("linux") or "bsd" in platform:
        library = find_steam_library(home / LIBRARY_FOLDERS_VDF)
        logger.info(f"Found installation directory at {library}")
        log_path = library / PROTON_USER_DIR / GAME_LOG_SUBPATH
    else:
        raise LocatorError(f"Unsupported operating system: {platform}")

    logger.info(f"Found log file at {log_path}")
    return log_path


def find_steam_library(vdf_path: Path, app_id: int = STEAM_APP_ID) -> Path:
    """Find the Steam library folder that contains ``app_id``.

    ``libraryfolders.vdf`` lists each library's ``"path"`` followed by the
    ids of the apps installed there, one tab-separated key/value per line.

    Raises:
        LocatorError: If the file cannot be read or lists no library with
            the app.
    """
    try:
        content = vdf_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LocatorError(f"Cannot read Steam library list {vdf_path}: {e}") from e

    library: Path | None = None
    for line in content.splitlines():
        parts = [p for p in line.strip().replace('"', "").split("\t") if p]
        if not parts:
            continue

        key = parts[0]
        if key == "path" and len(parts) > 1:
            library = Path(parts[1])
        elif key == str(app_id) and library is not None:
            return library

    raise LocatorError(f"No Steam library in {vdf_path} contains app {app_id}")
