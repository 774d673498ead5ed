import os
from pathlib import Path
from typing import Final

DESKTOP_PATHS: Final[tuple[str, ...]] = (
    "/usr/share/applications",
    "/usr/local/share/applications",
    "/var/lib/flatpak/exports/share/applications",
    "~/.local/share/applications",
    "~/.local/share/flatpak/exports/share/applications",
)


def get_desktop_paths() -> list[Path]:
    """Returns the directories scanned for `.desktop` descriptors.

    `XDG_DATA_DIRS` entries come first, then the standard system locations, then
    the per-user locations. Duplicates keep their first position.
    """
    candidates: list[str] = []
    xdg_dirs = os.environ.get("XDG_DATA_DIRS", "")
    candidates.extend(
        os.path.join(d, "applications") for d in xdg_dirs.split(":") if d
    )
    candidates.extend(os.path.expanduser(p) for p in DESKTOP_PATHS)

    paths: list[Path] = []
    seen: set[str] = set()
    for candidate in candidates:
        normalized = os.path.normpath(candidate)
        if normalized in seen:
            continue
        seen.add(normalized)
        paths.append(Path(normalized))
    return paths
