import os
import stat
import subprocess
from collections.abc import Callable
from typing import Final

from logly import logger

from quicklaunch.core.entry_types import FALLBACK_ICON, CatalogueEntry, EntryKind

BINARY_DIR: Final[str] = "/usr/bin"
BINARY_SCORE: Final[int] = 3_000
FOLDER_BOOST: Final[int] = 2_000
_EXEC_BITS: Final[int] = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

MimeLookup = Callable[[str], str | None]


def file_mime_type(path: str, timeout_sec: int = 2) -> str | None:
    """Looks up a file's MIME type with the `file` command.

    Returns:
        The MIME type, or None if the lookup fails.
    """
    try:
        result = subprocess.run(
            ["file", "--mime-type", "-b", path],
            capture_output=True,
            text=True,
            timeout=timeout_sec,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"MIME lookup failed path={path} error={e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def icon_for_mime(path: str, mime_type: str) -> str:
    if mime_type.startswith("text/"):
        return "text-x-generic"
    if path.lower().endswith(".pdf"):
        return "application-pdf"
    return "application-x-generic"


def create_file_entry(
    path: str, mime_lookup: MimeLookup = file_mime_type
) -> CatalogueEntry | None:
    """Builds a catalogue entry for a filesystem path.

    Directories become folders with a static boost, files with an execute bit
    run directly, anything else opens with `xdg-open`.

    Returns:
        The entry, or None if the path is missing, not a regular file or
        directory, or its MIME type cannot be determined.
    """
    if path.startswith(("~", "$")):
        path = os.path.expandvars(os.path.expanduser(path))

    try:
        st = os.stat(path)
    except OSError:
        return None

    name = os.path.basename(os.path.normpath(path)) or path
    if stat.S_ISDIR(st.st_mode):
        return CatalogueEntry(
            name=name,
            path=path,
            icon="folder",
            kind=EntryKind.FILE,
            score_boost=FOLDER_BOOST,
        )
    if not stat.S_ISREG(st.st_mode):
        return None

    if st.st_mode & _EXEC_BITS:
        return CatalogueEntry(
            name=name, path=path, exec=f'"{path}"', icon=FALLBACK_ICON, kind=EntryKind.FILE
        )

    mime_type = mime_lookup(path)
    if mime_type is None:
        return None
    return CatalogueEntry(
        name=name,
        path=path,
        exec=f'xdg-open "{path}"',
        icon=icon_for_mime(path, mime_type),
        kind=EntryKind.FILE,
    )


def find_binary(query: str, binary_dir: str = BINARY_DIR) -> CatalogueEntry | None:
    """Probes `binary_dir` for an executable named after the query's first token.

    Remaining tokens are appended to the command line as arguments.
    """
    parts = query.split()
    if not parts or "/" in parts[0]:
        return None

    bin_path = os.path.join(binary_dir, parts[0])
    try:
        st = os.stat(bin_path)
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode) or not st.st_mode & _EXEC_BITS:
        return None

    command = " ".join([bin_path, *parts[1:]])
    return CatalogueEntry(
        name=query,
        path=bin_path,
        exec=command,
        icon=FALLBACK_ICON,
        kind=EntryKind.FILE,
        score_boost=BINARY_SCORE,
    )
