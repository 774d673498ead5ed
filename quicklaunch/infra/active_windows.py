import json
import shutil
import subprocess

from logly import logger


def find_hyprctl_executable() -> str | None:
    """Finds the Hyprland control utility, if installed."""
    return shutil.which("hyprctl")


def build_clients_argv(executable: str) -> list[str]:
    return [executable, "clients", "-j"]


def parse_window_classes(text: str) -> list[str]:
    """Extracts window class names from `hyprctl clients -j` output."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return []
    if not isinstance(data, list):
        return []

    classes: list[str] = []
    for client in data:
        if not isinstance(client, dict):
            continue
        cls = client.get("class")
        if isinstance(cls, str) and cls.strip():
            classes.append(cls.strip())
    return classes


def active_window_classes(timeout_sec: int = 1) -> list[str]:
    """Returns the classes of currently open windows.

    Best effort: a missing compositor tool or a failed query yields an empty list.
    """
    executable = find_hyprctl_executable()
    if executable is None:
        return []
    try:
        result = subprocess.run(
            build_clients_argv(executable),
            capture_output=True,
            text=True,
            timeout=timeout_sec,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Active window probe failed error={e}")
        return []
    if result.returncode != 0:
        return []
    return parse_window_classes(result.stdout)
