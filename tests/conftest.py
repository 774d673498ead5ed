from collections.abc import Callable
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication

FIREFOX_DESKTOP = """\
[Desktop Entry]
Type=Application
Name=Firefox
Name[de]=Feuerfuchs
Comment=Browse the Web
GenericName=Web Browser
Exec=firefox %u
Icon=firefox
Keywords=web;browser;internet;
Categories=Network;WebBrowser;
Actions=new-window;new-private-window;broken;

[Desktop Action new-window]
Name=New Window
Exec=firefox --new-window %u

[Desktop Action new-private-window]
Name=New Private Window
Exec=firefox --private-window %u
Icon=firefox-private

[Desktop Action broken]
Name=Broken Action
"""


def desktop_text(name: str, exec_cmd: str = "", **extra: str) -> str:
    lines = ["[Desktop Entry]", "Type=Application", f"Name={name}"]
    lines.append(f"Exec={exec_cmd or name.lower()}")
    for key, value in extra.items():
        lines.append(f"{key}={value}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_desktop(tmp_path: Path) -> Callable[..., Path]:
    def _write(filename: str, text: str, directory: Path | None = None) -> Path:
        target_dir = directory or tmp_path / "applications"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / filename
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def firefox_text() -> str:
    return FIREFOX_DESKTOP


@pytest.fixture
def make_desktop_text() -> Callable[..., str]:
    return desktop_text
