import os
from pathlib import Path
from typing import Final

from logly import _LoggerProxy, logger

LOG_FILE_NAME: Final[str] = "quicklaunch.log"


def default_log_dir() -> Path:
    """Returns `$XDG_STATE_HOME/quicklaunch`."""
    state_home = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return Path(state_home) / "quicklaunch"


def init_logger(level: str = "INFO", log_dir: Path | None = None) -> _LoggerProxy:
    """Initialize the logger.

    Configures console output and a size-rotated log file under `log_dir`.

    """
    log_dir = log_dir or default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.configure(
        level=level,
        color=True,
        console=True,
        auto_sink=True,
    )

    logger.add(f"{log_dir}/{LOG_FILE_NAME}", size_limit="10MB", retention=3)

    logger.debug("logger initialized!")

    return logger
