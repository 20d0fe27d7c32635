import inspect
import logging.handlers
import os
from pathlib import Path

APP_ROOT = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_FILE = LOG_DIR / "tespa_bot.log"
FORMAT = "%(asctime)s - [%(levelname)s] - %(location)s(): %(message)s {%(lineno)d}"


def _module_path(pathname: str) -> str:
    """``app/tespa/__init__.py`` -> ``tespa``, files outside ``app`` keep their stem."""
    path = Path(pathname).resolve()
    try:
        parts = list(path.relative_to(APP_ROOT).with_suffix("").parts)
    except ValueError:
        return path.stem
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) or path.stem


def _caller_class(func_name: str) -> str:
    frame = inspect.currentframe()
    while frame:
        if frame.f_code.co_name == func_name:
            owner = frame.f_locals.get("self")
            if owner is not None:
                return type(owner).__name__
        frame = frame.f_back
    return ""


class LocationFilter(logging.Filter):
    """Adds ``location`` (module.Class.function) to every record."""

    def filter(self, record):
        segments = [_module_path(record.pathname), _caller_class(record.funcName), record.funcName]
        record.location = ".".join(s for s in segments if s)
        return True


def build_logger(name: str) -> logging.Logger:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(FORMAT)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        LOG_FILE, when="midnight", interval=1, backupCount=5, encoding="utf-8"
    )
    console = logging.StreamHandler()
    for handler in (file_handler, console):
        handler.setFormatter(formatter)

    built = logging.getLogger(name)
    built.setLevel(os.getenv("LOG_LEVEL", "DEBUG").upper())
    built.addFilter(LocationFilter())
    built.addHandler(file_handler)
    built.addHandler(console)
    built.propagate = False
    return built


logger = build_logger("TespaBot")
