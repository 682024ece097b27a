# docvault/utils/logging.py
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from ..config import Settings, settings

LOG_DIR = settings.LOGS_PATH
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Console output is colored, log files stay plain
console_formatter = logging.Formatter(
    '\033[1;36m%(asctime)s\033[0m - \033[1;33m%(name)s\033[0m - \033[1;35m%(levelname)s\033[0m [\033[1;34m%(module)s:%(lineno)d\033[0m] - %(message)s'
)
file_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s [%(module)s:%(lineno)d] - %(message)s'
)

RESERVED_ATTRS = frozenset({
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'taskName', 'thread', 'threadName'
})


_registry: Dict[str, "DocVaultLogger"] = {}


class DocVaultLogger:
    """Component logger that keeps `extra` fields from clobbering LogRecord attributes"""

    def __init__(self, name: str, level: str = settings.LOG_LEVEL):
        self.name = name
        self.logger = logging.getLogger(f"docvault.{name}")
        self.logger.setLevel(level.upper())
        self.setup_handlers(LOG_DIR)
        _registry[name] = self

    def _file_handler(self, log_dir: Path) -> RotatingFileHandler:
        # delay: the file is only created once something is logged
        file_handler = RotatingFileHandler(
            log_dir / f"{self.name}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
            delay=True
        )
        file_handler.setFormatter(file_formatter)
        return file_handler

    def setup_handlers(self, log_dir: Path):
        """Set up file and console handlers"""
        if self.logger.handlers:
            return

        self.logger.addHandler(self._file_handler(log_dir))

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

    def use_log_dir(self, log_dir: Path):
        """Swap the rotating file handler over to another directory"""
        for handler in list(self.logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                self.logger.removeHandler(handler)
                handler.close()
        self.logger.addHandler(self._file_handler(log_dir))

    @staticmethod
    def _sanitize_extra(extra):
        if extra is None:
            return None

        return {
            (f"extra_{key}" if key in RESERVED_ATTRS else key): value
            for key, value in extra.items()
        }

    def debug(self, msg, extra=None, exc_info=None):
        self.logger.debug(msg, extra=self._sanitize_extra(extra), exc_info=exc_info)

    def info(self, msg, extra=None, exc_info=None):
        self.logger.info(msg, extra=self._sanitize_extra(extra), exc_info=exc_info)

    def warning(self, msg, extra=None, exc_info=None):
        self.logger.warning(msg, extra=self._sanitize_extra(extra), exc_info=exc_info)

    def error(self, msg, extra=None, exc_info=None):
        self.logger.error(msg, extra=self._sanitize_extra(extra), exc_info=exc_info)

    def critical(self, msg, extra=None, exc_info=None):
        self.logger.critical(msg, extra=self._sanitize_extra(extra), exc_info=exc_info)


def configure_logging(app_settings: Settings) -> None:
    """Apply an app's log directory and level to every component logger"""
    log_dir = Path(app_settings.LOGS_PATH)
    log_dir.mkdir(parents=True, exist_ok=True)
    for component in _registry.values():
        component.logger.setLevel(app_settings.LOG_LEVEL.upper())
        component.use_log_dir(log_dir)


api_logger = DocVaultLogger("api")
db_logger = DocVaultLogger("database")
storage_logger = DocVaultLogger("storage")
service_logger = DocVaultLogger("service")

__all__ = ["DocVaultLogger", "configure_logging", "api_logger", "db_logger", "storage_logger", "service_logger"]
