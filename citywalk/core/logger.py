import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from citywalk.config import settings


class LoggerConfig:
    """
    Logger configuration for the application.
    File logging is only enabled when a log directory is given.
    """

    def __init__(
        self,
        level: int = logging.INFO,
        logger_name: str = "citywalk",
        log_directory: Optional[str] = None,
        log_file: str = "citywalk.log",
    ):
        self.logger_name = logger_name
        self.level = level
        self.log_directory = os.path.abspath(log_directory) if log_directory else None
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

        self.logger = logging.getLogger(self.logger_name)
        self.setup_logger(log_file)

    def setup_logger(self, log_file: str) -> None:
        formatter = logging.Formatter(self.log_format)

        # Avoid adding duplicate handlers if re-initialized
        if not self.logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(self.level)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            if self.log_directory:
                os.makedirs(self.log_directory, exist_ok=True)
                file_handler = RotatingFileHandler(
                    os.path.join(self.log_directory, log_file),
                    backupCount=5,
                    maxBytes=1024 * 1024 * 10,
                    encoding="utf-8",
                )
                file_handler.setLevel(self.level)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

        self.logger.setLevel(self.level)


def setup_logging() -> logging.Logger:
    """Configure the package logger from settings"""
    return LoggerConfig(
        level=settings.log_level, log_directory=settings.log_directory
    ).logger
