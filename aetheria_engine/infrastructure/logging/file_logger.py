import logging

from aetheria_engine.application.ports.logger import ILogger

LOGGER_NAME = "aetheria_engine"


class FileLogger(ILogger):
    """A concrete implementation of ILogger that writes the engine's diagnostics to a file."""

    def __init__(self, log_file: str = "game.log", level: int = logging.DEBUG):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        # Avoid adding duplicate handlers if this class is instantiated multiple times
        if not self.logger.handlers:
            handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            handler.setLevel(level)
            handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(handler)

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)
