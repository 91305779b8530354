from __future__ import annotations

from loguru import logger

DEFAULT_LEVEL = "INFO"


class Logger:
    """Leveled logger facade over loguru.

    Components receive one of these at construction; messages are tagged with
    the component name through ``logger.bind``.
    """

    def __init__(self, name: str, level: str = DEFAULT_LEVEL) -> None:
        self.name = name
        self.level = level.upper()
        self._logger = logger.bind(component=name)

    def is_enabled(self, level: str) -> bool:
        return logger.level(level.upper()).no >= logger.level(self.level).no

    def debug(self, message: str, exc: BaseException | None = None) -> None:
        self._log("DEBUG", message, exc)

    def info(self, message: str, exc: BaseException | None = None) -> None:
        self._log("INFO", message, exc)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._log("WARNING", message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log("ERROR", message, exc)

    def _log(self, level: str, message: str, exc: BaseException | None) -> None:
        if not self.is_enabled(level):
            return
        if exc is not None:
            self._logger.opt(exception=exc).log(level, message)
        else:
            self._logger.log(level, message)


def get_logger(name: str, level: str = DEFAULT_LEVEL) -> Logger:
    return Logger(name, level)
