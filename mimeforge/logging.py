from __future__ import annotations

import logging.config
import threading
from abc import ABC, abstractmethod
from typing import Annotated, Any, cast

from typing_extensions import Doc

from mimeforge.protocols.logging import LoggerProtocol


class LoggerProxy:
    """
    Proxy for the real logger used by Mimeforge.
    """

    def __init__(self) -> None:
        self._logger: LoggerProtocol | None = None
        self._lock: threading.RLock = threading.RLock()

    def bind_logger(self, logger: LoggerProtocol | None) -> None:  # noqa
        with self._lock:
            self._logger = logger

    def __getattr__(self, item: str) -> Any:
        with self._lock:
            if not self._logger:
                # Unconfigured: use the plain logger and leave the host's logging alone.
                self._logger = logging.getLogger("mimeforge")
            return getattr(self._logger, item)


logger: LoggerProtocol = cast(LoggerProtocol, LoggerProxy())


class LoggingConfig(ABC):
    """
    Base configuration for the logger used by the builders.

    Subclass it to plug in `loguru`, `structlog` or anything exposing a
    `debug` method. Until `setup_logging` is called, the plain `mimeforge`
    logger is used as-is.

    **Example**

    ```python
    from mimeforge.logging import StandardLoggingConfig, setup_logging

    setup_logging(StandardLoggingConfig(level="INFO"))
    ```
    """

    __logging_levels__: list[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    def __init__(
        self,
        level: Annotated[
            str,
            Doc(
                """
                The logging level.
                """
            ),
        ] = "DEBUG",
        **kwargs: Any,
    ) -> None:
        levels: str = ", ".join(self.__logging_levels__)
        assert level.upper() in self.__logging_levels__, (
            f"'{level}' is not a valid logging level. Available levels: '{levels}'."
        )

        self.level = level.upper()
        self.skip_setup_configure: bool = kwargs.get("skip_setup_configure", False)

    def configure(self) -> None:
        """
        Configures the logging backend. Nothing to do by default.
        """

    @abstractmethod
    def get_logger(self) -> Any:
        """
        Returns the logger instance.
        """
        raise NotImplementedError("`get_logger()` must be implemented in subclasses.")


class StandardLoggingConfig(LoggingConfig):
    def __init__(self, config: dict[str, Any] | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.config = config or self.default_config()

    def default_config(self) -> dict[str, Any]:  # noqa
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "mimeforge": {
                    "level": self.level,
                    "handlers": ["console"],
                    "propagate": True,
                },
            },
        }

    def configure(self) -> None:
        logging.config.dictConfig(self.config)

    def get_logger(self) -> Any:
        return logging.getLogger("mimeforge")


def setup_logging(logging_config: LoggingConfig | None = None) -> None:
    """
    Sets up the logging system used by the builders.

    If a custom `LoggingConfig` is provided, it will be used to configure
    the logging system. Otherwise, the `logging_config` of the active settings
    is applied.

    Args:
        logging_config: An optional instance of `LoggingConfig`.

    Raises:
        ValueError: If the provided `logging_config` is not an instance of `LoggingConfig`.
    """
    if logging_config is not None and not isinstance(logging_config, LoggingConfig):
        raise ValueError("`logging_config` must be an instance of LoggingConfig.")

    if logging_config is None:
        from mimeforge.conf import settings

        logging_config = settings.logging_config

    if not logging_config.skip_setup_configure:
        logging_config.configure()

    _logger = logging_config.get_logger()
    logger.bind_logger(_logger)
