import logging
import sys


class Log:
    """Centralized logging with structured format.

    Keyword arguments are rendered after the message as ``key=value`` pairs
    so that run-level facts (document counts, tiers, scores) stay greppable.
    """

    _logger: logging.Logger = logging.getLogger("labmatch")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        """Log an info message."""
        cls._logger.info(cls._render(message, fields))

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        """Log a warning message."""
        cls._logger.warning(cls._render(message, fields))

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        """Log a debug message."""
        if cls._logger.isEnabledFor(logging.DEBUG):
            cls._logger.debug(cls._render(message, fields))

    @staticmethod
    def _render(message: str, fields: dict[str, object]) -> str:
        if not fields:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in fields.items())
        return f"{message} {pairs}"
