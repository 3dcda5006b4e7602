from datetime import timedelta
import logging
from pathlib import Path
import sys

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SPECIAL_CHARS = "^!(-_=)$<[@.#]>%{~,+}&*"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GENREPASS_")

    log_level: str = "WARNING"
    log_file_path: Path | None = None

    length: str = "24-30"
    number_amount: str = "1-2"
    special_chars_amount: str = "1-2"
    upper_amount: str = "1-2"
    lower_amount: str = "1-2"
    special_chars: str = DEFAULT_SPECIAL_CHARS
    pass_amount: int = 1
    reset_amount: int = 10

    utf8_probe_bytes: int = 1024
    parallel_workers: int | None = None


config = Config()


class InterceptHandler(logging.Handler):
    def emit(self, record):
        # Get corresponding Loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller to get correct stack depth
        frame, depth = logging.currentframe(), 2
        while frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str | None = None) -> None:
    """Install genrepass' log sinks. Meant for applications, not the library."""
    level = level or config.log_level

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        backtrace=True,
        diagnose=False,
    )

    if config.log_file_path is not None:
        config.log_file_path.parent.mkdir(exist_ok=True, parents=True)
        logger.add(
            config.log_file_path.resolve(),
            rotation="10 MB",
            retention=timedelta(days=7),
            backtrace=True,
            diagnose=False,
            level=level,
        )

    logger.enable("genrepass")
