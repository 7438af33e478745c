import logging
import pathlib
import sys

import pendulum

_root_logger = logging.getLogger()


def get_log_path(log_dir: str, filename: str) -> pathlib.Path:
    path = pathlib.Path(log_dir).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path / f"{filename}.log"


def setup_logging_to_file(
    app: str,
    log_dir: str,
    level: int = logging.INFO,
    *,
    logger: logging.Logger = _root_logger,
    timestamp: bool = True,
) -> pathlib.Path:
    formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s.%(funcName)s:%(lineno)d %(message)s"
    )
    if timestamp:
        filename = f"{app}.{pendulum.now():%Y%m%d.%H%M%S.%f}"
    else:
        filename = app
    log_path = get_log_path(log_dir, filename)
    file_handler = logging.FileHandler(log_path)
    file_handler.formatter = formatter
    logger.setLevel(level)
    logger.addHandler(file_handler)
    return log_path


def setup_logging_to_console(level=logging.INFO, *, logger: logging.Logger = _root_logger):
    if not sys.stdout.isatty():
        logging.basicConfig(level=level)
        return

    from rich.logging import RichHandler
    from rich.traceback import install

    install(show_locals=True)
    logger.setLevel(level)
    handler = RichHandler(rich_tracebacks=True, level=level, show_time=True)
    logger.addHandler(handler)


def setup_logging_to_seq(server_url: str, api_key: str | None = None, level=logging.INFO):
    import seqlog

    seqlog.log_to_seq(
        server_url=server_url,
        api_key=api_key,
        level=level,
        batch_size=10,
        auto_flush_timeout=10,
        override_root_logger=True,
    )


def setup_logging(settings) -> None:
    level = logging.getLevelName(settings.LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.INFO

    if settings.SEQ_SERVER_URL:
        setup_logging_to_seq(settings.SEQ_SERVER_URL, settings.SEQ_SERVER_API_KEY, level)
    setup_logging_to_console(level)
    if settings.LOG_TO_FILE:
        setup_logging_to_file(settings.PROJECT_NAME.lower().replace(" ", "-"), settings.LOG_DIR, level)
