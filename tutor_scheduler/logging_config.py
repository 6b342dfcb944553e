import logging
import sys

_configured = False


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure console logging once for the whole application."""
    global _configured
    if _configured:
        return

    if isinstance(level, str):
        level = getattr(logging, level.upper())

    log_format = '%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    root_logger.addHandler(handler)

    # SQL echo is far too chatty at INFO
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    _configured = True
