import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config

_configured = False


def setup_logging(config: Optional[Config] = None):
    """Set up logging for the application."""
    global _configured
    if _configured:
        return
    config = config or Config()

    # Root logger configuration
    root_logger = logging.getLogger()
    level = logging.INFO if config.verbose else logging.WARNING
    root_logger.setLevel(level)

    # Console handler (with Rich), kept off stdout so dry-run output stays clean
    console = Console(stderr=True)
    rich_handler = RichHandler(
        console=console,
        show_time=config.verbose,
        show_path=False,
        rich_tracebacks=True
    )
    rich_handler.setLevel(level)
    root_logger.addHandler(rich_handler)

    # File handler (Rotating), only when a log directory is configured
    if config.log_dir:
        os.makedirs(config.log_dir, exist_ok=True)
        log_file = os.path.join(config.log_dir, "howto.log")
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5  # 10 MB per file, 5 backups
        )
        file_handler.setLevel(logging.INFO)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.INFO)

    # Configure specific loggers to be less verbose if needed
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configured = True
    logger = logging.getLogger(__name__)
    logger.info(f"Logger initialized (verbose={config.verbose}, log_dir={config.log_dir})")
