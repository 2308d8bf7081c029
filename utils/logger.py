"""
Logger Configuration
Unified logging setup
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console


# Global console instance
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

LOG_DIR = Path(__file__).parent.parent / "logs"


def setup_logger(
    name: str = "shortcut_sync",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger.
    
    Args:
        name: logger name; an empty string configures the root logger
        level: log level
        log_file: optional file name written under ``logs/``
        use_rich: render console output through Rich
        
    Returns:
        The configured Logger
    """
    logger = logging.getLogger(name or None)
    logger.setLevel(level)
    
    # Handlers are only attached once per logger
    if logger.handlers:
        return logger
    
    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    
    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_path = LOG_DIR / log_file
        
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    
    return logger

