"""
Logging Utilities
=================

Root logger setup for the enviro-config command line.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

# Rotate the optional log file at 10MB, keeping five backups
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def setup_logging(log_level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route log records to stderr and, optionally, a rotating log file.
    
    Args:
        log_level: Logging level name
        log_file: Log file path
        
    Returns:
        The ``enviro_config`` package logger
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.WARNING)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    # stdout is reserved for KEY=VALUE output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    
    return logging.getLogger('enviro_config')
