"""Logging setup for the application."""

import logging
import sys
from typing import Optional, TextIO


def setup_logger(
    log_level: str = "WARNING",
    name: str = "pr_picker",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Set up and configure application logger.
    
    Creates a logger with a simple, readable format suitable for CLI output.
    Log records go to stderr by default because stdout carries the selected
    PR for shell pipelines.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: pr_picker)
        stream: Output stream (default: sys.stderr)
        
    Returns:
        logging.Logger: Configured logger instance
    """
    # Convert string to logging level
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)
    
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=stream if stream is not None else sys.stderr,
        force=True,  # Override any existing configuration
    )
    
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    
    return logger
