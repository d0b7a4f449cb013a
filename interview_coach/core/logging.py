import logging
import logging.handlers
import sys
import os
from pathlib import Path

def setup_logging(level=None, log_dir='logs'):
    """Configure logging for the application with rotation and proper error handling."""
    # Check if logging is already configured to avoid duplicate handlers
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return root_logger

    if level is None:
        level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # Rotating file handler
    try:
        log_path = Path(log_dir)
        log_path.mkdir(exist_ok=True)
        log_file = log_path / os.getenv('LOG_FILE', 'app.log')

        fh = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        fh.setLevel(getattr(logging, os.getenv('LOG_FILE_LEVEL', 'DEBUG').upper(), logging.DEBUG))
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    except (OSError, PermissionError) as e:
        logger.warning(f"Could not set up file logging: {e}. Continuing with console only.")

    # Suppress noisy loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('google_genai').setLevel(logging.WARNING)

    return logger
