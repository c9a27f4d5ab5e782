#!/usr/bin/env python3
"""
Sign-in Utility Functions
"""

import os
import re
import logging
import logging.handlers
import urllib.parse
from typing import Any, Dict, Pattern, Union

def extract_domain(url: str) -> str:
    """Extract domain from URL for archive naming and presets"""
    parsed = urllib.parse.urlparse(url)
    return parsed.netloc.lower()

def validate_url(url: str) -> bool:
    """Validate URL format"""
    try:
        result = urllib.parse.urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False

def sanitize_site_id(url: str) -> str:
    """Create safe file name stem from URL"""
    domain = extract_domain(url) or url
    # Replace special characters with underscores
    return re.sub(r'[^\w\-_.]', '_', domain)

def compile_pattern(pattern: Union[str, Pattern]) -> Pattern:
    """Compile a filter pattern; compiled patterns pass through untouched"""
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern

def setup_logging(logging_config: Dict[str, Any]) -> logging.Logger:
    """Setup logging configuration."""
    level = getattr(logging, logging_config.get('level', 'INFO').upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logging_config.get('log_to_file', False):
        logs_dir = logging_config.get('logs_dir', 'logs')
        os.makedirs(logs_dir, exist_ok=True)
        log_filename = os.path.join(logs_dir, logging_config.get('log_filename', 'signin_harvest.log'))

        if logging_config.get('rotate_logs', True):
            file_handler = logging.handlers.RotatingFileHandler(
                log_filename,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
        else:
            file_handler = logging.FileHandler(log_filename, encoding='utf-8')

        file_handler.setLevel(logging.DEBUG)  # File gets all logs
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
