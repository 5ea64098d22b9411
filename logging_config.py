#!/usr/bin/env python3
"""
Logging Configuration for the golf bay session service
Provides console output plus rotating log files for the session, bay and
booking managers
"""

import os
import shutil
import logging
import logging.handlers
from datetime import datetime
from typing import Optional

from infrastructure.settings import AppSettings, get_settings

# Loggers that share the dedicated sessions.log file
SESSION_LOGGERS = ('CustomerSessionManager', 'BayStatusManager', 'BookingManager')


def setup_logging(settings: Optional[AppSettings] = None) -> str:
    """
    Set up logging with console and rotating file handlers.

    Previous logs in the configured directory are cleared first so each run
    starts with a fresh set of files. Returns the log directory in use.
    """
    settings = settings or get_settings()
    production_mode = settings.production_mode
    log_dir = settings.log_directory

    # Clear previous logs in the directory
    if os.path.exists(log_dir):
        for filename in os.listdir(log_dir):
            file_path = os.path.join(log_dir, filename)
            try:
                if os.path.isfile(file_path) or os.path.islink(file_path):
                    os.unlink(file_path)
                elif os.path.isdir(file_path):
                    shutil.rmtree(file_path)
            except OSError as e:
                print(f'Failed to delete {file_path}. Reason: {e}')

    os.makedirs(log_dir, exist_ok=True)

    main_log_file = os.path.join(log_dir, 'golfbay.log')
    debug_log_file = os.path.join(log_dir, 'golfbay_debug.log')
    error_log_file = os.path.join(log_dir, 'golfbay_errors.log')
    sessions_log_file = os.path.join(log_dir, 'sessions.log')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING if production_mode else logging.DEBUG)

    # Clear existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # Detailed formatter with file, line, and function information
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d in %(funcName)s()] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console formatter (less detailed for readability)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    main_file_handler = logging.handlers.RotatingFileHandler(
        main_log_file,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    main_file_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    main_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(main_file_handler)

    # Debug log file handler - only enabled in development mode
    if not production_mode:
        debug_file_handler = logging.handlers.RotatingFileHandler(
            debug_log_file,
            maxBytes=50*1024*1024,  # 50MB
            backupCount=3,
            encoding='utf-8'
        )
        debug_file_handler.setLevel(logging.DEBUG)
        debug_file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(debug_file_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        error_log_file,
        maxBytes=5*1024*1024,  # 5MB
        backupCount=5,
        encoding='utf-8'
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_file_handler)

    # Dedicated file for session, bay and booking state changes
    sessions_handler = logging.handlers.RotatingFileHandler(
        sessions_log_file,
        maxBytes=20*1024*1024,  # 20MB
        backupCount=5,
        encoding='utf-8'
    )
    sessions_handler.setLevel(logging.INFO if production_mode else logging.DEBUG)
    sessions_handler.setFormatter(detailed_formatter)

    for name in SESSION_LOGGERS:
        component_logger = logging.getLogger(name)
        for handler in list(component_logger.handlers):
            component_logger.removeHandler(handler)
            handler.close()
        component_logger.addHandler(sessions_handler)
        component_logger.setLevel(logging.INFO if production_mode else logging.DEBUG)

    logging.getLogger('asyncio').setLevel(logging.WARNING)

    root_logger.info("="*80)
    root_logger.info(f"Golf bay logging initialized - {datetime.now()}")
    root_logger.info(f"Production Mode: {'ON' if production_mode else 'OFF'}")
    root_logger.info(f"Main log: {main_log_file}")
    if not production_mode:
        root_logger.info(f"Debug log: {debug_log_file}")
    root_logger.info(f"Error log: {error_log_file}")
    root_logger.info(f"Sessions log: {sessions_log_file}")
    root_logger.info("="*80)
    return log_dir


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name

    Args:
        name: Logger name (usually the component class name)

    Returns:
        logging.Logger instance
    """
    return logging.getLogger(name)
