"""
Logging Utilities for ReguFlow

Centralized logging configuration, file handlers, and structured exception
logging for roadmap generation runs.
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from config import ReguflowConfig


RUN_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _run_header(command: str, scenario: str, tier: Optional[str]) -> List[str]:
    lines = [f"{ReguflowConfig.PRODUCT_NAME} {command} run"]
    if scenario:
        lines.append(f"Scenario: {scenario}")
    if tier:
        lines.append(f"Tier: {tier}")
    return lines


def setup_run_logging(log_dir: str, command: str, scenario: str = "",
                      tier: Optional[str] = None) -> Tuple[logging.Logger, str]:
    """
    Route every module logger to a per-run log file plus a quiet console.

    The file gets DEBUG detail (prompt sizes, tracebacks); the console only
    INFO so CLI output stays readable. Handlers on the root logger are
    replaced, so repeated CLI invocations in one process do not stack them.

    Args:
        log_dir: Directory where the run log is written
        command: CLI subcommand being run, used in the file name
        scenario: Scenario text, when the command has one
        tier: Subscription tier value, when the command has one

    Returns:
        Tuple of (run_logger instance, log_file_path)
    """
    started = datetime.now()
    log_path = Path(log_dir) / f"{command}_{started:%Y%m%d_%H%M%S}.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    run_logger = logging.getLogger('reguflow_run')
    for line in _run_header(command, scenario, tier):
        run_logger.info(line)
    run_logger.debug(f"Log file: {log_path} (started {started.isoformat()})")
    return run_logger, str(log_path)


def log_exception(logger: logging.Logger, exc: Exception, context: str = "",
                  scenario: Optional[str] = None, **kwargs) -> None:
    """
    Log a full exception with traceback and context information.

    Args:
        logger: Logger instance to use
        exc: Exception that was raised
        context: Additional context string
        scenario: Scenario text for context
        **kwargs: Additional context key-value pairs
    """
    error_msg = f"Exception occurred: {type(exc).__name__}: {str(exc)}"
    if context:
        error_msg = f"{context} - {error_msg}"

    logger.error(error_msg)
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.debug(f"Traceback:\n{tb_str}")

    if scenario:
        logger.debug(f"Scenario: {scenario}")
    if kwargs:
        logger.debug(f"Context: {kwargs}")
    if exc.__cause__ is not None:
        logger.debug(f"Caused by: {type(exc.__cause__).__name__}: {exc.__cause__}")


def get_error_info(exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Extract structured error information from an exception.

    Args:
        exc: Exception that was raised
        context: Additional context dictionary

    Returns:
        Dictionary with error information
    """
    return {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
        "user_message": getattr(exc, "user_message", None),
        "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        "timestamp": datetime.now().isoformat(),
        "context": context or {}
    }
