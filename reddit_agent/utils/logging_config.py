import json
import logging
import os
import time
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

SENSITIVE_PATTERNS = ["KEY", "SECRET", "TOKEN", "PASSWORD", "AUTHORIZATION"]


def mask_sensitive(key: str, value: str) -> str:
    """
    Mask sensitive values based on key patterns.
    """
    if any(pattern in key.upper() for pattern in SENSITIVE_PATTERNS):
        return "*" * len(str(value))
    return value


def mask_env_dict(env_dict: Dict[str, str]) -> Dict[str, str]:
    """
    Return a copy of the dict with sensitive values masked.
    """
    return {k: mask_sensitive(k, v) for k, v in env_dict.items()}


class StructuredLogFormatter(logging.Formatter):
    """Formatter that renders each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    console_output: bool = True,
) -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.
        log_file: Path to a JSON log file (optional). Falls back to LOG_FILE.
        console_output: Whether to output logs to console
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    log_file = log_file or os.getenv("LOG_FILE") or None

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    json_formatter = StructuredLogFormatter()
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    component_loggers = {
        "reddit_agent.clients": "INFO",
        "reddit_agent.utils": "INFO",
        # Third-party libraries are chatty at INFO
        "httpx": "WARNING",
        "urllib3": "WARNING",
        "praw": "WARNING",
        "prawcore": "WARNING",
        "openai": "WARNING",
        "readability": "WARNING",
    }

    for logger_name, level in component_loggers.items():
        logging.getLogger(logger_name).setLevel(getattr(logging, level))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name of the logger

    Returns:
        logging.Logger: A configured logger instance
    """
    return logging.getLogger(name)


def safe_serialize(obj):
    try:
        json.dumps(obj)
        return obj
    except (TypeError, OverflowError):
        return f"<non-serializable: {type(obj).__name__}>"


def log_operation(
    logger: logging.Logger,
    operation: str,
    status: str,
    details: Dict[str, Any] = None,
    error: Exception = None,
    duration: Optional[float] = None,
) -> None:
    """
    Log an operation with structured details.

    Args:
        logger: The logger instance to use
        operation: The name of the operation
        status: The status of the operation (started, success, failure, ...)
        details: Additional details about the operation
        error: Exception object if the operation failed
        duration: Duration of the operation in seconds
    """
    if details:
        details = {
            k: mask_sensitive(k, v) if isinstance(v, str) else safe_serialize(v)
            for k, v in details.items()
        }
    log_data = {
        "operation": operation,
        "status": status,
        "timestamp": datetime.now().isoformat(),
    }

    if details:
        log_data["details"] = details

    if duration is not None:
        log_data["duration_seconds"] = duration

    if error:
        log_data["error"] = {
            "type": error.__class__.__name__,
            "message": str(error),
        }
        logger.error(json.dumps(log_data))
    elif status == "warning":
        logger.warning(json.dumps(log_data))
    else:
        logger.info(json.dumps(log_data))


def log_timing(logger: logging.Logger, operation: str):
    """
    Decorator to log the timing of an operation.

    Args:
        logger: The logger instance to use
        operation: The name of the operation
    """

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                log_operation(
                    logger, operation, "success", duration=time.time() - start_time
                )
                return result
            except Exception as e:
                log_operation(
                    logger,
                    operation,
                    "failure",
                    error=e,
                    duration=time.time() - start_time,
                )
                raise

        return wrapper

    return decorator


def validate_environment_variables(
    required_vars: List[str], logger: logging.Logger
) -> bool:
    """
    Validate that required environment variables are set.

    Args:
        required_vars: List of required environment variable names
        logger: Logger instance to use

    Returns:
        bool: True if all variables are set, False otherwise
    """
    env_dict = {var: os.getenv(var, "") for var in required_vars}
    masked_env = mask_env_dict(env_dict)
    missing_vars = [var for var, v in env_dict.items() if not v]

    if missing_vars:
        log_operation(
            logger,
            "environment_validation",
            "warning",
            {"missing_variables": missing_vars, "env": masked_env},
        )
        return False

    log_operation(
        logger,
        "environment_validation",
        "success",
        {"validated_variables": list(masked_env.keys()), "env": masked_env},
    )
    return True
