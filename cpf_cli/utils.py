"""
Utility functions for the CPF tool

Provides logging setup, JSON file helpers, and the exception hierarchy
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "WARNING", log_file: Optional[str | Path] = None) -> None:
    """Configure logging for the CPF tool"""
    level = getattr(logging, log_level.upper())

    # stdout carries JSON output, so log records go to stderr
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# FILE I/O
# ═══════════════════════════════════════════════════════════════════

def read_json(file_path: str | Path) -> Any:
    """Read JSON file"""
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(data: Any, file_path: str | Path, indent: int = 2) -> None:
    """Write JSON file"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists"""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class CPFToolError(Exception):
    """Base exception for the CPF tool"""
    pass


class InvalidLengthError(CPFToolError, ValueError):
    """Normalized identifier has the wrong number of digits"""
    pass


class GenerationError(CPFToolError):
    """Random identifier could not be generated"""
    pass


class BatchReadError(CPFToolError):
    """Batch input could not be read"""
    pass


class TelemetryError(CPFToolError):
    """Telemetry configuration could not be loaded or saved"""
    pass
