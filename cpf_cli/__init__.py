"""
CPF Tool
Validation, formatting and generation of Brazilian CPF numbers
"""

__version__ = "1.0.0"

from cpf_cli.checksum import (
    CPFEngine,
    compute_check_digits,
    format_cpf,
    is_repeated,
    normalize,
    validate,
    weighted_sum,
)
from cpf_cli.batch import generate_batch, process_file, process_lines
from cpf_cli.models import CPFResult
from cpf_cli.utils import (
    BatchReadError,
    CPFToolError,
    GenerationError,
    InvalidLengthError,
)

__all__ = [
    "CPFEngine",
    "compute_check_digits",
    "format_cpf",
    "is_repeated",
    "normalize",
    "validate",
    "weighted_sum",
    "generate_batch",
    "process_file",
    "process_lines",
    "CPFResult",
    "BatchReadError",
    "CPFToolError",
    "GenerationError",
    "InvalidLengthError",
]
