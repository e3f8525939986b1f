"""Batch processing of CPFs.

Applies a single-CPF operation to every non-blank line of an input and
collects one ``CPFResult`` per line. A bad line never stops the batch; only a
failure to read the input does.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from cpf_cli.checksum import CPFEngine, format_cpf, validate
from cpf_cli.models import CPFResult
from cpf_cli.utils import BatchReadError, CPFToolError, get_logger

logger = get_logger(__name__)

Processor = Callable[[str], CPFResult]


def validate_processor(cpf: str) -> CPFResult:
    """Full-checksum validation of one line."""
    return CPFResult(value=cpf, valid=validate(cpf), original=cpf)


def length_only_processor(cpf: str) -> CPFResult:
    """Structural validation of one line, skipping the check digits."""
    return CPFResult(value=cpf, valid=validate(cpf, length_only=True), original=cpf)


def format_processor(cpf: str) -> CPFResult:
    """Format one line, capturing a length failure in the record."""
    try:
        formatted = format_cpf(cpf)
    except CPFToolError as exc:
        return CPFResult(value=cpf, error=str(exc), original=cpf)
    return CPFResult(value=formatted, original=cpf)


def process_lines(lines: Iterable[str], processor: Processor) -> list[CPFResult]:
    """Run ``processor`` over each non-blank line, preserving input order."""
    results: list[CPFResult] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        results.append(processor(line))
    return results


def process_file(path: str | Path, processor: Processor) -> list[CPFResult]:
    """Read CPFs from a file (one per line) and process them.

    Undecodable bytes are replaced, so a badly encoded line still yields
    its own record instead of failing the batch.

    Raises:
        BatchReadError: if the file cannot be opened or read.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            results = process_lines(f, processor)
    except OSError as exc:
        raise BatchReadError(f"failed to read {path}: {exc}") from exc

    failed = sum(1 for r in results if r.error or r.valid is False)
    logger.info("Processed %d CPFs from %s (%d invalid or failed)", len(results), path, failed)
    return results


def generate_batch(
    count: int,
    formatted: bool = True,
    invalid: bool = False,
    engine: CPFEngine | None = None,
) -> list[CPFResult]:
    """Generate ``count`` CPFs as result records.

    A single generation failure aborts the whole batch.
    """
    if count <= 0:
        raise ValueError(f"count must be a positive number, got {count}")

    engine = engine or CPFEngine()
    return [
        CPFResult(value=engine.generate(formatted=formatted, invalid=invalid))
        for _ in range(count)
    ]
