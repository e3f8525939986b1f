"""JSON output for CPF result records."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import click

from cpf_cli.models import CPFResult
from cpf_cli.utils import get_logger, write_json

logger = get_logger(__name__)


def results_to_records(results: Sequence[CPFResult]) -> list[dict]:
    return [r.to_record() for r in results]


def results_to_json(results: Sequence[CPFResult], indent: int = 2) -> str:
    """Serialize results as a JSON array, omitting unset fields."""
    return json.dumps(results_to_records(results), indent=indent, ensure_ascii=False)


def write_json_output(results: Sequence[CPFResult], output_file: str | Path | None = None) -> None:
    """Write results to ``output_file``, or to stdout when no file is given."""
    if output_file:
        write_json(results_to_records(results), output_file)
        logger.info("Wrote %d records to %s", len(results), output_file)
        return
    click.echo(results_to_json(results))
