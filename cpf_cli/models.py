"""Pydantic v2 models for CPF operation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class CPFResult(BaseModel):
    """Outcome of one CPF operation over one input item.

    ``valid`` is only set by validation, ``error`` only on failure and
    ``original`` only when the record came from a user-supplied line.
    Unset fields are left out of the serialized record.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    valid: bool | None = None
    error: str | None = None
    original: str | None = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
