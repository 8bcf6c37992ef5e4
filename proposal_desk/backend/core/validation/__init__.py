"""Debounced, race-free asynchronous validation."""

from __future__ import annotations

from proposal_desk.backend.core.validation.debounce import (
    DebouncedValidator,
    Debouncer,
    FieldValidation,
)

__all__ = ["DebouncedValidator", "Debouncer", "FieldValidation"]
