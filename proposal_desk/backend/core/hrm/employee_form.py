"""
Create-employee form view model.

Holds the form fields, runs debounced uniqueness checks for the employee
code and e-mail, and submits through :class:`HRMApiService` once every
required field is filled and both checks have passed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from proposal_desk.backend.core.errors import UpstreamError
from proposal_desk.backend.core.utils.notifications import Toaster
from proposal_desk.backend.core.utils.session import ViewScope
from proposal_desk.backend.core.validation import DebouncedValidator, FieldValidation
from proposal_desk.backend.schemas import EmployeeIn
from proposal_desk.backend.services import HRMApiService

logger = logging.getLogger(__name__)

CODE_REQUIRED = "Employee code is required"
EMAIL_REQUIRED = "Valid email is required"

_CODE_PATTERN = re.compile(r"EMP(\d+)")


def next_employee_code(existing: Iterable[str | None]) -> str:
    """Next ``EMPnnn`` code after the highest one in use; ``EMP001`` if none."""
    numbers = []
    for code in existing:
        match = _CODE_PATTERN.search(code or "")
        if match and int(match.group(1)) > 0:
            numbers.append(int(match.group(1)))
    return f"EMP{(max(numbers) if numbers else 0) + 1:03d}"


def _require_code(code: str) -> str | None:
    return CODE_REQUIRED if not code or not code.strip() else None


def _require_email(email: str) -> str | None:
    return EMAIL_REQUIRED if not email or "@" not in email else None


class EmployeeForm:
    def __init__(
        self,
        service: HRMApiService,
        toaster: Toaster | None = None,
        *,
        debounce: float = 0.5,
        scope: ViewScope | None = None,
    ):
        self.service = service
        self.toaster = toaster or Toaster()
        self.scope = scope or ViewScope("employee-form")
        self.form = EmployeeIn()
        self.loading = False
        self.employees: list[dict[str, Any]] = []

        self.code_validator = DebouncedValidator(
            self._code_exists,
            local_check=_require_code,
            taken_message="This employee code already exists",
            failure_message="Unable to validate employee code",
            delay=debounce,
            scope=self.scope,
        )
        self.email_validator = DebouncedValidator(
            self._email_exists,
            local_check=_require_email,
            taken_message="This email is already registered",
            failure_message="Unable to validate email",
            delay=debounce,
            scope=self.scope,
        )

    # ── Remote checks ───────────────────────────────────────────────────────

    async def _code_exists(self, code: str) -> bool:
        result = await self.service.check_employee_code(code)
        return bool(result.unwrap().get("exists"))

    async def _email_exists(self, email: str) -> bool:
        result = await self.service.check_employee_email(email)
        return bool(result.unwrap().get("exists"))

    # ── Field edits ─────────────────────────────────────────────────────────

    def set_employee_code(self, code: str):
        self.form.employee_id = code
        return self.code_validator.update(code)

    def set_email(self, email: str):
        self.form.email = email
        return self.email_validator.update(email)

    def update(self, **fields: Any) -> None:
        """Set plain fields (names, department, salary, ...)."""
        for name, value in fields.items():
            if name in ("employee_id", "email"):
                raise ValueError(f"Use the dedicated setter for '{name}'")
            setattr(self.form, name, value)

    @property
    def validation(self) -> dict[str, FieldValidation]:
        return {
            "employee_code": self.code_validator.state,
            "email": self.email_validator.state,
        }

    @property
    def is_valid(self) -> bool:
        f = self.form
        has_required = all(
            value.strip()
            for value in (
                f.first_name,
                f.last_name,
                f.email,
                f.employee_id,
                f.department,
                f.position,
                f.hire_date,
            )
        ) and f.basic_salary > 0
        states = self.validation.values()
        no_errors = not any(s.error for s in states) and not any(s.checking for s in states)
        return has_required and no_errors

    # ── Upstream ────────────────────────────────────────────────────────────

    async def load_employees(self) -> None:
        self.loading = True
        try:
            result = await self.service.get_employees()
            if result.success:
                employees = (result.data or {}).get("employees", [])
                self.scope.apply(setattr, self, "employees", employees)
            else:
                self.toaster.error("Failed to load employees")
        finally:
            self.loading = False

    async def prefill_code(self):
        """Suggest the next free employee code when the field is empty."""
        if not self.employees:
            await self.load_employees()
        if self.form.employee_id:
            return None
        codes = [e.get("employee_id") or e.get("employee_code") for e in self.employees]
        return self.set_employee_code(next_employee_code(codes))

    async def create(self) -> dict[str, Any] | None:
        """Submit the form; returns the created employee or None."""
        if not self.is_valid:
            self.toaster.error("Please fix validation errors before submitting")
            return None

        self.loading = True
        try:
            created = (await self.service.create_employee(self.form.to_payload())).unwrap()
        except UpstreamError as exc:
            self.toaster.error(exc.message or "Failed to create employee")
            return None
        except Exception:
            logger.exception("Employee creation failed")
            self.toaster.error("Failed to create employee")
            return None
        finally:
            self.loading = False

        self.toaster.success("Employee created successfully!")
        self.form = EmployeeIn()
        self.code_validator.reset()
        self.email_validator.reset()
        return created
