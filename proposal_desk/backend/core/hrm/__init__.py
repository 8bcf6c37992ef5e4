"""HRM employee form."""

from __future__ import annotations

from proposal_desk.backend.core.hrm.employee_form import EmployeeForm, next_employee_code

__all__ = ["EmployeeForm", "next_employee_code"]
