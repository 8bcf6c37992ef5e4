"""Pydantic schemas for the HRM employee form."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmergencyContact(BaseModel):
    name: str = ""
    phone: str = ""
    relationship: str = ""


class EmployeeIn(BaseModel):
    """Fields collected by the create-employee form."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    employee_id: str = ""
    department: str = ""
    position: str = ""
    employment_type: str = "full_time"
    hire_date: str = ""
    basic_salary: float = 0
    address: str = ""
    emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)

    def to_payload(self) -> dict:
        """Body expected by ``POST /api/v1/hrm/employees``."""
        return {
            "employee_code": self.employee_id,
            "full_name": f"{self.first_name} {self.last_name}",
            "email": self.email,
            "phone": self.phone or "",
            "department": self.department,
            "position": self.position,
            "employment_type": self.employment_type,
            "hire_date": self.hire_date,
            "base_salary": self.basic_salary,
            "address": self.address or "",
            "emergency_contact": self.emergency_contact.model_dump(),
        }


class NextCodeOut(BaseModel):
    employee_code: str
