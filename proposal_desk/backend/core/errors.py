"""Exception hierarchy shared by the view models, service and CLI."""

from __future__ import annotations


class DeskError(Exception):
    """Base class for errors raised by proposal_desk."""


class UpstreamError(DeskError):
    """The upstream API answered with a failure envelope."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ProposalValidationError(DeskError):
    """Client-side validation failed before any network call was made."""

    def __init__(self, problems: list[str]):
        super().__init__(problems[0] if problems else "Validation failed")
        self.problems = problems

    @property
    def message(self) -> str:
        return str(self)


class WizardTransitionError(ProposalValidationError):
    """A wizard step change was blocked by an unmet precondition."""

    def __init__(self, step: int, problems: list[str]):
        super().__init__(problems)
        self.step = step
