"""
Application Lifecycle Errors

Every failure the lifecycle reports to its callers. All are raised
synchronously and never retried inside the module.
"""

from uuid import UUID


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class DuplicateApplicationError(ApplicationServiceError):
    """Raised when the candidate already has a live application for the opportunity."""

    def __init__(self, candidate_id: UUID | None = None, opportunity_id: UUID | None = None):
        self.candidate_id = candidate_id
        self.opportunity_id = opportunity_id
        super().__init__(
            message="You have already applied to this opportunity.",
            error_code="DUPLICATE_APPLICATION",
            status_code=409,
        )


class OpportunityClosedError(ApplicationServiceError):
    """Raised when applying after the deadline or to an inactive posting."""

    def __init__(self, reason: str = "This opportunity is no longer accepting applications."):
        super().__init__(
            message=reason,
            error_code="OPPORTUNITY_CLOSED",
            status_code=409,
        )


class ApplicationNotFoundError(ApplicationServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: UUID | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class InvalidTransitionError(ApplicationServiceError):
    """Raised when the target status is not reachable from the current one."""

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            message=f"Cannot move an application from '{current_status}' to '{target_status}'.",
            error_code="INVALID_TRANSITION",
            status_code=409,
        )


class UnauthorizedError(ApplicationServiceError):
    """Raised when the caller may not act on the application."""

    def __init__(self, message: str = "You are not allowed to modify this application."):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=403,
        )


class CollaboratorUnavailableError(ApplicationServiceError):
    """Raised when the backing store cannot be reached. Callers may retry."""

    def __init__(self, collaborator: str = "repository"):
        self.collaborator = collaborator
        super().__init__(
            message=f"The {collaborator} is temporarily unavailable. Please try again.",
            error_code="COLLABORATOR_UNAVAILABLE",
            status_code=503,
        )


class OpportunityNotFoundError(ApplicationServiceError):
    """Raised when an opportunity is not found."""

    def __init__(self, opportunity_id: UUID | None = None):
        message = (
            f"Opportunity {opportunity_id} not found" if opportunity_id else "Opportunity not found"
        )
        super().__init__(
            message=message,
            error_code="OPPORTUNITY_NOT_FOUND",
            status_code=404,
        )


class CandidateNotFoundError(ApplicationServiceError):
    """Raised when a candidate profile is not found."""

    def __init__(self, candidate_id: UUID | None = None):
        message = f"Candidate {candidate_id} not found" if candidate_id else "Candidate not found"
        super().__init__(
            message=message,
            error_code="CANDIDATE_NOT_FOUND",
            status_code=404,
        )
