"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecalculationError(DomainException):
    """A recalculation workflow failed; prior state is left untouched"""

    def __init__(self, user_id: str, workflow: str, reason: str):
        self.user_id = user_id
        self.workflow = workflow
        self.reason = reason
        super().__init__(f"{workflow} failed for user {user_id}: {reason}")


class MissingProfileError(RecalculationError):
    """No profile exists for a user expected to have one"""

    def __init__(self, user_id: str, workflow: str):
        super().__init__(user_id, workflow, "profile not found")


class MissingGoalSetError(RecalculationError):
    """The goal lookup for a user failed at the record store"""

    def __init__(self, user_id: str, workflow: str):
        super().__init__(user_id, workflow, "could not fetch goals")


class ConcurrentUpdateError(RecalculationError):
    """Profile kept changing underneath the workflow after all retries"""

    def __init__(self, user_id: str, workflow: str, attempts: int):
        self.attempts = attempts
        super().__init__(user_id, workflow, f"concurrent update conflict after {attempts} attempts")


class InvalidCategoryError(DomainException):
    """Goal references a category that does not exist"""

    pass


class AuthenticationError(DomainException):
    """Bearer token is missing, malformed or rejected"""

    pass


class IdentityServiceError(DomainException):
    """Identity provider returned an error or is unavailable"""

    pass
