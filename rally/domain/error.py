"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Carries every failing field message so callers can show them together.
    """

    def __init__(self, errors: list[str] | str):
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    def __init__(self, message: str, reasons: list[str] | None = None):
        self.reasons = reasons or [message]
        super().__init__(message)


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when a state transition is not allowed from the current state."""

    def __init__(self, resource: str, resource_id: str, current: str, target: str):
        self.resource = resource
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {resource} {resource_id} from {current} to {target}")


class NotAuthorizedError(DomainError):
    """Raised when a user acts on a record they do not own or address."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not authorized to modify {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateError(DomainError):
    """Raised by repositories when a unique constraint rejects an insert.

    Friend requests, joins and invitation joins treat this as a successful
    no-op; everything else lets it propagate.
    """

    def __init__(self, resource: str, key: str):
        self.resource = resource
        self.key = key
        super().__init__(f"Duplicate {resource}: {key}")
