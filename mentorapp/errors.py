"""
Error kinds raised by the skill store.

InvalidInputError surfaces before any statement is executed. StoreFailure
wraps whatever SQLAlchemy raised; read operations degrade it to an empty
result at their public boundary. FatalStoreError is reserved for failures
that could break id uniqueness.
"""


class SkillStoreError(Exception):
    """Base class for skill store errors."""
    pass


class InvalidInputError(SkillStoreError, ValueError):
    """An id, name, term or pagination argument was empty or malformed."""
    pass


class NotFoundError(SkillStoreError, LookupError):
    """No skill matched the lookup."""
    pass


class StoreFailure(SkillStoreError):
    """The underlying store rejected or failed a statement."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class FatalStoreError(SkillStoreError, RuntimeError):
    """Unexpected condition that could compromise identifier uniqueness."""
    pass


class IdentifierExhaustedError(FatalStoreError):
    """Raised when every candidate identifier collided."""
    pass
