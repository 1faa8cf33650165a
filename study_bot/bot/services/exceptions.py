"""Exception hierarchy for bot services."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors raised by bot services."""


class ConfigurationError(ServiceError):
    """The bot cannot start with the current settings."""


class ValidationError(ServiceError):
    """Command or submission input is invalid."""


class ResourceNotFoundError(ServiceError):
    """A platform resource the service relies on does not exist."""


class RoleNotFoundError(ResourceNotFoundError):
    """No role with the configured name exists in the guild."""

    def __init__(self, role_name: str):
        super().__init__(f"could not find {role_name} role")
        self.role_name = role_name


class AssignmentNotFoundError(ServiceError):
    """No assignment is keyed by the given review message."""

    def __init__(self, message_id: int):
        super().__init__(f"no assignment for review message {message_id}")
        self.message_id = message_id
