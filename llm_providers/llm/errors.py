"""Exceptions raised while configuring providers and looking up model roles."""

from __future__ import annotations

from typing import Iterable, Sequence


class LlmProvidersError(Exception):
    """Base class for provider configuration and lookup failures."""


class ConfigValidationError(LlmProvidersError, ValueError):
    """One or more required provider settings are missing or blank.

    `errors` holds every violated constraint as `(field, message)` pairs, not
    just the first one found.
    """

    def __init__(self, provider: str, errors: Sequence[tuple[str, str]]) -> None:
        self.provider = provider
        self.errors = list(errors)
        details = "; ".join(f"{field}: {message}" for field, message in self.errors)
        super().__init__(f"Invalid {provider} configuration: {details}")

    @property
    def fields(self) -> list[str]:
        return [field for field, _ in self.errors]


class ClientConstructionError(LlmProvidersError, RuntimeError):
    """The provider SDK rejected the configuration while building its client."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        super().__init__(f"Could not construct {provider} client: {reason}")


class RoleNotRegisteredError(LlmProvidersError, LookupError):
    """No resource was registered for the requested role."""

    def __init__(self, role: str, registered: Iterable[str] = ()) -> None:
        self.role = role
        known = ", ".join(sorted(registered)) or "(none registered)"
        super().__init__(f"Model role '{role}' is not registered. Registered roles: {known}.")


class DuplicateRoleError(LlmProvidersError, ValueError):
    """Two providers tried to publish a resource under the same role."""

    def __init__(self, role: str, existing_provider: str, new_provider: str) -> None:
        self.role = role
        super().__init__(
            f"Model role '{role}' is already registered by {existing_provider}; "
            f"{new_provider} cannot register it again."
        )


class ModelNotFoundError(LlmProvidersError, LookupError):
    """No registered resource uses the requested model name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No registered model is named '{name}'.")
