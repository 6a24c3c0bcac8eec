"""Role-keyed registry of model resources and the startup routine that fills it.

Usage:
    registry = register_providers([OpenAiConfiguration()])
    llm = registry.get_llm("workhorse")
    reply = llm.generate("Hello", LlmOptions(temperature=0.2))

Each provider configuration is evaluated in order. A provider whose
credential is absent is skipped (logged, not an error); asking for one of its
roles later raises `RoleNotRegisteredError`. A provider that is available
registers all of its roles or, if anything fails, none of them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import ClassVar, Iterable, Iterator, Mapping, Optional, Sequence

from llm_providers.llm.errors import (
    DuplicateRoleError,
    ModelNotFoundError,
    RoleNotRegisteredError,
)
from llm_providers.llm.models import EmbeddingService, Llm, ModelResource

logger = logging.getLogger(__name__)


class ProviderConfiguration(ABC):
    """One provider's activation rule and resource graph."""

    PROVIDER: ClassVar[str]

    @abstractmethod
    def is_available(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        """Whether the provider's credential is present in `environ`."""

    @abstractmethod
    def create_resources(
        self, environ: Optional[Mapping[str, str]] = None
    ) -> list[ModelResource]:
        """Validate settings, build the shared client and one resource per role."""


class ModelRegistry:
    """Model resources by role name. Populated at startup, read-only afterwards."""

    def __init__(self) -> None:
        self._resources: dict[str, ModelResource] = {}

    def add_all(self, resources: Sequence[ModelResource]) -> None:
        """Add a provider's resources; rejects the whole batch on a role clash."""
        seen: dict[str, str] = {}
        for resource in resources:
            existing = self._resources.get(resource.role)
            if existing is not None:
                raise DuplicateRoleError(resource.role, existing.provider, resource.provider)
            if resource.role in seen:
                raise DuplicateRoleError(resource.role, seen[resource.role], resource.provider)
            seen[resource.role] = resource.provider
        for resource in resources:
            self._resources[resource.role] = resource
            logger.debug(
                "Registered %s role=%s model=%s",
                resource.provider,
                resource.role,
                resource.name,
            )

    def get(self, role: str) -> ModelResource:
        try:
            return self._resources[role]
        except KeyError:
            raise RoleNotRegisteredError(role, self._resources) from None

    def get_llm(self, role: str) -> Llm:
        resource = self.get(role)
        if not isinstance(resource, Llm):
            raise TypeError(f"Model role '{role}' is an embedding service, not an LLM.")
        return resource

    def get_embedding_service(self, role: str) -> EmbeddingService:
        resource = self.get(role)
        if not isinstance(resource, EmbeddingService):
            raise TypeError(f"Model role '{role}' is an LLM, not an embedding service.")
        return resource

    def by_name(self, name: str, provider: Optional[str] = None) -> ModelResource:
        """First resource (in registration order) serving the given model id."""
        for resource in self._resources.values():
            if resource.name == name and (provider is None or resource.provider == provider):
                return resource
        raise ModelNotFoundError(name)

    def roles(self) -> list[str]:
        return list(self._resources)

    def llms(self) -> list[Llm]:
        return [r for r in self._resources.values() if isinstance(r, Llm)]

    def embedding_services(self) -> list[EmbeddingService]:
        return [r for r in self._resources.values() if isinstance(r, EmbeddingService)]

    def providers(self) -> list[str]:
        return list(dict.fromkeys(r.provider for r in self._resources.values()))

    def as_mapping(self) -> Mapping[str, ModelResource]:
        return MappingProxyType(self._resources)

    def __contains__(self, role: object) -> bool:
        return role in self._resources

    def __iter__(self) -> Iterator[ModelResource]:
        return iter(list(self._resources.values()))

    def __len__(self) -> int:
        return len(self._resources)


class ModelRegistrar:
    """Activates provider configurations into a `ModelRegistry`."""

    def __init__(self, registry: Optional[ModelRegistry] = None) -> None:
        self.registry = registry if registry is not None else ModelRegistry()

    def register(
        self,
        configuration: ProviderConfiguration,
        environ: Optional[Mapping[str, str]] = None,
    ) -> list[ModelResource]:
        """Register every role of one provider, or nothing if it is unavailable."""
        if not configuration.is_available(environ):
            logger.info("%s credentials not set; skipping its models", configuration.PROVIDER)
            return []
        resources = configuration.create_resources(environ)
        self.registry.add_all(resources)
        return resources


def register_providers(
    configurations: Iterable[ProviderConfiguration],
    environ: Optional[Mapping[str, str]] = None,
    *,
    registry: Optional[ModelRegistry] = None,
) -> ModelRegistry:
    """Run the startup routine over `configurations` in order."""
    registrar = ModelRegistrar(registry)
    for configuration in configurations:
        registrar.register(configuration, environ)
    return registrar.registry
