"""Shared LLM utilities (provider activation, model registry, options).

This package centralizes:
- Provider availability checks against the environment (credential present or not)
- Validated provider settings and shared SDK client construction
- A role-keyed registry of chat models and embedding services
- Conversion of provider-agnostic `LlmOptions` into provider request options

Host code should look models up by role from the registry instead of
instantiating provider clients itself.
"""

from .errors import (  # noqa: F401
    ClientConstructionError,
    ConfigValidationError,
    DuplicateRoleError,
    LlmProvidersError,
    ModelNotFoundError,
    RoleNotRegisteredError,
)
from .models import EmbeddingService, Llm, MetadataMode  # noqa: F401
from .openai_provider import (  # noqa: F401
    OpenAiChatOptions,
    OpenAiChatOptionsConverter,
    OpenAiConfiguration,
    OpenAiProperties,
    openai_available,
)
from .options import LlmOptions, OptionsConverter, ProviderOptions  # noqa: F401
from .registry import (  # noqa: F401
    ModelRegistrar,
    ModelRegistry,
    ProviderConfiguration,
    register_providers,
)


def default_configurations() -> list[ProviderConfiguration]:
    """Provider configurations in activation order."""
    return [OpenAiConfiguration()]
