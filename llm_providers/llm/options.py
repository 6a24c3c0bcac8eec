"""Provider-agnostic generation options and their conversion to provider payloads.

Callers build one `LlmOptions` value regardless of which provider serves the
request. Each provider ships an `OptionsConverter` that maps it onto the
provider's own options type:
- fields set on `LlmOptions` are copied verbatim (optionally renamed)
- unset fields stay unset, so the provider's default applies
- fields the provider has no equivalent for are dropped without error
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, Optional, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class LlmOptions(BaseModel):
    """Generation tuning parameters. `None` means "use the provider default"."""

    model_config = ConfigDict(frozen=True)

    # Only sign checks here; upper limits differ per provider and their clients enforce them.
    temperature: Optional[float] = Field(
        None,
        ge=0,
        description="Sampling temperature. Higher values make output more random.",
    )
    top_p: Optional[float] = Field(
        None,
        ge=0,
        description="Nucleus sampling probability mass.",
    )
    max_tokens: Optional[int] = Field(
        None,
        gt=0,
        description="Upper bound on the number of generated tokens.",
    )
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    top_k: Optional[int] = Field(
        None,
        gt=0,
        description="Sample only from the k most likely tokens. Not every provider supports it.",
    )

    def set_fields(self) -> dict[str, Any]:
        """Return only the options the caller actually set."""
        return self.model_dump(exclude_none=True)

    def with_temperature(self, temperature: Optional[float]) -> "LlmOptions":
        return self.model_copy(update={"temperature": temperature})

    def with_top_p(self, top_p: Optional[float]) -> "LlmOptions":
        return self.model_copy(update={"top_p": top_p})

    def with_max_tokens(self, max_tokens: Optional[int]) -> "LlmOptions":
        return self.model_copy(update={"max_tokens": max_tokens})

    def with_presence_penalty(self, presence_penalty: Optional[float]) -> "LlmOptions":
        return self.model_copy(update={"presence_penalty": presence_penalty})

    def with_frequency_penalty(self, frequency_penalty: Optional[float]) -> "LlmOptions":
        return self.model_copy(update={"frequency_penalty": frequency_penalty})

    def with_top_k(self, top_k: Optional[int]) -> "LlmOptions":
        return self.model_copy(update={"top_k": top_k})


class ProviderOptions(BaseModel):
    """Base for provider-specific option payloads. Built only by converters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments to pass on to the provider client (set fields only)."""
        return self.model_dump(exclude_none=True)


P = TypeVar("P", bound=ProviderOptions, covariant=True)


class OptionsConverter(Protocol[P]):
    """Capability: turn provider-agnostic options into a provider payload."""

    def convert_options(self, options: LlmOptions) -> P:
        ...


T = TypeVar("T", bound=ProviderOptions)


class FieldMappingOptionsConverter(Generic[T]):
    """Converter that copies every `LlmOptions` field the target schema knows.

    Subclasses set `TARGET` to their provider options type and may rename
    fields through `KW_REMAP` (agnostic name -> provider name).
    """

    PROVIDER: ClassVar[str]
    TARGET: ClassVar[type]
    KW_REMAP: ClassVar[dict[str, str]] = {}

    def convert_options(self, options: LlmOptions) -> T:
        supported = self.TARGET.model_fields
        accepted: dict[str, Any] = {}
        dropped: list[str] = []
        for name, value in options.set_fields().items():
            mapped = self.KW_REMAP.get(name, name)
            if mapped in supported:
                accepted[mapped] = value
            else:
                dropped.append(name)
        if dropped:
            logger.debug(
                "Ignoring options not supported by %s: %s",
                self.PROVIDER,
                ", ".join(dropped),
            )
        return self.TARGET(**accepted)
