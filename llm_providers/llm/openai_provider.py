"""OpenAI provider: settings, availability gate, options converter and resources.

Environment variables:
- OPENAI_API_KEY (credential; the provider is skipped when unset or blank)
- OPENAI_BASE_URL (optional; OpenAI-compatible endpoints)
- LLMP_OPENAI_TIMEOUT_SECONDS (optional; SDK default when unset)
- LLMP_OPENAI_WORKHORSE_MODEL (default: gpt-4.1-mini)
- LLMP_OPENAI_PREMIUM_MODEL (default: gpt-4.1)
- LLMP_OPENAI_EMBEDDING_MODEL (default: text-embedding-3-small)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from llm_providers import config
from llm_providers.llm.errors import ClientConstructionError, ConfigValidationError
from llm_providers.llm.factory import (
    OpenAiApi,
    create_openai_api,
    create_openai_chat_model,
    create_openai_embedding_model,
)
from llm_providers.llm.models import EmbeddingService, Llm, MetadataMode, ModelResource
from llm_providers.llm.options import FieldMappingOptionsConverter, ProviderOptions
from llm_providers.llm.registry import ProviderConfiguration

logger = logging.getLogger(__name__)

PROVIDER = "OpenAI"

_REQUIRED_MESSAGES = {
    "api_key": "API key cannot be blank",
    "workhorse_model": "workhorse_model cannot be blank",
    "premium_model": "premium_model cannot be blank",
    "embedding_model": "embedding_model cannot be blank",
}


def openai_available(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True iff OPENAI_API_KEY is set to something other than whitespace."""
    api_key = config.environment(environ).get(config.OPENAI_API_KEY_ENV)
    return api_key is not None and bool(api_key.strip())


class OpenAiProperties(BaseModel):
    """Validated OpenAI settings. Construction fails with `ConfigValidationError`.

    Both `OpenAiProperties(**raw)` and `OpenAiProperties.model_validate(raw)`
    report every violated field through that error.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., repr=False)
    workhorse_model: str
    premium_model: str
    embedding_model: str
    base_url: Optional[str] = None
    timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Request timeout in seconds for the shared client; SDK default when unset.",
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigValidationError(PROVIDER, _describe(exc)) from exc

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "OpenAiProperties":
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as exc:
            raise ConfigValidationError(PROVIDER, _describe(exc)) from exc

    @classmethod
    def model_validate_json(cls, json_data: Any, **kwargs: Any) -> "OpenAiProperties":
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as exc:
            raise ConfigValidationError(PROVIDER, _describe(exc)) from exc

    @field_validator("api_key", "workhorse_model", "premium_model", "embedding_model")
    @classmethod
    def _not_blank(cls, v: str, info: ValidationInfo) -> str:
        if not v.strip():
            raise ValueError(_REQUIRED_MESSAGES[info.field_name])
        return v

    @field_validator("base_url")
    @classmethod
    def _blank_base_url_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def _blank_timeout_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OpenAiProperties":
        """Read settings from the environment, applying model defaults."""
        env = config.environment(environ)
        raw = {
            "api_key": env.get(config.OPENAI_API_KEY_ENV),
            "workhorse_model": env.get(
                config.OPENAI_WORKHORSE_MODEL_ENV, config.DEFAULT_OPENAI_WORKHORSE_MODEL
            ),
            "premium_model": env.get(
                config.OPENAI_PREMIUM_MODEL_ENV, config.DEFAULT_OPENAI_PREMIUM_MODEL
            ),
            "embedding_model": env.get(
                config.OPENAI_EMBEDDING_MODEL_ENV, config.DEFAULT_OPENAI_EMBEDDING_MODEL
            ),
            "base_url": env.get(config.OPENAI_BASE_URL_ENV),
            "timeout": env.get(config.OPENAI_TIMEOUT_SECONDS_ENV),
        }
        return cls(**{k: v for k, v in raw.items() if v is not None})


def _describe(exc: ValidationError) -> list[tuple[str, str]]:
    errors: list[tuple[str, str]] = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "(root)"
        if err["type"] == "missing" and field in _REQUIRED_MESSAGES:
            message = _REQUIRED_MESSAGES[field]
        else:
            message = err["msg"].removeprefix("Value error, ")
        errors.append((field, message))
    return errors


class OpenAiChatOptions(ProviderOptions):
    """Request parameters accepted by OpenAI chat completions."""

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None


class OpenAiChatOptionsConverter(FieldMappingOptionsConverter[OpenAiChatOptions]):
    """Copies every option OpenAI chat accepts; anything else (e.g. top_k) is dropped."""

    PROVIDER: ClassVar[str] = PROVIDER
    TARGET: ClassVar[type] = OpenAiChatOptions


OPENAI_CHAT_OPTIONS_CONVERTER = OpenAiChatOptionsConverter()

ApiFactory = Callable[..., OpenAiApi]


class OpenAiConfiguration(ProviderConfiguration):
    """OpenAI resources: workhorse and premium chat models plus an embedding service.

    `properties` may be supplied already parsed; otherwise they are read from
    the environment when the provider turns out to be available.
    `api_factory` builds the SDK client and is called once per activation.
    """

    PROVIDER: ClassVar[str] = PROVIDER

    def __init__(
        self,
        properties: Optional[OpenAiProperties] = None,
        *,
        api_factory: ApiFactory = create_openai_api,
        workhorse_role: str = config.WORKHORSE_ROLE,
        premium_role: str = config.PREMIUM_ROLE,
        embedding_role: str = config.EMBEDDING_ROLE,
    ) -> None:
        self.properties = properties
        self.api_factory = api_factory
        self.workhorse_role = workhorse_role
        self.premium_role = premium_role
        self.embedding_role = embedding_role

    def is_available(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        return openai_available(environ)

    def create_resources(
        self, environ: Optional[Mapping[str, str]] = None
    ) -> list[ModelResource]:
        properties = self.properties or OpenAiProperties.from_env(environ)
        logger.info("OpenAI AI models are available")
        try:
            api = self.api_factory(
                api_key=properties.api_key,
                base_url=properties.base_url,
                timeout=properties.timeout,
            )
            return [
                self._llm(api, self.workhorse_role, properties.workhorse_model),
                self._llm(api, self.premium_role, properties.premium_model),
                self._embedding_service(api, properties.embedding_model),
            ]
        except ClientConstructionError:
            raise
        except Exception as e:  # noqa: BLE001
            raise ClientConstructionError(PROVIDER, str(e)) from e

    def _llm(self, api: OpenAiApi, role: str, model_name: str) -> Llm:
        return Llm(
            role=role,
            name=model_name,
            provider=PROVIDER,
            model=create_openai_chat_model(api, model_name),
            options_converter=OPENAI_CHAT_OPTIONS_CONVERTER,
        )

    def _embedding_service(self, api: OpenAiApi, model_name: str) -> EmbeddingService:
        return EmbeddingService(
            role=self.embedding_role,
            name=model_name,
            provider=PROVIDER,
            model=create_openai_embedding_model(api, model_name),
            metadata_mode=MetadataMode.EMBED,
        )
