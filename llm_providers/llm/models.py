"""Named model resources handed out to the host application.

An `Llm` or `EmbeddingService` is built once per role at startup and never
mutated afterwards, so the same instance can be shared by any number of
callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel, LanguageModelInput
from langchain_core.messages import BaseMessage

from llm_providers.llm.options import LlmOptions, OptionsConverter, ProviderOptions

# Metadata key listing which other metadata keys to leave out of embedded text
EXCLUDED_EMBED_METADATA_KEYS = "excluded_embed_metadata_keys"


class MetadataMode(str, Enum):
    """How much of a document's metadata is folded into the text we embed."""

    ALL = "all"
    EMBED = "embed"
    NONE = "none"


def format_document(document: Union[Document, str], mode: MetadataMode) -> str:
    """Render a document as embedding input for the given metadata mode."""
    if isinstance(document, str):
        return document
    if mode is MetadataMode.NONE or not document.metadata:
        return document.page_content

    excluded: set[str] = set()
    if mode is MetadataMode.EMBED:
        excluded = set(document.metadata.get(EXCLUDED_EMBED_METADATA_KEYS) or ())
        excluded.add(EXCLUDED_EMBED_METADATA_KEYS)

    lines = [f"{k}: {v}" for k, v in document.metadata.items() if k not in excluded]
    if not lines:
        return document.page_content
    return "\n".join(lines) + "\n\n" + document.page_content


@dataclass(frozen=True)
class Llm:
    """A chat model registered under a role.

    `name` is the provider's model identifier, `provider` the provider tag
    (e.g. "OpenAI").
    """

    role: str
    name: str
    provider: str
    model: BaseChatModel
    options_converter: OptionsConverter[ProviderOptions]

    def provider_options(self, options: Optional[LlmOptions] = None) -> ProviderOptions:
        return self.options_converter.convert_options(options or LlmOptions())

    def generate(
        self,
        prompt: LanguageModelInput,
        options: Optional[LlmOptions] = None,
        **kwargs: Any,
    ) -> BaseMessage:
        """Invoke the model, passing caller options through the provider converter."""
        request = self.provider_options(options).to_kwargs()
        return self.model.invoke(prompt, **{**request, **kwargs})

    async def agenerate(
        self,
        prompt: LanguageModelInput,
        options: Optional[LlmOptions] = None,
        **kwargs: Any,
    ) -> BaseMessage:
        request = self.provider_options(options).to_kwargs()
        return await self.model.ainvoke(prompt, **{**request, **kwargs})


@dataclass(frozen=True)
class EmbeddingService:
    """An embedding model registered under a role."""

    role: str
    name: str
    provider: str
    model: Embeddings
    metadata_mode: MetadataMode = MetadataMode.EMBED

    def embed(self, text: str) -> list[float]:
        return self.model.embed_query(text)

    async def aembed(self, text: str) -> list[float]:
        return await self.model.aembed_query(text)

    def embed_documents(self, documents: Sequence[Union[Document, str]]) -> list[list[float]]:
        texts = [format_document(d, self.metadata_mode) for d in documents]
        return self.model.embed_documents(texts)


ModelResource = Union[Llm, EmbeddingService]
