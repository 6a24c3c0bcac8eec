"""Client and model construction for provider configurations.

This module centralizes:
- building the low-level SDK client for a provider (once per credential)
- instantiating LangChain chat / embedding models that reuse that client

Provider configurations call these helpers instead of instantiating SDK
objects themselves, so the shared-client rule lives in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import openai
from langchain_openai import ChatOpenAI, OpenAIEmbeddings


@dataclass(frozen=True)
class OpenAiApi:
    """OpenAI SDK clients (sync + async) shared by every role of the provider."""

    api_key: str = field(repr=False)
    base_url: Optional[str]
    client: openai.OpenAI
    async_client: openai.AsyncOpenAI


def create_openai_api(
    *,
    api_key: str,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> OpenAiApi:
    """Create the OpenAI SDK clients. Raises whatever the SDK raises."""
    kwargs: dict[str, object] = {"api_key": api_key}
    if base_url:
        kwargs["base_url"] = base_url
    if timeout is not None:
        kwargs["timeout"] = timeout
    return OpenAiApi(
        api_key=api_key,
        base_url=base_url or None,
        client=openai.OpenAI(**kwargs),  # type: ignore[arg-type]
        async_client=openai.AsyncOpenAI(**kwargs),  # type: ignore[arg-type]
    )


def create_openai_chat_model(api: OpenAiApi, model_name: str) -> ChatOpenAI:
    """Chat model bound to `model_name` that reuses the shared SDK clients."""
    return ChatOpenAI(  # type: ignore[call-arg]
        model=model_name,
        api_key=api.api_key,
        base_url=api.base_url,
        client=api.client.chat.completions,
        async_client=api.async_client.chat.completions,
        root_client=api.client,
        root_async_client=api.async_client,
    )


def create_openai_embedding_model(api: OpenAiApi, model_name: str) -> OpenAIEmbeddings:
    """Embedding model bound to `model_name`; carries no generation options."""
    return OpenAIEmbeddings(  # type: ignore[call-arg]
        model=model_name,
        api_key=api.api_key,
        base_url=api.base_url,
        client=api.client.embeddings,
        async_client=api.async_client.embeddings,
    )
