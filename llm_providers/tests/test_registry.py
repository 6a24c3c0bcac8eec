"""Tests for provider registration and role lookup.

SDK clients are constructed for real (no network); only the API factory is
wrapped so construction can be counted or made to fail.
"""

from __future__ import annotations

import unittest
from typing import Any

from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from llm_providers.llm.errors import (
    ClientConstructionError,
    ConfigValidationError,
    DuplicateRoleError,
    ModelNotFoundError,
    RoleNotRegisteredError,
)
from llm_providers.llm.factory import OpenAiApi, create_openai_api
from llm_providers.llm.models import EmbeddingService, Llm, MetadataMode
from llm_providers.llm.openai_provider import (
    OPENAI_CHAT_OPTIONS_CONVERTER,
    OpenAiConfiguration,
    OpenAiProperties,
)
from llm_providers.llm.registry import ModelRegistrar, ModelRegistry, register_providers

SCENARIO_ENV = {
    "OPENAI_API_KEY": "sk-test",
    "LLMP_OPENAI_WORKHORSE_MODEL": "gpt-x",
    "LLMP_OPENAI_PREMIUM_MODEL": "gpt-y",
    "LLMP_OPENAI_EMBEDDING_MODEL": "embed-z",
}


class _CountingApiFactory:
    def __init__(self) -> None:
        self.calls = 0
        self.apis: list[OpenAiApi] = []

    def __call__(self, **kwargs: Any) -> OpenAiApi:
        self.calls += 1
        api = create_openai_api(**kwargs)
        self.apis.append(api)
        return api


def _rejecting_factory(**_kwargs: Any) -> OpenAiApi:
    raise ValueError("malformed API key")


class TestCredentialAbsent(unittest.TestCase):
    def test_nothing_registered(self) -> None:
        factory = _CountingApiFactory()
        registry = register_providers([OpenAiConfiguration(api_factory=factory)], {})
        self.assertEqual(len(registry), 0)
        self.assertEqual(factory.calls, 0)

    def test_blank_credential_registers_nothing(self) -> None:
        registry = register_providers([OpenAiConfiguration()], {"OPENAI_API_KEY": "   "})
        self.assertEqual(registry.roles(), [])

    def test_workhorse_lookup_reports_unregistered(self) -> None:
        registry = register_providers([OpenAiConfiguration()], {})
        with self.assertRaises(RoleNotRegisteredError) as ctx:
            registry.get_llm("workhorse")
        self.assertEqual(ctx.exception.role, "workhorse")
        self.assertIn("workhorse", str(ctx.exception))
        self.assertNotIn("workhorse", registry)

    def test_unavailable_provider_skips_validation(self) -> None:
        # Blank model settings do not matter when the provider is not active.
        env = {"LLMP_OPENAI_WORKHORSE_MODEL": ""}
        registry = register_providers([OpenAiConfiguration()], env)
        self.assertEqual(len(registry), 0)

    def test_skip_is_logged(self) -> None:
        with self.assertLogs("llm_providers.llm.registry", level="INFO") as logs:
            register_providers([OpenAiConfiguration()], {})
        self.assertIn("OpenAI", logs.output[0])


class TestCredentialPresent(unittest.TestCase):
    def setUp(self) -> None:
        self.factory = _CountingApiFactory()
        self.registry = register_providers(
            [OpenAiConfiguration(api_factory=self.factory)], SCENARIO_ENV
        )

    def test_three_roles_bound_to_configured_models(self) -> None:
        self.assertEqual(self.registry.roles(), ["workhorse", "premium", "embedding"])
        self.assertEqual(self.registry.get("workhorse").name, "gpt-x")
        self.assertEqual(self.registry.get("premium").name, "gpt-y")
        self.assertEqual(self.registry.get("embedding").name, "embed-z")
        for resource in self.registry:
            self.assertEqual(resource.provider, "OpenAI")

    def test_chat_roles(self) -> None:
        workhorse = self.registry.get_llm("workhorse")
        premium = self.registry.get_llm("premium")
        self.assertIsInstance(workhorse.model, ChatOpenAI)
        self.assertEqual(workhorse.model.model_name, "gpt-x")
        self.assertEqual(premium.model.model_name, "gpt-y")
        self.assertIs(workhorse.options_converter, OPENAI_CHAT_OPTIONS_CONVERTER)
        self.assertIs(premium.options_converter, OPENAI_CHAT_OPTIONS_CONVERTER)

    def test_embedding_role(self) -> None:
        service = self.registry.get_embedding_service("embedding")
        self.assertIsInstance(service, EmbeddingService)
        self.assertIsInstance(service.model, OpenAIEmbeddings)
        self.assertEqual(service.model.model, "embed-z")
        self.assertIs(service.metadata_mode, MetadataMode.EMBED)

    def test_client_constructed_once_and_shared(self) -> None:
        self.assertEqual(self.factory.calls, 1)
        api = self.factory.apis[0]
        self.assertIs(self.registry.get_llm("workhorse").model.root_client, api.client)
        self.assertIs(self.registry.get_llm("premium").model.root_client, api.client)
        self.assertIs(
            self.registry.get_embedding_service("embedding").model.client,
            api.client.embeddings,
        )

    def test_wrong_kind_lookup(self) -> None:
        with self.assertRaises(TypeError):
            self.registry.get_llm("embedding")
        with self.assertRaises(TypeError):
            self.registry.get_embedding_service("workhorse")

    def test_lookup_by_name(self) -> None:
        self.assertEqual(self.registry.by_name("gpt-y").role, "premium")
        self.assertEqual(self.registry.by_name("embed-z", provider="OpenAI").role, "embedding")
        with self.assertRaises(ModelNotFoundError):
            self.registry.by_name("gpt-y", provider="Other")
        with self.assertRaises(ModelNotFoundError):
            self.registry.by_name("nope")

    def test_listing(self) -> None:
        self.assertEqual([llm.role for llm in self.registry.llms()], ["workhorse", "premium"])
        self.assertEqual(
            [s.role for s in self.registry.embedding_services()], ["embedding"]
        )
        self.assertEqual(self.registry.providers(), ["OpenAI"])
        self.assertEqual(set(self.registry.as_mapping()), {"workhorse", "premium", "embedding"})

    def test_resources_are_immutable(self) -> None:
        with self.assertRaises(AttributeError):
            self.registry.get_llm("workhorse").name = "other"  # type: ignore[misc]


class TestActivation(unittest.TestCase):
    def test_activation_is_logged(self) -> None:
        with self.assertLogs("llm_providers.llm.openai_provider", level="INFO") as logs:
            register_providers([OpenAiConfiguration()], SCENARIO_ENV)
        self.assertTrue(any("OpenAI AI models are available" in line for line in logs.output))

    def test_client_rejection_is_fatal_and_registers_nothing(self) -> None:
        registrar = ModelRegistrar()
        with self.assertRaises(ClientConstructionError) as ctx:
            registrar.register(OpenAiConfiguration(api_factory=_rejecting_factory), SCENARIO_ENV)
        self.assertIsInstance(ctx.exception.__cause__, ValueError)
        self.assertIn("malformed API key", str(ctx.exception))
        self.assertEqual(len(registrar.registry), 0)

    def test_invalid_properties_fail_before_client(self) -> None:
        factory = _CountingApiFactory()
        env = dict(SCENARIO_ENV, LLMP_OPENAI_EMBEDDING_MODEL=" ")
        with self.assertRaises(ConfigValidationError) as ctx:
            register_providers([OpenAiConfiguration(api_factory=factory)], env)
        self.assertEqual(ctx.exception.fields, ["embedding_model"])
        self.assertEqual(factory.calls, 0)

    def test_preparsed_properties(self) -> None:
        props = OpenAiProperties(
            api_key="sk-other",
            workhorse_model="w",
            premium_model="p",
            embedding_model="e",
        )
        factory = _CountingApiFactory()
        registry = register_providers(
            [OpenAiConfiguration(props, api_factory=factory)], {"OPENAI_API_KEY": "sk-test"}
        )
        self.assertEqual([r.name for r in registry], ["w", "p", "e"])
        self.assertEqual(factory.apis[0].api_key, "sk-other")

    def test_timeout_reaches_client(self) -> None:
        factory = _CountingApiFactory()
        env = dict(SCENARIO_ENV, LLMP_OPENAI_TIMEOUT_SECONDS="30")
        register_providers([OpenAiConfiguration(api_factory=factory)], env)
        self.assertEqual(factory.apis[0].client.timeout, 30.0)
        self.assertEqual(factory.apis[0].async_client.timeout, 30.0)

    def test_custom_role_names(self) -> None:
        configuration = OpenAiConfiguration(
            workhorse_role="openai-workhorse",
            premium_role="openai-premium",
            embedding_role="openai-embedding",
        )
        registry = register_providers([configuration], SCENARIO_ENV)
        self.assertEqual(
            registry.roles(), ["openai-workhorse", "openai-premium", "openai-embedding"]
        )

    def test_duplicate_roles_rejected_atomically(self) -> None:
        registry = register_providers([OpenAiConfiguration()], SCENARIO_ENV)
        second = OpenAiConfiguration(workhorse_role="other-workhorse")
        with self.assertRaises(DuplicateRoleError):
            ModelRegistrar(registry).register(second, SCENARIO_ENV)
        self.assertNotIn("other-workhorse", registry)
        self.assertEqual(len(registry), 3)

    def test_shared_registry(self) -> None:
        registry = ModelRegistry()
        returned = register_providers([OpenAiConfiguration()], SCENARIO_ENV, registry=registry)
        self.assertIs(returned, registry)
        self.assertIsInstance(registry.get("workhorse"), Llm)


if __name__ == "__main__":
    unittest.main()
