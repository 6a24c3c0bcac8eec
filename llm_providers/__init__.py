"""Credential-gated LLM and embedding provider registry."""
