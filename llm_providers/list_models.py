"""List the model roles that would be registered in the current environment.

No provider APIs are called; SDK clients are constructed but never used.

Usage:
    python -m llm_providers.list_models
    python -m llm_providers.list_models --role workhorse
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from llm_providers.llm import (
    LlmProvidersError,
    ModelRegistry,
    default_configurations,
    register_providers,
)

logger = logging.getLogger(__name__)


def format_registry(registry: ModelRegistry) -> str:
    if not len(registry):
        return "No model roles registered. Is OPENAI_API_KEY set?"
    width = max(len(role) for role in registry.roles())
    lines = []
    for resource in registry:
        kind = type(resource).__name__
        lines.append(f"{resource.role:<{width}}  {resource.provider:<8}  {resource.name}  ({kind})")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show registered LLM and embedding roles.")
    parser.add_argument("--role", help="Only show this role (fails if it is not registered)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        registry = register_providers(default_configurations())
    except LlmProvidersError as e:
        logger.error("Provider setup failed: %s", e)
        return 1

    if args.role:
        try:
            resource = registry.get(args.role)
        except LookupError as e:
            logger.error("%s", e)
            return 2
        print(f"{resource.role}  {resource.provider}  {resource.name}")
        return 0

    print(format_registry(registry))
    return 0


if __name__ == "__main__":
    sys.exit(main())
