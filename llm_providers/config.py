import os
from typing import Mapping, Optional

from dotenv import load_dotenv

# Pick up a local .env so LLMP_* and OPENAI_* settings need not be exported
load_dotenv()

# All provider settings live under this prefix, except the vendor's own
# credential variables (OPENAI_API_KEY, OPENAI_BASE_URL) which are read as-is.
ENV_PREFIX = "LLMP_"

# OpenAI
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_BASE_URL_ENV = "OPENAI_BASE_URL"
OPENAI_TIMEOUT_SECONDS_ENV = f"{ENV_PREFIX}OPENAI_TIMEOUT_SECONDS"
OPENAI_WORKHORSE_MODEL_ENV = f"{ENV_PREFIX}OPENAI_WORKHORSE_MODEL"
OPENAI_PREMIUM_MODEL_ENV = f"{ENV_PREFIX}OPENAI_PREMIUM_MODEL"
OPENAI_EMBEDDING_MODEL_ENV = f"{ENV_PREFIX}OPENAI_EMBEDDING_MODEL"

DEFAULT_OPENAI_WORKHORSE_MODEL = "gpt-4.1-mini"
DEFAULT_OPENAI_PREMIUM_MODEL = "gpt-4.1"
DEFAULT_OPENAI_EMBEDDING_MODEL = "text-embedding-3-small"

# Role names the host application looks resources up by
WORKHORSE_ROLE = "workhorse"
PREMIUM_ROLE = "premium"
EMBEDDING_ROLE = "embedding"


def environment(environ: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Return the environment view to read from (process env by default)."""
    return os.environ if environ is None else environ
