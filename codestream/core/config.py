# centralized configuration loader
# runs load_dotenv() to read .env
# decouples code from environment so provider keys, hosts and limits can change without a code change

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


# Providers
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_BASE_URL = os.getenv("ANTHROPIC_BASE_URL") or "https://api.anthropic.com/v1"
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or "https://api.openai.com/v1"
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL") or "https://api.groq.com/openai/v1"
CEREBRAS_API_KEY = os.getenv("CEREBRAS_API_KEY", "")
CEREBRAS_BASE_URL = os.getenv("CEREBRAS_BASE_URL") or "https://api.cerebras.ai/v1"

# seconds before an upstream stream is abandoned
PROVIDER_TIMEOUT = float(os.getenv("PROVIDER_TIMEOUT", "120"))

# Generation defaults
DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "cerebras/qwen-3-235b-a22b-instruct-2507")
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "8000"))

# characters carried between chunks when looking for package tags
PACKAGE_SCAN_WINDOW = int(os.getenv("PACKAGE_SCAN_WINDOW", "100"))

# Conversation state
ENABLE_CONVERSATION_STATE = _flag("ENABLE_CONVERSATION_STATE", "true")
CONVERSATION_MAX_MESSAGES = int(os.getenv("CONVERSATION_MAX_MESSAGES", "200"))

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
