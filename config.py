"""
Configuration and shared constants for Weitblick.
"""

import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()
user_config = Path.home() / ".weitblick" / "config.env"
if user_config.exists():
    load_dotenv(user_config, override=True)

# Paths
DATA_DIR = Path(os.environ.get("WEITBLICK_HOME", Path.home() / ".weitblick"))
CREDENTIALS_FILE = DATA_DIR / "credentials.json"
MODELS_CONFIG = Path("models.yaml")

# Provider enumeration order doubles as result-selection priority
PROVIDERS = ["gemini", "openai", "anthropic", "deepseek"]

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
OPENAI_URL = "https://api.openai.com/v1"
ANTHROPIC_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"
DEEPSEEK_URL = "https://api.deepseek.com/v1"

# Fixed sampling - not user-tunable
SAMPLING = {
    "temperature": 0.7,
    "top_k": 40,
    "top_p": 0.95,
    "max_tokens": 1024,
}

DEFAULT_MODELS = {
    "gemini": "gemini-pro",
    "openai": "gpt-4",
    "anthropic": "claude-3-sonnet-20240229",
    "deepseek": "deepseek-chat",
}

# Env var names for the environment credential backend
ENV_KEYS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}

CALL_TIMEOUT = float(os.environ.get("WEITBLICK_CALL_TIMEOUT", "60"))
MAX_CONCURRENCY = int(os.environ.get("WEITBLICK_MAX_CONCURRENCY", "4"))
CREDENTIAL_BACKEND = os.environ.get("WEITBLICK_CREDENTIAL_BACKEND", "json")
DISCOURSE_STRATEGY = os.environ.get("WEITBLICK_DISCOURSE_STRATEGY", "per_perspective")

# Quintessence needs at least this many sibling nodes on a level
QUINTESSENCE_MIN_SIBLINGS = 2

WEB_PORT = int(os.environ.get("WEITBLICK_PORT", "5001"))


def load_models_config() -> dict:
    """Load vendor model names from YAML, falling back to the defaults."""
    models = dict(DEFAULT_MODELS)
    if MODELS_CONFIG.exists():
        with open(MODELS_CONFIG) as f:
            data = yaml.safe_load(f) or {}
        for provider, name in (data.get("models") or {}).items():
            if provider in models and name:
                models[provider] = str(name)
    return models


def get_model_name(provider: str) -> str:
    """Model name configured for a provider."""
    return load_models_config()[provider]
