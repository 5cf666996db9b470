"""
The table of supported AI providers.

Providers are plain, immutable records. Whether a provider is usable is
computed from the environment on every call and never stored.
"""
import enum
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import copilot
from .errors import NotConfiguredError, UnknownProviderError

logger = logging.getLogger(__name__)


class AuthType(enum.Enum):
    """How a provider authenticates requests."""

    BEARER = "bearer"  # Authorization: Bearer <key>
    API_KEY = "api_key"  # custom API key header
    CLI = "cli"  # external CLI tool (gh copilot)


@dataclass(frozen=True)
class Provider:
    name: str
    endpoint: str
    default_model: str
    env_var: str
    auth_type: AuthType


@dataclass(frozen=True)
class ProviderStatus:
    """Provider information for display."""

    name: str
    default_model: str
    env_var: str
    configured: bool


OPENAI = Provider(
    name="OpenAI",
    endpoint="https://api.openai.com/v1/chat/completions",
    default_model="gpt-4o",
    env_var="OPENAI_API_KEY",
    auth_type=AuthType.BEARER,
)

ANTHROPIC = Provider(
    name="Anthropic",
    endpoint="https://api.anthropic.com/v1/messages",
    default_model="claude-sonnet-4-20250514",
    env_var="ANTHROPIC_API_KEY",
    auth_type=AuthType.API_KEY,
)

GEMINI = Provider(
    name="Gemini",
    endpoint="https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
    default_model="gemini-2.0-flash",
    env_var="GEMINI_API_KEY",
    auth_type=AuthType.BEARER,
)

DEEPSEEK = Provider(
    name="DeepSeek",
    endpoint="https://api.deepseek.com/chat/completions",
    default_model="deepseek-chat",
    env_var="DEEPSEEK_API_KEY",
    auth_type=AuthType.BEARER,
)

GITHUB_COPILOT = Provider(
    name="GitHub Copilot",
    endpoint="",
    default_model=copilot.COPILOT_DEFAULT_MODEL,
    env_var="",
    auth_type=AuthType.CLI,
)

# API key providers, in detection priority order.
API_PROVIDERS = (OPENAI, ANTHROPIC, GEMINI, DEEPSEEK)

COPILOT_ALIASES = (GITHUB_COPILOT.name, "Copilot", "copilot")

COPILOT_CREDENTIAL_SOURCE = "gh copilot (CLI)"


def _api_key(provider: Provider) -> str:
    return os.environ.get(provider.env_var, "")


def is_configured(provider: Provider) -> bool:
    """Checks whether a provider has what it needs to be queried right now."""
    if provider.auth_type is AuthType.CLI:
        return copilot.is_available()
    return _api_key(provider) != ""


def detect() -> Tuple[Optional[Provider], str]:
    """
    Detects the first available provider.

    API key providers are checked first, in priority order, then the
    GitHub Copilot CLI.

    Returns:
        A tuple of (provider, api_key), or (None, "") when nothing is configured.
    """
    for provider in API_PROVIDERS:
        key = _api_key(provider)
        if key:
            logger.info(f"Detected provider {provider.name} from {provider.env_var}")
            return provider, key

    if copilot.is_available():
        logger.info("Detected provider GitHub Copilot from gh CLI")
        return GITHUB_COPILOT, ""

    return None, ""


def get_by_name(name: str) -> Tuple[Provider, str]:
    """
    Returns a provider and its API key by name.

    Raises:
        NotConfiguredError: If the provider's key is unset or gh copilot is unavailable.
        UnknownProviderError: If no provider has that name.
    """
    for provider in API_PROVIDERS:
        if provider.name == name:
            key = _api_key(provider)
            if not key:
                raise NotConfiguredError(f"provider {name} requires {provider.env_var} to be set")
            return provider, key

    if name in COPILOT_ALIASES:
        if not copilot.is_available():
            raise NotConfiguredError(
                "GitHub Copilot CLI not available. Install with: gh extension install github/gh-copilot"
            )
        return GITHUB_COPILOT, ""

    raise UnknownProviderError(name)


def list_all() -> List[ProviderStatus]:
    """Returns the status of every provider, GitHub Copilot last."""
    result = [
        ProviderStatus(
            name=provider.name,
            default_model=provider.default_model,
            env_var=provider.env_var,
            configured=is_configured(provider),
        )
        for provider in API_PROVIDERS
    ]

    result.append(ProviderStatus(
        name=GITHUB_COPILOT.name,
        default_model=GITHUB_COPILOT.default_model,
        env_var=COPILOT_CREDENTIAL_SOURCE,
        configured=is_configured(GITHUB_COPILOT),
    ))

    return result
