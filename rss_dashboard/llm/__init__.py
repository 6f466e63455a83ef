"""Language-model command channel."""

from .commands import Analysis, Command, CommandOutcome, execute_command, parse_reply
from .prompts import analyze_system_prompt, build_article_digest, manage_system_prompt
from .providers import (
    CommandProvider,
    GeminiProvider,
    OpenAICompatibleProvider,
    ProviderError,
    available_providers,
    create_provider,
)

__all__ = [
    "Analysis",
    "Command",
    "CommandOutcome",
    "execute_command",
    "parse_reply",
    "analyze_system_prompt",
    "build_article_digest",
    "manage_system_prompt",
    "CommandProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "ProviderError",
    "available_providers",
    "create_provider",
]
