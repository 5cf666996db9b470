"""
Prompt construction and response cleanup.

`generate` wraps a natural-language query into the instruction sent to the
provider, and `sanitize_command` reduces whatever the model answers to a
single command line.
"""
import sys
from typing import Optional

FENCE = "```"

LANGUAGE_PREFIXES = ("bash", "sh", "zsh", "shell", "cmd", "powershell")

PROMPT_TEMPLATE = """You are a command line assistant that helps users with shell commands.
User wants assistance with the following task:

{query}

Instructions:
- Respond with a single command that achieves the desired result
- The command should be suitable for {os_name} operating system
- Output ONLY the command, without any explanation
- Do not include any quotes, backticks, or markdown formatting
- If the task requires multiple commands, chain them with && or ;
- If you're unsure, provide the most common/standard approach
"""


def user_os(platform: Optional[str] = None) -> str:
    """Returns a human-readable name for the running operating system."""
    platform = platform or sys.platform
    if platform == "darwin":
        return "macOS"
    if platform.startswith("linux"):
        return "Linux"
    if platform in ("win32", "cygwin"):
        return "Windows"
    return platform


def generate(query: str) -> str:
    """Creates the prompt for the AI provider."""
    return PROMPT_TEMPLATE.format(query=query, os_name=user_os())


def _strip_fences(text: str) -> str:
    cleaned = []
    in_code_block = False

    for line in text.split("\n"):
        trimmed = line.strip()

        # Skip empty lines at start
        if not cleaned and not trimmed:
            continue

        # Fence lines toggle the block and are dropped with their language tag
        if trimmed.startswith(FENCE):
            in_code_block = not in_code_block
            continue

        cleaned.append(line)

    return "\n".join(cleaned)


def _strip_language_prefix(text: str) -> str:
    lowered = text.lower()
    for lang in LANGUAGE_PREFIXES:
        if lowered.startswith(lang + "\n"):
            return text[len(lang) + 1:]
    return text


def sanitize_command(response: str) -> str:
    """
    Cleans up an AI response to extract just the command.

    Markdown fences (and their language tags) are removed, surrounding
    backticks are stripped, a leading shell name on its own line is dropped,
    and multi-line output is folded into a single line with single spaces.

    A line that merely starts with three backticks always toggles the fence
    state, so commands that legitimately contain them are not preserved.

    Args:
        response: The raw text returned by the provider.

    Returns:
        The bare command, or an empty string if nothing is left.
    """
    cmd = _strip_fences(response.strip())

    # Remove inline backticks
    cmd = cmd.strip("`")

    cmd = _strip_language_prefix(cmd)

    # Replace newlines with spaces for multi-line commands
    cmd = cmd.replace("\n", " ")

    # Clean up multiple spaces
    while "  " in cmd:
        cmd = cmd.replace("  ", " ")

    return cmd.strip()
