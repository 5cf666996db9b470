"""
CLI tool for turning natural language into shell commands.

This package asks an AI provider (OpenAI, Anthropic, Gemini, DeepSeek or the
GitHub Copilot CLI) for a shell command matching a plain-language request,
and places the answer on the terminal prompt so it can be reviewed before it
is run.
"""

__version__ = "1.0.0"
