import argparse
import logging
from typing import List, Optional, Tuple

from . import __version__, api, providers
from .config import Config, get_timeout, parse_duration
from .errors import HowtoError, ProviderError
from .logger import setup_logging
from .prompt import generate, sanitize_command
from .providers import Provider
from .terminal import insert_input
from .ui import display_providers, print_error, print_info

logger = logging.getLogger(__name__)

PROVIDERS_COMMAND = "providers"

EPILOG = """
Supported providers: OpenAI, Anthropic, Gemini, DeepSeek, GitHub Copilot.

Environment variables:
  OPENAI_API_KEY      OpenAI API key
  ANTHROPIC_API_KEY   Anthropic API key
  GEMINI_API_KEY      Google Gemini API key
  DEEPSEEK_API_KEY    DeepSeek API key
  HOWTO_MODEL         Override default model for the provider
  HOWTO_PROVIDER      Force a specific provider
  HOWTO_TIMEOUT       Request timeout (e.g., "30s", "1m") - default: 30s

Run `howto providers` to list available AI providers and their status.
"""


def _duration(value: str) -> float:
    try:
        seconds = parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be positive: {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="howto",
        description="Get command-line suggestions from AI. The suggested command is "
                    "placed on your prompt so you can review it before running it.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("query", nargs="+", help="What you want to do, in plain language.")
    parser.add_argument("-m", "--model", help="Override the default model")
    parser.add_argument("-p", "--provider", help="Force a specific provider")
    parser.add_argument("-d", "--dry-run", action="store_true",
                        help="Print command without inserting into terminal")
    parser.add_argument("-t", "--timeout", type=_duration,
                        help="Request timeout (e.g., 30s, 1m) - default: 30s")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _get_provider(name: Optional[str]) -> Optional[Tuple[Provider, str]]:
    """Resolves the provider to use, printing the reason when there is none."""
    if name:
        try:
            return providers.get_by_name(name)
        except ProviderError as e:
            print_error(f"Provider '{name}' not found or not configured: {e}")
            return None

    provider, api_key = providers.detect()
    if provider is None:
        print_error("No API key found")
        print_info("Set one of: OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY, DEEPSEEK_API_KEY, "
                   "or install the GitHub Copilot CLI")
        return None

    return provider, api_key


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    Parses command-line arguments and runs howto.

    Args:
        argv: The command-line arguments. If None, `sys.argv[1:]` is used.

    Returns:
        The process exit code.
    """
    args = build_parser().parse_args(argv)

    config = Config()
    if args.verbose:
        config.verbose = True
    setup_logging(config)
    logger.info(f"Configuration: {config}")

    if args.query == [PROVIDERS_COMMAND]:
        display_providers(providers.list_all())
        return 0

    resolved = _get_provider(args.provider or config.provider)
    if resolved is None:
        return 1
    provider, api_key = resolved

    model = args.model or config.model or provider.default_model
    prompt_text = generate(" ".join(args.query))
    timeout = get_timeout(args.timeout, fallback=config.timeout)
    logger.info(f"Querying {provider.name} (model: {model}, timeout: {timeout}s)")

    try:
        response = api.query(provider, api_key, model, prompt_text, timeout)
    except HowtoError as e:
        print_error(f"Failed to query {provider.name}: {e}")
        return 1

    command = sanitize_command(response)
    if not command:
        print_error(f"Failed to query {provider.name}: no command in response")
        return 1

    if args.dry_run:
        print_info(f"Provider: {provider.name} (model: {model})")
        print(command)
        return 0

    insert_input(command)
    return 0
