import logging
import shutil
import subprocess
from typing import List, Optional

from .errors import (
    CopilotError,
    NotAuthenticatedError,
    RequestTimeoutError,
    SubscriptionRequiredError,
    ToolNotAvailableError,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)

GH_EXECUTABLE = "gh"

# Model used by gh copilot when none is requested explicitly.
COPILOT_DEFAULT_MODEL = "gpt-4"

# Upper bound for the availability check.
VERSION_CHECK_TIMEOUT = 10.0

SHELL_PROMPT_PREFIX = "Output only a shell command (no explanation, no markdown, no backticks) that: "


def find_gh() -> Optional[str]:
    """Returns the path of the gh executable, or None if it is not installed."""
    return shutil.which(GH_EXECUTABLE)


def is_available() -> bool:
    """
    Checks whether the GitHub Copilot CLI can be used.

    gh has to be on the search path and `gh copilot -- --version` has to
    exit successfully.
    """
    gh_path = find_gh()
    if not gh_path:
        return False

    try:
        result = subprocess.run(
            [gh_path, "copilot", "--", "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_CHECK_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.info(f"gh copilot version check failed: {e}")
        return False

    return result.returncode == 0


def build_args(prompt_text: str, model: str = "") -> List[str]:
    """
    Builds the gh arguments for a non-interactive, silent prompt.

    `-p` runs copilot in prompt mode and `-s` limits the output to the answer.
    """
    args = ["copilot", "--", "-p", SHELL_PROMPT_PREFIX + prompt_text, "-s"]

    if model and model != COPILOT_DEFAULT_MODEL:
        args.extend(["--model", model])

    return args


def classify_error(error: subprocess.CalledProcessError, stderr: str) -> CopilotError:
    """Maps a failed gh copilot run to the matching error."""
    if "not installed" in stderr or "extension" in stderr:
        return ToolNotAvailableError("GitHub Copilot CLI not available. Ensure gh copilot works")

    if "auth" in stderr or "login" in stderr:
        return NotAuthenticatedError("Not authenticated with GitHub. Run: gh auth login")

    if "subscription" in stderr:
        return SubscriptionRequiredError("GitHub Copilot subscription required")

    return CopilotError(f"gh copilot failed: {error}: {stderr.strip()}")


def run_copilot(prompt_text: str, model: str, timeout: float) -> str:
    """
    Asks gh copilot for a command and returns its trimmed standard output.

    Raises:
        ToolNotFoundError: If gh is not installed.
        RequestTimeoutError: If gh does not finish within the timeout.
        CopilotError: If gh exits with a non-zero status.
    """
    gh_path = find_gh()
    if not gh_path:
        raise ToolNotFoundError("GitHub CLI (gh) not found. Install it from https://cli.github.com/")

    args = [gh_path] + build_args(prompt_text, model)
    logger.info(f"Running gh copilot (model: {model or COPILOT_DEFAULT_MODEL})")

    try:
        # subprocess.run kills the child when the timeout expires
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.TimeoutExpired as e:
        raise RequestTimeoutError() from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr or ""
        logger.info(f"gh copilot exited with status {e.returncode}: {stderr.strip()}")
        raise classify_error(e, stderr) from e
    except OSError as e:
        raise CopilotError(f"failed to run gh copilot: {e}") from e

    return (result.stdout or "").strip()
