import logging
import sys

from dotenv import load_dotenv

from .cli import run_cli

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the application."""
    load_dotenv()
    try:
        exit_code = run_cli()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(130)  # 128 + SIGINT
    except Exception as e:
        logger.exception(f"Unhandled exception: {str(e)}")
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
