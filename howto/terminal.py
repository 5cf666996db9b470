import logging
import sys

try:
    import fcntl
    import termios
    import tty
except ImportError:  # Windows
    fcntl = termios = tty = None

logger = logging.getLogger(__name__)


def _print_command(command: str) -> None:
    sys.stdout.write(command + "\n")
    sys.stdout.flush()


def _can_inject() -> bool:
    if termios is None or not hasattr(termios, "TIOCSTI"):
        return False
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def insert_input(command: str) -> None:
    """
    Inserts the command into the terminal's input buffer.

    This lets the user see and edit the command before running it. When the
    terminal does not allow it, the command is printed instead.
    """
    if not _can_inject():
        _print_command(command)
        return

    fd = sys.stdin.fileno()
    try:
        old_state = termios.tcgetattr(fd)
    except termios.error as e:
        logger.info(f"Cannot read terminal attributes: {e}")
        _print_command(command)
        return

    injected = False
    try:
        tty.setraw(fd)
        for char in command.encode():
            fcntl.ioctl(fd, termios.TIOCSTI, bytes([char]))
        injected = True
    except OSError as e:
        # Linux 6.2+ can disable TIOCSTI (dev.tty.legacy_tiocsti=0)
        logger.info(f"TIOCSTI unavailable, printing command instead: {e}")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_state)

    if not injected:
        _print_command(command)
