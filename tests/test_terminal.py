import unittest
from io import StringIO
from unittest.mock import call, patch

from howto import terminal


class TestInsertInput(unittest.TestCase):
    """Test cases for terminal injection."""

    @patch("sys.stdout", new_callable=StringIO)
    @patch("howto.terminal._can_inject", return_value=False)
    def test_fallback_prints_command(self, mock_can_inject, mock_stdout):
        terminal.insert_input("ls -la")

        self.assertEqual(mock_stdout.getvalue(), "ls -la\n")

    @patch("sys.stdout", new_callable=StringIO)
    @patch("howto.terminal.tty")
    @patch("howto.terminal.fcntl")
    @patch("howto.terminal.termios")
    @patch("howto.terminal.sys.stdin")
    @patch("howto.terminal._can_inject", return_value=True)
    def test_pushes_each_byte(self, mock_can_inject, mock_stdin, mock_termios, mock_fcntl, mock_tty, mock_stdout):
        mock_stdin.fileno.return_value = 0
        mock_termios.tcgetattr.return_value = ["old-state"]

        terminal.insert_input("ls")

        mock_tty.setraw.assert_called_once_with(0)
        mock_fcntl.ioctl.assert_has_calls([
            call(0, mock_termios.TIOCSTI, b"l"),
            call(0, mock_termios.TIOCSTI, b"s"),
        ])
        mock_termios.tcsetattr.assert_called_once_with(0, mock_termios.TCSADRAIN, ["old-state"])
        self.assertEqual(mock_stdout.getvalue(), "")

    @patch("sys.stdout", new_callable=StringIO)
    @patch("howto.terminal.tty")
    @patch("howto.terminal.fcntl")
    @patch("howto.terminal.termios")
    @patch("howto.terminal.sys.stdin")
    @patch("howto.terminal._can_inject", return_value=True)
    def test_refused_ioctl_falls_back(self, mock_can_inject, mock_stdin, mock_termios, mock_fcntl, mock_tty, mock_stdout):
        mock_stdin.fileno.return_value = 0
        mock_fcntl.ioctl.side_effect = OSError(5, "Input/output error")

        terminal.insert_input("pwd")

        mock_termios.tcsetattr.assert_called_once()
        self.assertEqual(mock_stdout.getvalue(), "pwd\n")

    @patch("howto.terminal.termios", None)
    def test_cannot_inject_without_termios(self):
        self.assertFalse(terminal._can_inject())

    @patch("howto.terminal.sys.stdin")
    def test_cannot_inject_without_tty(self, mock_stdin):
        mock_stdin.isatty.return_value = False
        if terminal.termios is None:
            self.skipTest("termios not available")
        self.assertFalse(terminal._can_inject())


if __name__ == "__main__":
    unittest.main()
