"""CLI output utilities and formatting."""

from colorama import Fore, Style

from grove.operations.diff import FileStatus

STATUS_COLORS = {
    FileStatus.ADD: Fore.GREEN,
    FileStatus.MODIFY: Fore.YELLOW,
    FileStatus.DELETE: Fore.RED,
    FileStatus.CONFLICT: Fore.MAGENTA,
}


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def status_line(status: FileStatus, path: str, color: bool = True) -> str:
    """One name-status line, e.g. 'M src/app.py'."""
    line = f"{status.value} {path}"
    if color and status in STATUS_COLORS:
        return f"{STATUS_COLORS[status]}{line}{Style.RESET_ALL}"
    return line
