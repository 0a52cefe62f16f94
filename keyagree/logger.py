"""
Centralized logging utility for keyagree
Provides color-coded console output with consistent formatting.

Only curve names, storage tiers and public key fingerprints are ever passed
through here. Private keys and shared secrets must not be.
"""

# ANSI Color Codes
class Colors:
    """ANSI escape codes for terminal colors"""
    RESET = '\033[0m'
    ORANGE = '\033[38;5;214m'
    RED = '\033[38;5;196m'
    YELLOW = '\033[38;5;208m'
    CYAN = '\033[38;5;51m'


class Logger:
    """
    Centralized logging with color support.

    `enabled` silences everything (tests switch it off), `verbose`
    turns on debug output.
    """

    enabled: bool = True
    verbose: bool = False

    @staticmethod
    def error(message: str) -> None:
        """Print error message with red X"""
        if Logger.enabled:
            print(f"{Colors.RED}✗{Colors.RESET} {message}")

    @staticmethod
    def info(message: str) -> None:
        """Print info message with cyan color"""
        if Logger.enabled:
            print(f"{Colors.CYAN}[INFO]{Colors.RESET} {message}")

    @staticmethod
    def warning(message: str) -> None:
        """Print warning message with yellow color"""
        if Logger.enabled:
            print(f"{Colors.YELLOW}[WARNING]{Colors.RESET} {message}")

    @staticmethod
    def debug(tag: str, message: str) -> None:
        """Print debug message with orange tag (verbose mode only)"""
        if Logger.enabled and Logger.verbose:
            print(f"{Colors.ORANGE}[{tag}]{Colors.RESET} {message}")
