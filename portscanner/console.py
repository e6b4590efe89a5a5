# console.py
# Colored status lines for the terminal

from colorama import Fore, Style


def paint(text, color: str, bright: bool = False, enabled: bool = True) -> str:
    if not enabled:
        return str(text)
    return f"{Style.BRIGHT if bright else ''}{color}{text}{Style.RESET_ALL}"


def print_success(msg: str) -> None:
    print(paint(msg, Fore.GREEN, bright=True))


def print_error(msg: str) -> None:
    print(paint(msg, Fore.RED, bright=True))


def print_info(msg: str) -> None:
    print(paint(msg, Fore.CYAN))


def format_duration(ms: int) -> str:
    return f"{ms} ms"
