"""Terminal styling, built once at startup and passed to whatever prints."""
from dataclasses import dataclass

_RESET = "\033[0m"
_STYLES = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
    "bright_blue": "\033[94m",
}


@dataclass(frozen=True)
class Theme:
    """ANSI styling. With ``enabled=False`` every method returns text unchanged."""

    enabled: bool = True

    def style(self, text: str, *styles: str) -> str:
        if not self.enabled or not styles:
            return text
        prefix = "".join(_STYLES[s] for s in styles)
        return f"{prefix}{text}{_RESET}"

    def heading(self, text: str) -> str:
        return self.style(text, "bold", "cyan")

    def rule(self, char: str = "=", width: int = 40) -> str:
        return self.style(char * width, "cyan")

    def prompt(self, text: str) -> str:
        return self.style("? ", "yellow") + self.style(text, "bold")

    def notice(self, text: str) -> str:
        return self.style(text, "blue")

    def info(self, text: str) -> str:
        return self.style(text, "bright_blue")

    def highlight(self, text: str) -> str:
        return self.style(text, "yellow")

    def muted(self, text: str) -> str:
        return self.style(text, "dim")

    def success(self, text: str) -> str:
        return self.style(text, "bold", "green")

    def error(self, text: str) -> str:
        return self.style(text, "red")
