class RooCodeError(Exception):
    """Base exception for all roocode-generator errors.

    The message is automatically prefixed with the subsystem name in square brackets.
    """

    subsystem = "core"

    def __init__(self, message: str, *, subsystem: str | None = None) -> None:
        self.subsystem = subsystem or self.subsystem
        self.message = message
        super().__init__(f"[{self.subsystem}] {message}")


# ─── Subsystem-level exceptions ───────────────────────────────────────────────


class LLMError(RooCodeError):
    """Raised for issues specific to LLM communication or generation."""

    subsystem = "llm"


class ConfigError(RooCodeError):
    """Raised for configuration loading or parsing errors."""

    subsystem = "config"


class CLIError(RooCodeError):
    """Raised for CLI-specific logic or user input issues."""

    subsystem = "cli"
