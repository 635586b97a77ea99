"""Configuration management for the squash tool."""

from dataclasses import dataclass
from typing import Optional

STRATEGIES = ("auto", "rebase", "soft-reset")


@dataclass
class SquashConfig:
    """Configuration for squash operations."""

    # Remote settings
    remote_name: str = "origin"

    # Rewrite settings
    strategy: str = "auto"
    scratch_filename: str = ".squashmaster-rebase-todo"
    message_filename: str = ".squashmaster-message"

    # History settings
    max_log_entries: Optional[int] = None

    # Message formatting
    subject_line_limit: int = 96

    # ai settings
    model: str = "claude-3-7-sonnet-20250219"
    max_tokens: int = 512

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"strategy must be one of {', '.join(STRATEGIES)}, got {self.strategy!r}")

        if not isinstance(self.remote_name, str) or not self.remote_name:
            raise ValueError(
                f"remote_name must be a non-empty string, got {self.remote_name!r}")

        # Validate remote name doesn't contain invalid characters
        invalid_chars = [' ', '\n', '\t', '..',
                         '~', '^', ':', '?', '*', '[', '\\']
        for char in invalid_chars:
            if char in self.remote_name:
                raise ValueError(
                    f"remote_name contains invalid character '{char}': {self.remote_name}")

        # Scratch files live in the working directory root
        for name in (self.scratch_filename, self.message_filename):
            if not name or '/' in name or '\\' in name:
                raise ValueError(
                    f"scratch file names must be plain file names, got {name!r}")
        if self.scratch_filename == self.message_filename:
            raise ValueError("scratch_filename and message_filename must differ")

        if self.max_log_entries is not None and self.max_log_entries <= 0:
            raise ValueError(
                f"max_log_entries must be positive, got {self.max_log_entries}")

        if self.subject_line_limit <= 0:
            raise ValueError(
                f"subject_line_limit must be positive, got {self.subject_line_limit}")

        # Validate ai options
        if not isinstance(self.model, str):
            raise ValueError(f"model must be a string, got {type(self.model)}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    @classmethod
    def from_cli_args(cls, args) -> 'SquashConfig':
        """Create config from command line arguments."""
        try:
            return cls(
                remote_name=getattr(args, 'remote', None) or cls.remote_name,
                strategy=getattr(args, 'strategy', None) or cls.strategy,
                model=getattr(args, 'model', None) or cls.model,
            )
        except ValueError as e:
            raise ValueError(
                f"Invalid configuration from command line arguments: {e}") from e

    def with_overrides(self, **kwargs) -> 'SquashConfig':
        """Create a new config with specific overrides."""
        fields = {field.name: getattr(self, field.name)
                  for field in self.__dataclass_fields__.values()}
        fields.update(kwargs)
        return SquashConfig(**fields)
