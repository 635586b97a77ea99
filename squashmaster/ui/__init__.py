"""User interface and progress ports."""

from .interface import UserInterface, ProgressReporter, LoggingProgress
from .console import ConsoleUI

__all__ = ["UserInterface", "ProgressReporter", "LoggingProgress", "ConsoleUI"]
