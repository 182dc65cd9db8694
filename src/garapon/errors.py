"""Exceptions shared by the drum engine and the terminal front end."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GaraponError(Exception):
    """Base error; carries the process exit status used by the CLI."""

    code: str
    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


class ConfigurationError(GaraponError, ValueError):
    """Drum or variant parameters that no session could play."""

    def __init__(self, message: str = "Invalid drum configuration") -> None:
        super().__init__(code="configuration", message=message)


InvalidConfiguration = ConfigurationError


class ResourceExhaustion(GaraponError):
    """Terminal windows or ball pools could not be allocated."""

    def __init__(self, message: str = "Out of resources") -> None:
        super().__init__(code="resource_exhaustion", message=message)


class EnvironmentFault(GaraponError):
    """The system clock could not be read."""

    def __init__(self, message: str = "Clock read failed") -> None:
        super().__init__(code="environment_fault", message=message)


class OperatorCancel(Exception):
    """The operator pressed 'q' at a wait point. Not an error."""
