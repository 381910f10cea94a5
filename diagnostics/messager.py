"""Diagnostics channel for processing rounds.

Collects diagnostics instead of raising, so one bad declaration or file
never stops the rest of the round.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from contracts import Diagnostic, Severity, TypeElement


logger = logging.getLogger(__name__)

_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.NOTE: "dim",
}


class Messager:
    """Diagnostics sink.

    Args:
        console: When given, each diagnostic is also printed as it is reported
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console
        self.diagnostics: List[Diagnostic] = []

    def print_message(
        self,
        severity: Severity,
        message: str,
        element: Optional[TypeElement] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message, element=element)
        self.diagnostics.append(diagnostic)
        logger.debug("%s", diagnostic.format())
        if self.console is not None:
            style = _STYLES[severity]
            location = f"{escape(element.location())}: " if element is not None else ""
            self.console.print(f"{location}[{style}]{severity.value}[/{style}]: {escape(message)}")
        return diagnostic

    def error(self, message: str, element: Optional[TypeElement] = None) -> Diagnostic:
        return self.print_message(Severity.ERROR, message, element)

    def warning(self, message: str, element: Optional[TypeElement] = None) -> Diagnostic:
        return self.print_message(Severity.WARNING, message, element)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def since(self, index: int) -> List[Diagnostic]:
        """Diagnostics reported after the first ``index`` ones."""
        return self.diagnostics[index:]
