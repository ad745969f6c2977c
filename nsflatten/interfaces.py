"""
Generic interfaces for nsflatten components.

This module defines the Protocol interfaces shared by the transforms and the
diagnostic channel they report through. Diagnostics are observational only:
they describe heuristic decisions and skipped shapes, and never change what a
transform does.
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from .syntax.module import JsModule

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Categories of notices emitted while transforming a module."""

    ASSUMED_CLASS_CONSTANT = "assumed_class_constant"
    ASSUMED_CLASS_MEMBER = "assumed_class_member"
    UNTRANSFORMED_SHAPE = "untransformed_shape"
    REQUIRE_ADDED = "require_added"
    EXPORT_ADDED = "export_added"


@dataclass(frozen=True)
class Diagnostic:
    """A single human-readable notice."""

    kind: DiagnosticKind
    message: str
    line: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class DiagnosticListener(Protocol):
    """Receives diagnostics from transforms."""

    def notify(self, diagnostic: Diagnostic) -> None:
        ...


class ModuleTransform(Protocol):
    """A transform that edits a `JsModule` in place."""

    def apply(self, module: JsModule) -> Any:
        ...


class LoggingDiagnosticListener:
    """Forwards diagnostics to the `logging` module."""

    def __init__(self, level: int = logging.INFO, logger_name: Optional[str] = None):
        self.level = level
        self._logger = logging.getLogger(logger_name) if logger_name else logger

    def notify(self, diagnostic: Diagnostic) -> None:
        self._logger.log(self.level, "%s", diagnostic)


class DiagnosticCollector:
    """Keeps every diagnostic it receives, optionally forwarding to another listener."""

    def __init__(self, forward_to: Optional[DiagnosticListener] = None):
        self.diagnostics: List[Diagnostic] = []
        self._forward_to = forward_to

    def notify(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self._forward_to is not None:
            self._forward_to.notify(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def clear(self) -> None:
        self.diagnostics.clear()
