"""Diagnostic record types shared by all parsing layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Recovered problems in the input
    ERROR = auto()      # Fatal problems that stopped a parse


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
            "timestamp": self.timestamp,
            "correlation_id": self.correlation_id,
        }
