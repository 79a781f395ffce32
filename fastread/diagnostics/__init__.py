"""Diagnostics helpers for the reader loop."""

from .event_bus import EventBus
from .monitor import DiagnosticsMonitor, DiagnosticsState

__all__ = ["EventBus", "DiagnosticsMonitor", "DiagnosticsState"]
