"""Runtime services shared by the completion, highlight and adapter layers."""

from . import telemetry

__all__ = ["telemetry"]
