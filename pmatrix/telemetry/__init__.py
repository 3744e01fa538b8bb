"""P-MATRIX -- Telemetry."""

from pmatrix.telemetry.logging import configure_library_logging, setup_logging

__all__ = ["configure_library_logging", "setup_logging"]
