"""
Utility modules for tree patching.
"""

from treepatch.utils.logging import (
    get_logger,
    setup_logging,
    log_phase_transition,
    log_error_with_context,
)
from treepatch.utils.metrics import (
    PatchMetrics,
    track_phase,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_phase_transition",
    "log_error_with_context",
    "PatchMetrics",
    "track_phase",
]
