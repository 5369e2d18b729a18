"""
Patch application driver.

Runs the three patch phases over a previous-revision tree in their
fixed order: every deletion, then every update, then every insertion.
Insert positions refer to the container shapes left behind by the first
two phases, and insertions are applied in ascending position order so
that earlier insertions never shift the index a later one targets.
There is no rollback: the first failing patch aborts the run and the
tree keeps whatever changes were already made.
"""

from typing import Dict, List, Optional, Sequence

from treepatch.models.node import RoleKind, role_kind
from treepatch.models.patch import DeletePatch, InsertPatch, PatchSet, UpdatePatch
from treepatch.services.deletion import DeletionApplier
from treepatch.services.insertion import InsertionApplier
from treepatch.services.update import UpdateApplier
from treepatch.utils.logging import get_logger, log_error_with_context, log_phase_transition
from treepatch.utils.metrics import PatchMetrics, track_phase


def order_insertions(inserts: Sequence[InsertPatch]) -> List[InsertPatch]:
    """Stable sort of insert patches by ascending position."""
    return sorted(inserts, key=lambda patch: patch.position)


class PatchApplicationDriver:
    """Orchestrates the delete, update and insert phases."""

    def __init__(
        self,
        deletion: Optional[DeletionApplier] = None,
        update: Optional[UpdateApplier] = None,
        insertion: Optional[InsertionApplier] = None,
    ):
        self.deletion = deletion or DeletionApplier()
        self.update = update or UpdateApplier()
        self.insertion = insertion or InsertionApplier()

    def apply(
        self,
        deletes: Sequence[DeletePatch],
        updates: Sequence[UpdatePatch],
        inserts: Sequence[InsertPatch],
        revision_pair: Optional[str] = None,
        metrics: Optional[PatchMetrics] = None,
    ) -> PatchMetrics:
        """
        Apply all patches in place.

        Args:
            deletes: Delete patches
            updates: Update patches
            inserts: Insert patches, in any order
            revision_pair: Label attached to log records and metrics
            metrics: Collector to fill in; a new one is created when omitted

        Returns:
            Metrics of the completed run

        Raises:
            PatchApplicationError: The first failure, unchanged. Errors of
                any other type are re-raised the same way after the run is
                marked as failed.
        """
        logger = get_logger(__name__, revision_pair=revision_pair)
        if metrics is None:
            metrics = PatchMetrics(revision_pair=revision_pair)
        metrics.start()

        phases = (
            ("delete", list(deletes), self.deletion.apply),
            ("update", list(updates), self.update.apply),
            ("insert", order_insertions(inserts), self.insertion.apply),
        )
        self._warn_on_repeated_thrown_inserts(phases[2][1], logger)

        for phase, patches, applier in phases:
            phase_logger = logger.with_context(phase=phase)
            log_phase_transition(phase_logger, phase, "started", len(patches))
            with track_phase(metrics, phase):
                for index, patch in enumerate(patches):
                    try:
                        applier(patch)
                    except Exception as error:
                        # Inconsistent patches surface as plain errors from the node model
                        log_error_with_context(
                            phase_logger,
                            f"Patch application aborted in {phase} phase at patch {index}",
                            error,
                            patch_index=index,
                        )
                        metrics.complete("failed", error_message=str(error), failed_phase=phase)
                        raise
                    metrics.record_applied(phase)
            log_phase_transition(phase_logger, phase, "completed", len(patches))

        metrics.complete("completed")
        return metrics

    def apply_patch_set(
        self,
        patch_set: PatchSet,
        revision_pair: Optional[str] = None,
        metrics: Optional[PatchMetrics] = None,
    ) -> PatchMetrics:
        return self.apply(
            patch_set.deletes, patch_set.updates, patch_set.inserts, revision_pair, metrics
        )

    @staticmethod
    def _warn_on_repeated_thrown_inserts(inserts: Sequence[InsertPatch], logger) -> None:
        # Each thrown insert rewrites the whole set, so a second one per executable is redundant.
        seen: Dict[int, int] = {}
        for patch in inserts:
            if role_kind(patch.node.role) is not RoleKind.THROWN:
                continue
            target = patch.target_parent
            seen[id(target)] = seen.get(id(target), 0) + 1
            if seen[id(target)] == 2:
                logger.warning(
                    f"Multiple thrown-role inserts target {target.tag}#{target.handle}; "
                    "each one replaces the whole thrown set",
                    extra={"phase": "insert"}
                )
