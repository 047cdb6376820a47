"""
Execution Status Tracker - Passive slot for the in-flight execution.

The external execution engine is the only writer. It reports a run
starting, per-node progress and the run ending; the tracker records those
transitions and keeps `is_executing == (current_execution is not None)`.
"""

from __future__ import annotations

import logging

from creator_canvas.core.errors import ExecutionStateError
from creator_canvas.core.models import (
    ExecutionStatus,
    NodeExecutionState,
    WorkflowExecution,
    now_iso,
)


logger = logging.getLogger(__name__)


class ExecutionTracker:
    """Holds the current execution descriptor and the derived running flag."""

    def __init__(self):
        self._current: WorkflowExecution | None = None
        self._last: WorkflowExecution | None = None

    @property
    def current_execution(self) -> WorkflowExecution | None:
        return self._current

    @property
    def last_execution(self) -> WorkflowExecution | None:
        """The most recent execution that reached a terminal status."""
        return self._last

    @property
    def is_executing(self) -> bool:
        return self._current is not None

    def set_current_execution(self, execution: WorkflowExecution | None) -> None:
        """
        Record the execution reported by the engine.

        A descriptor already in a terminal status ends the run: it is kept
        as `last_execution` and the slot is cleared.
        """
        if execution is not None and execution.status.is_terminal:
            self._last = execution
            self._current = None
            logger.info(
                "Execution %s ended: %s", execution.id, execution.status.value
            )
            return
        self._current = execution

    def set_is_executing(self, is_executing: bool) -> None:
        """
        Set the running flag.

        False clears the slot. True is only valid while a descriptor is set.
        """
        if is_executing:
            if self._current is None:
                raise ExecutionStateError(
                    "Cannot mark as executing without a current execution"
                )
            return
        if self._current is not None:
            self._last = self._current
        self._current = None

    # --- Engine convenience transitions ---

    def start(self, execution: WorkflowExecution) -> None:
        """Mark a run as started."""
        if self._current is not None and self._current.id != execution.id:
            logger.warning(
                "Execution %s replaces running execution %s",
                execution.id,
                self._current.id,
            )
        execution.status = ExecutionStatus.RUNNING
        execution.started_at = execution.started_at or now_iso()
        self._current = execution

    def update_node_state(self, state: NodeExecutionState) -> None:
        """Record progress of one node in the current run."""
        if self._current is None:
            raise ExecutionStateError("No execution in progress")
        self._current.node_states[state.node_id] = state

    def finish(self, status: ExecutionStatus, error: str | None = None) -> None:
        """End the current run with a terminal status."""
        if not status.is_terminal:
            raise ExecutionStateError(f"{status.value} is not a terminal status")
        if self._current is None:
            raise ExecutionStateError("No execution in progress")
        execution = self._current
        execution.status = status
        execution.error = error
        execution.completed_at = now_iso()
        self.set_current_execution(execution)
