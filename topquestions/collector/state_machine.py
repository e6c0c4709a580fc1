"""State machine for a paginated top-questions run."""

from enum import Enum

import structlog

from topquestions.collector.constants import COMPONENT_COLLECTOR


logger = structlog.get_logger()


class RunState(str, Enum):
    """State of a run.

    - RUN_START: Top-K set empty, page counter at 1
    - RUN_FETCHING: Waiting for a rate-limit slot or the page response
    - RUN_FILTERING: Applying the inclusion predicate to the page
    - RUN_MERGING: Merging kept items into the top-K set
    - RUN_DECIDING: Checking the continuation flag
    - RUN_DONE: Completed; the top-K set is the result
    - RUN_FAILED: Aborted with an error; no result
    """

    RUN_START = "RUN_START"
    RUN_FETCHING = "RUN_FETCHING"
    RUN_FILTERING = "RUN_FILTERING"
    RUN_MERGING = "RUN_MERGING"
    RUN_DECIDING = "RUN_DECIDING"
    RUN_DONE = "RUN_DONE"
    RUN_FAILED = "RUN_FAILED"


_VALID_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.RUN_START: {RunState.RUN_FETCHING, RunState.RUN_FAILED},
    RunState.RUN_FETCHING: {RunState.RUN_FILTERING, RunState.RUN_FAILED},
    RunState.RUN_FILTERING: {RunState.RUN_MERGING, RunState.RUN_FAILED},
    RunState.RUN_MERGING: {RunState.RUN_DECIDING, RunState.RUN_FAILED},
    RunState.RUN_DECIDING: {
        RunState.RUN_FETCHING,
        RunState.RUN_DONE,
        RunState.RUN_FAILED,
    },
    RunState.RUN_DONE: set(),  # Terminal state
    RunState.RUN_FAILED: set(),  # Terminal state
}


class RunStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        run_id: str,
        from_state: RunState,
        to_state: RunState,
    ) -> None:
        """Initialize the transition error.

        Args:
            run_id: Identifier of the run.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.run_id = run_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for run '{run_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class RunStateMachine:
    """Manages state transitions for a run.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        run_id: str,
        initial_state: RunState = RunState.RUN_START,
    ) -> None:
        """Initialize the state machine.

        Args:
            run_id: Identifier for the current run.
            initial_state: Starting state.
        """
        self._run_id = run_id
        self._state = initial_state
        self._log = logger.bind(component=COMPONENT_COLLECTOR, run_id=run_id)

    @property
    def state(self) -> RunState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RunState.RUN_DONE, RunState.RUN_FAILED)

    def can_transition_to(self, target: RunState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RunState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RunStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RunStateTransitionError(
                run_id=self._run_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_fetching(self) -> None:
        """Transition to RUN_FETCHING state."""
        self.transition_to(RunState.RUN_FETCHING)

    def to_filtering(self) -> None:
        """Transition to RUN_FILTERING state."""
        self.transition_to(RunState.RUN_FILTERING)

    def to_merging(self) -> None:
        """Transition to RUN_MERGING state."""
        self.transition_to(RunState.RUN_MERGING)

    def to_deciding(self) -> None:
        """Transition to RUN_DECIDING state."""
        self.transition_to(RunState.RUN_DECIDING)

    def to_done(self) -> None:
        """Transition to RUN_DONE state."""
        self.transition_to(RunState.RUN_DONE)

    def to_failed(self) -> None:
        """Transition to RUN_FAILED state."""
        self.transition_to(RunState.RUN_FAILED)
