"""
Background auto solver
======================
Applies forced moves one at a time in a daemon thread, pausing between
moves, until the puzzle stalls or a stop is requested.

Progress is streamed through a queue.Queue of SolverEvent objects that the
caller drains without blocking.
"""

import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .. import config
from ..core.puzzle import Bridge, PuzzleState
from ..core.utils import setup_logger
from .deductive_solver import DeductiveSolver


class SolverState(Enum):
    RUNNING = "running"
    INTERRUPTED = "interrupted"
    FINISHED = "finished"


class EventKind(Enum):
    STATE = "state"
    MOVE = "move"


@dataclass
class SolverEvent:
    """One notification from the background solver."""
    kind: EventKind
    state: SolverState
    bridge: Optional[Bridge] = None
    puzzle_state: Optional[PuzzleState] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind == EventKind.STATE and self.state != SolverState.RUNNING


class AutoSolver:
    """
    Runs DeductiveSolver.make_sure_move() repeatedly in a background thread.

    Usage:
        auto = AutoSolver(solver, lock, step_delay=2.0)
        auto.start()
        ...
        for event in auto.drain_events():
            ...
        auto.stop()

    Every move is made while holding `lock`, the same lock the owner uses
    for its own grid mutations.
    """

    def __init__(self, solver: DeductiveSolver, lock=None,
                 step_delay: float = config.SOLVER_STEP_DELAY):
        self.solver = solver
        self.lock = lock or threading.RLock()
        self.step_delay = step_delay
        self.logger = setup_logger(self.__class__.__name__)

        self.stop_event = threading.Event()
        self._events: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._state: Optional[SolverState] = None

    # Public API

    @property
    def state(self) -> Optional[SolverState]:
        """Last published state, None before the first start."""
        return self._state

    def start(self):
        """Launch the solver in a background daemon thread."""
        if self.is_running():
            return
        self.stop_event.clear()
        self._set_state(SolverState.RUNNING)
        self._thread = threading.Thread(target=self._run, name="hashi-auto-solver", daemon=True)
        self._thread.start()

    def stop(self, wait: bool = True, timeout: Optional[float] = None):
        """Request the solver to stop and optionally wait until its thread has exited."""
        self.stop_event.set()
        if wait and self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def drain_events(self) -> List[SolverEvent]:
        """Non-blocking drain of all queued events."""
        items = []
        while True:
            try:
                items.append(self._events.get_nowait())
            except queue.Empty:
                break
        return items

    # Internal

    def _set_state(self, state: SolverState):
        self._state = state
        self._events.put(SolverEvent(EventKind.STATE, state))
        self.logger.info(f"Auto solver {state.value}")

    def _run(self):
        """Thread target: one forced move per step until stalled or stopped."""
        while True:
            if self.stop_event.is_set():
                self._set_state(SolverState.INTERRUPTED)
                return

            with self.lock:
                moved = self.solver.make_sure_move()
                bridge = self.solver.grid.last_inserted_bridge
                puzzle_state = self.solver.grid.puzzle_state

            if not moved:
                self._set_state(SolverState.FINISHED)
                return

            self._events.put(SolverEvent(EventKind.MOVE, SolverState.RUNNING, bridge, puzzle_state))

            if self.stop_event.wait(self.step_delay):
                self._set_state(SolverState.INTERRUPTED)
                return
