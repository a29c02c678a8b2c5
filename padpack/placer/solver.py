"""Cooperative stepping contract shared by every solver.

``setup()`` is idempotent, ``step()`` does one bounded unit of work and
``solve()`` steps until a terminal state under an iteration cap.  A
parent owns at most one child, exposed through ``Evaluating(child)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from padpack.config import PACK_RULES
from padpack.visualize import GraphicsSnapshot

log = logging.getLogger(__name__)


# ── States ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Evaluating:
    child: "BaseSolver | None" = None
    label: str = ""


@dataclass(frozen=True)
class Solved:
    result: Any


@dataclass(frozen=True)
class Failed:
    reason: str


SolverState = Union[Idle, Evaluating, Solved, Failed]


class BaseSolver:
    """Base class for stepping solvers."""

    max_iterations: int = PACK_RULES.max_iterations_per_component

    def __init__(self) -> None:
        self.state: SolverState = Idle()
        self.iterations = 0
        self._is_setup = False
        self._explicit_cap = False

    # ── subclass hooks ──

    def _setup(self) -> None:
        """One-time initialization; may move straight to a terminal state."""

    def _step(self) -> None:
        raise NotImplementedError

    def visualize(self) -> GraphicsSnapshot:
        return GraphicsSnapshot(title=type(self).__name__)

    # ── contract ──

    @property
    def solved(self) -> bool:
        return isinstance(self.state, Solved)

    @property
    def failed(self) -> bool:
        return isinstance(self.state, Failed)

    @property
    def done(self) -> bool:
        return self.solved or self.failed

    @property
    def result(self) -> Any:
        return self.state.result if isinstance(self.state, Solved) else None

    @property
    def failure_reason(self) -> str | None:
        return self.state.reason if isinstance(self.state, Failed) else None

    @property
    def active_child(self) -> BaseSolver | None:
        return self.state.child if isinstance(self.state, Evaluating) else None

    def setup(self) -> None:
        if self._is_setup:
            return
        self._is_setup = True
        self._setup()

    def step(self) -> None:
        self.setup()
        if self.done:
            return
        if self.iterations >= self.max_iterations:
            self.fail(f"{type(self).__name__} exceeded {self.max_iterations} iterations")
            return
        self.iterations += 1
        self._step()

    def solve(self, max_iterations: int | None = None) -> SolverState:
        if max_iterations is not None:
            self.max_iterations = max_iterations
            self._explicit_cap = True
        self.setup()
        while not self.done:
            self.step()
        return self.state

    def fail(self, reason: str) -> None:
        log.debug("%s failed: %s", type(self).__name__, reason)
        self.state = Failed(reason)

    def succeed(self, result: Any) -> None:
        self.state = Solved(result)
