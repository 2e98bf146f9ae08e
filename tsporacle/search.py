"""
Branch-and-bound tour search.

A SearchEpisode owns everything one search run mutates: the incumbent,
the MST cache, the tour counter and the visited flags. Independent
episodes therefore never share state.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from tsporacle.errors import SearchCancelled
from tsporacle.geometry import DistanceModel
from tsporacle.heuristics import multi_start_greedy
from tsporacle.mst import MSTOracle, subset_key

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, float], None]

DEFAULT_PROGRESS_INTERVAL = 0.5


class CancellationToken:
    """
    Cooperative cancellation flag with an optional deadline.

    The search polls check() on every recursive step.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = False
        self.deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if not self._cancelled and self.deadline is not None and time.monotonic() >= self.deadline:
            self._cancelled = True
        return self._cancelled

    def check(self) -> None:
        if self.cancelled:
            raise SearchCancelled()


class ProgressReporter:
    """Rate-limited forwarding of (tours evaluated, elapsed seconds) to a callback."""

    def __init__(self, callback: Optional[ProgressCallback] = None,
                 interval: float = DEFAULT_PROGRESS_INTERVAL):
        self.callback = callback
        self.interval = interval
        self.start_time = time.monotonic()
        self.last_update = self.start_time
        self.calls = 0

    def maybe_report(self, tours_evaluated: int) -> None:
        if self.callback is None:
            return
        now = time.monotonic()
        if now - self.last_update < self.interval:
            return
        self.last_update = now
        self.calls += 1
        self.callback(tours_evaluated, now - self.start_time)


@dataclass
class SearchResult:
    path: List[int]
    distance: float
    tours_evaluated: int
    improved: bool
    cancelled: bool = False
    elapsed: float = 0.0


@dataclass
class SearchEpisode:
    """
    One depth-first branch-and-bound run rooted at vertex 0.

    Args:
        model: Distance model
        incumbent_distance: Upper bound to beat; only strictly shorter tours are accepted
        incumbent_path: Tour achieving incumbent_distance, if any
        progress: Optional rate-limited progress sink, shared across episodes
        cancel_token: Optional cooperative cancellation token
    """
    model: DistanceModel
    incumbent_distance: float = float('inf')
    incumbent_path: List[int] = field(default_factory=list)
    progress: Optional[ProgressReporter] = None
    cancel_token: Optional[CancellationToken] = None
    tours_evaluated: int = 0
    tours_offset: int = 0

    def __post_init__(self):
        self.oracle = MSTOracle(self.model.matrix)
        self.best_path = list(self.incumbent_path)
        self.best_distance = self.incumbent_distance
        self._visited: List[bool] = []

    def run(self) -> SearchResult:
        n = self.model.n
        self.oracle.clear()
        self.tours_evaluated = 0
        self._visited = [False] * n
        self._visited[0] = True
        cancelled = False

        start = time.perf_counter()
        try:
            self._search([0], 0.0)
        except SearchCancelled:
            cancelled = True
            logger.info(f"Search cancelled after {self.tours_evaluated} tours")
        elapsed = time.perf_counter() - start

        improved = self.best_distance < self.incumbent_distance
        logger.debug(
            f"Episode below {self.incumbent_distance:.4f}: {self.tours_evaluated} tours, "
            f"{len(self.oracle)} MST subsets cached, improved={improved}"
        )
        return SearchResult(
            path=list(self.best_path),
            distance=self.best_distance,
            tours_evaluated=self.tours_evaluated,
            improved=improved,
            cancelled=cancelled,
            elapsed=elapsed,
        )

    def lower_bound(self, path: Sequence[int], current_distance: float) -> float:
        """Partial length + MST of the unvisited vertices + cheapest links to both path ends."""
        rows = self.model.rows
        first, last = path[0], path[-1]
        unvisited = [v for v, seen in enumerate(self._visited) if not seen]
        if not unvisited:
            return current_distance + rows[last][first]

        mst = self.oracle.weight_for_key(subset_key(unvisited), unvisited)
        to_first = min(rows[first][v] for v in unvisited)
        to_last = min(rows[last][v] for v in unvisited)
        return current_distance + mst + to_first + to_last

    def candidates(self, last: int) -> List[int]:
        """Unvisited successors: ranked neighbors first, then the rest by distance."""
        visited = self._visited
        ordered = [v for v in self.model.neighbors[last] if not visited[v]]
        taken = set(ordered)
        row = self.model.rows[last]
        rest = [v for v in range(self.model.n) if not visited[v] and v not in taken]
        rest.sort(key=lambda v: row[v])
        return ordered + rest

    def _search(self, path: List[int], current_distance: float) -> None:
        if self.cancel_token is not None:
            self.cancel_token.check()

        if self.lower_bound(path, current_distance) >= self.best_distance:
            return

        rows = self.model.rows
        last = path[-1]
        if len(path) == self.model.n:
            final_distance = current_distance + rows[last][path[0]]
            self.tours_evaluated += 1
            if self.progress is not None:
                self.progress.maybe_report(self.tours_offset + self.tours_evaluated)
            if final_distance < self.best_distance:
                self.best_distance = final_distance
                self.best_path = list(path)
            return

        for next_point in self.candidates(last):
            new_distance = current_distance + rows[last][next_point]
            if new_distance >= self.best_distance:
                continue
            self._visited[next_point] = True
            path.append(next_point)
            try:
                self._search(path, new_distance)
            finally:
                path.pop()
                self._visited[next_point] = False


def branch_and_bound(model: DistanceModel, incumbent_path: Optional[List[int]] = None,
                     incumbent_distance: Optional[float] = None,
                     progress: Optional[ProgressReporter] = None,
                     cancel_token: Optional[CancellationToken] = None) -> SearchResult:
    """
    Single unbounded search seeded with a constructive tour.

    When no incumbent is given, the multi-start greedy tour over all start
    vertices (without 2-opt) is used as the starting bound.
    """
    if incumbent_path is None:
        incumbent_path, incumbent_distance = multi_start_greedy(model, max_starts=None, refine=False)
    elif incumbent_distance is None:
        incumbent_distance = model.tour_length(incumbent_path)

    episode = SearchEpisode(
        model=model,
        incumbent_distance=incumbent_distance,
        incumbent_path=incumbent_path,
        progress=progress,
        cancel_token=cancel_token,
    )
    return episode.run()
