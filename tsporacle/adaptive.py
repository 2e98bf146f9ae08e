"""
Adaptive ceiling search.

Instead of one unbounded branch-and-bound run, the search is repeated
against an artificial distance ceiling below the greedy baseline. A tight
ceiling turns the search into a fast feasibility probe: any tour found
below it is the best tour below it, and the next round tightens the
ceiling around that tour until a round comes back empty.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tsporacle.geometry import DistanceModel
from tsporacle.heuristics import multi_start_greedy
from tsporacle.search import CancellationToken, ProgressReporter, SearchEpisode

logger = logging.getLogger(__name__)

INITIAL_RATIO = 0.90
STEP = 0.07
MAX_ROUNDS = 200


@dataclass
class RoundRecord:
    ceiling: float
    found: bool
    distance: float
    tours_evaluated: int
    elapsed: float


@dataclass
class AdaptiveResult:
    path: List[int]
    distance: float
    baseline_path: List[int]
    baseline_distance: float
    tours_evaluated: int = 0
    rounds: List[RoundRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def improved(self) -> bool:
        return self.distance < self.baseline_distance


def adaptive_search(model: DistanceModel,
                    baseline: Optional[Tuple[List[int], float]] = None,
                    initial_ratio: float = INITIAL_RATIO,
                    step: float = STEP,
                    max_rounds: int = MAX_ROUNDS,
                    progress: Optional[ProgressReporter] = None,
                    cancel_token: Optional[CancellationToken] = None) -> AdaptiveResult:
    """
    Home in on the optimal tour with repeated ceiling-bounded searches.

    Args:
        model: Distance model
        baseline: (tour, length) to improve on; defaults to greedy + 2-opt
        initial_ratio: First ceiling as a fraction of the baseline length
        step: Relative amount the ceiling shrinks after a hit or grows after a miss
        max_rounds: Safety cap on the number of rounds
        progress: Optional progress reporter shared by every round
        cancel_token: Optional cancellation token; stops the loop early

    Returns:
        AdaptiveResult holding the best tour and the per-round history
    """
    if baseline is None:
        baseline = multi_start_greedy(model)
    greedy_path, greedy_dist = list(baseline[0]), baseline[1]

    result = AdaptiveResult(
        path=greedy_path,
        distance=greedy_dist,
        baseline_path=greedy_path,
        baseline_distance=greedy_dist,
    )

    ceiling = greedy_dist * initial_ratio
    found_any = False
    final_probe = False
    logger.info(f"Starting adaptive search at {ceiling:.2f} ({initial_ratio * 100:.1f}% of {greedy_dist:.2f})")

    for iteration in range(max_rounds):
        episode = SearchEpisode(
            model=model,
            incumbent_distance=ceiling,
            progress=progress,
            cancel_token=cancel_token,
            tours_offset=result.tours_evaluated,
        )
        started = time.perf_counter()
        outcome = episode.run()
        elapsed = time.perf_counter() - started

        result.tours_evaluated += outcome.tours_evaluated
        result.rounds.append(RoundRecord(
            ceiling=ceiling,
            found=outcome.improved,
            distance=outcome.distance,
            tours_evaluated=outcome.tours_evaluated,
            elapsed=elapsed,
        ))

        if outcome.improved:
            logger.info(f"Round {iteration + 1}: ceiling {ceiling:.2f} -> found {outcome.distance:.2f} ({elapsed:.3f}s)")
            result.path = outcome.path
            result.distance = outcome.distance
            found_any = True
            ceiling = outcome.distance * (1.0 - step)
        else:
            logger.info(f"Round {iteration + 1}: ceiling {ceiling:.2f} -> cut off ({elapsed:.3f}s)")

        if outcome.cancelled:
            result.cancelled = True
            logger.warning(f"Adaptive search cancelled, returning best known length {result.distance:.2f}")
            return result

        if outcome.improved:
            continue

        if found_any:
            logger.info(f"Optimum found: {result.distance:.2f}")
            return result

        if final_probe:
            logger.info("No better solution than the baseline exists")
            return result

        ceiling = ceiling * (1.0 + step)
        if ceiling >= greedy_dist:
            # Last round probes everything strictly below the baseline
            ceiling = greedy_dist
            final_probe = True

    logger.warning(f"Round cap of {max_rounds} reached, best found: {result.distance:.2f}")
    return result
