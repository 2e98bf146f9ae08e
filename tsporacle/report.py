"""
Console summary and plain-text result file for a solved instance.
"""

from pathlib import Path
from typing import List, Union

from tsporacle.solver import SolveResult, format_large_number


def result_filename(n: int, seed) -> str:
    return f"tsp_result_n{n}_seed{seed}.txt"


def format_path(path: List[int]) -> str:
    return "[" + " ".join(str(v) for v in path) + "]"


def format_summary(result: SolveResult) -> List[str]:
    """Lines of the results block printed after a run."""
    lines = [
        f"Number of points: {result.n}",
        f"Seed: {result.seed}",
        f"Strategy: {result.strategy}",
        f"Total possible paths: {format_large_number(result.total_permutations)}",
        f"Checked paths: {format_large_number(result.tours_evaluated)}",
        f"Execution time: {result.elapsed:.2f} seconds",
    ]
    if result.elapsed > 0:
        lines.append(f"Speed: {result.tours_evaluated / result.elapsed:.0f} paths/sec")
    lines.extend([
        f"Greedy + 2-opt: {result.greedy_distance:.6f}",
        f"Optimal length: {result.distance:.6f}",
        f"Improvement: {result.improvement:.6f} ({result.improvement_pct:.3f}%)",
    ])
    if result.cancelled:
        lines.append("Search was cancelled: the length above is the best found, not a proven optimum")
    lines.extend([
        "",
        f"Greedy way: {format_path(result.greedy_path)}",
        f"The optimal path: {format_path(result.path)}",
    ])
    return lines


def render_result_file(result: SolveResult) -> str:
    lines = [f"SEED: {result.seed}", "Points:"]
    if result.points is not None:
        for i, (x, y) in enumerate(result.points):
            lines.append(f"{i}: ({x:.6f}, {y:.6f})")
    lines.extend([
        f"Greedy + 2-opt: {result.greedy_distance:.6f}",
        f"Optimal: {result.distance:.6f}",
        f"Improvement: {result.improvement:.6f} ({result.improvement_pct:.3f}%)",
        f"Greedy path: {format_path(result.greedy_path)}",
        f"Optimal path: {format_path(result.path)}",
        f"Time: {result.elapsed:.2f} seconds",
        f"Paths checked: {result.tours_evaluated}",
        f"Total paths: {result.total_permutations}",
    ])
    return "\n".join(lines) + "\n"


def write_result_file(result: SolveResult, output_dir: Union[str, Path] = ".") -> Path:
    """
    Write the result file for a run.

    Returns:
        Path of the written file
    """
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / result_filename(result.n, result.seed)
    path.write_text(render_result_file(result), encoding="utf-8")
    return path
