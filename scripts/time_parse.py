#!/usr/bin/env python3
"""Quick perf benchmark for Forge parsing."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from forgepy.parser import ParseMode, parse_result


def _collect_forge_files(root: Path) -> list[Path]:
    return [path for path in sorted(root.rglob("*.forge")) if path.is_file()]


def _run_once(
    sources: list[str],
    *,
    mode: ParseMode,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_definitions = 0
    total_diagnostics = 0
    iterator = tqdm(sources, desc=label, unit="file") if show_progress else sources
    for text in iterator:
        parsed = parse_result(text, mode=mode)
        module = parsed.module()
        if module is not None:
            total_definitions += len(module.definitions)
        total_diagnostics += len(parsed.diagnostics)
    duration = time.perf_counter() - start
    return duration, total_definitions, total_diagnostics


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark Forge parsing throughput")
    parser.add_argument("--root", type=Path, required=True, help="Directory searched for *.forge files")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Parse in strict mode (stray top-level tokens are errors)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    args = parser.parse_args()

    root: Path = args.root
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Invalid --root: {root}")

    files = _collect_forge_files(root)
    if not files:
        raise SystemExit(f"No .forge files found under {root}")
    sources = [path.read_text(encoding="utf-8") for path in files]

    mode = ParseMode.STRICT if args.strict else ParseMode.PERMISSIVE
    show_progress = not args.no_progress
    warmups = max(args.warmups, 0)
    runs = max(args.runs, 1)

    def _benchmark() -> tuple[list[float], int, int]:
        for warmup_idx in range(warmups):
            _run_once(sources, mode=mode, label=f"warmup {warmup_idx + 1}/{warmups}", show_progress=show_progress)

        timings: list[float] = []
        definitions_count = 0
        diagnostics_count = 0
        for run_idx in range(runs):
            duration, definitions_count, diagnostics_count = _run_once(
                sources,
                mode=mode,
                label=f"run {run_idx + 1}/{runs}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, definitions_count, diagnostics_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, definitions_count, diagnostics_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, definitions_count, diagnostics_count = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {root}")
    print(f"Files: {len(files)}")
    print(f"Definitions: {definitions_count}")
    print(f"Diagnostics: {diagnostics_count}")
    print(f"Runs: {len(timings)} (warmups={warmups})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Files/s (mean): {len(files) / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
