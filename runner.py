"""
CLI to run one DVR scenario: converge, optionally fail a link, re-converge.

Reads a YAML scenario (or the plain text format for *.txt / stdin), prints
every round's table, the post-failure regressions and the count-to-infinity
analysis.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence
import argparse
import sys
import warnings

from errors import ConvergenceCapped, ValidationError
from rendering import format_anomalies, format_regressions, format_table
from simulation import DVRSimulation, SimulationReport
from topology_loader import Scenario, load_scenario, parse_scenario_text
from trace_export import write_trace_csv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Distance vector routing / count-to-infinity simulator")
    parser.add_argument("scenario", help="scenario file (.yml/.yaml, or .txt); '-' reads text from stdin")
    parser.add_argument("--fail", nargs=2, type=int, metavar=("SRC", "DEST"), help="link to fail (overrides the file)")
    parser.add_argument("--max-rounds", type=int, default=None, help="round cap per convergence run")
    parser.add_argument("--threshold", type=int, default=None, help="count-to-infinity distance threshold")
    parser.add_argument("--trace", type=Path, default=None, help="write per-round tables to this CSV")
    parser.add_argument("--quiet", action="store_true", help="print summaries only, not every table")
    return parser


def read_scenario(source: str) -> Scenario:
    if source == "-":
        return parse_scenario_text(sys.stdin.read())
    return load_scenario(Path(source))


def run_scenario(
    scenario: Scenario,
    failure: Optional[Sequence[int]] = None,
    max_rounds: Optional[int] = None,
    threshold: Optional[int] = None,
    quiet: bool = False,
) -> SimulationReport:
    link = tuple(failure) if failure else scenario.failure
    if max_rounds is None:
        max_rounds = scenario.max_rounds
    if max_rounds < 1:
        raise ValidationError("max_rounds", f"must be >= 1, got {max_rounds}")

    def show(snapshot) -> None:
        if not quiet:
            print(format_table(snapshot.distances, snapshot.round))
            print()

    sim = DVRSimulation(
        scenario.topology,
        max_rounds=max_rounds,
        threshold=threshold if threshold is not None else scenario.threshold,
        on_round=show,
    )

    with warnings.catch_warnings():
        # Reported below from result.capped instead.
        warnings.simplefilter("ignore", ConvergenceCapped)

        print(f"[dvr] converging {scenario.topology.node_count} nodes, {len(scenario.topology.edges)} links")
        initial = sim.converge()
        if initial.capped:
            print(f"[dvr] warning: stopped after {initial.rounds} rounds - possible count-to-infinity problem")
        else:
            print(f"[dvr] converged after {initial.rounds} rounds")

        if link is None:
            return sim.finish()

        print(f"[dvr] simulating link failure between Node {link[0]} and Node {link[1]}")
        sim.fail_link(link[0], link[1])
        report = sim.reconverge()

    result = report.reconvergence
    assert result is not None and report.anomalies is not None
    if result.capped:
        print(f"[dvr] stopped after {result.rounds} rounds")
    else:
        print(f"[dvr] re-converged after {result.rounds} rounds")
    if result.regressions:
        print(format_regressions(result.regressions))
    print("=== Count-to-Infinity Analysis ===")
    print(format_anomalies(report.anomalies))
    if report.rising:
        pairs = ", ".join(f"Node {i + 1} to Node {j + 1}" for i, j in report.rising)
        print(f"[dvr] distances still rising: {pairs}")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        scenario = read_scenario(args.scenario)
        report = run_scenario(
            scenario,
            failure=args.fail,
            max_rounds=args.max_rounds,
            threshold=args.threshold,
            quiet=args.quiet,
        )
    except ValidationError as exc:
        print(f"[dvr] invalid input: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"[dvr] cannot read scenario: {exc}", file=sys.stderr)
        return 2

    if args.trace:
        rows = write_trace_csv(args.trace, report)
        print(f"[dvr] wrote {rows} rows to {args.trace}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
