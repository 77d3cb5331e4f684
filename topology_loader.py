"""
Scenario input: topology, optional link failure and run settings.

Two formats are accepted:
- YAML: nodes, edges, and optional failure / max_rounds / threshold.
- Plain whitespace-separated text, as typed at an interactive prompt:
  N, M, then M lines "src dest cost", then an optional "failSrc failDest".
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from anomaly import INFINITY_THRESHOLD
from convergence import MAX_ROUNDS
from errors import ValidationError
from topology import Edge, Topology


@dataclass(frozen=True)
class Scenario:
    topology: Topology
    failure: Optional[Tuple[int, int]] = None
    max_rounds: int = MAX_ROUNDS
    threshold: int = INFINITY_THRESHOLD


def _as_int(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(field, f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(field, f"expected an integer, got {value!r}")


def _parse_edge(idx: int, raw: Any) -> Edge:
    field = f"edges[{idx}]"
    if isinstance(raw, Mapping):
        try:
            src, dest, cost = raw["src"], raw["dest"], raw["cost"]
        except KeyError as exc:
            raise ValidationError(field, f"missing key {exc.args[0]!r}") from exc
    elif isinstance(raw, (list, tuple)) and len(raw) == 3:
        src, dest, cost = raw
    else:
        raise ValidationError(field, f"expected [src, dest, cost] or a mapping, got {raw!r}")
    return Edge(
        _as_int(f"{field}.src", src),
        _as_int(f"{field}.dest", dest),
        _as_int(f"{field}.cost", cost),
    )


def _parse_failure(raw: Any) -> Optional[Tuple[int, int]]:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        raw = [raw.get("src"), raw.get("dest")]
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValidationError("failure", f"expected [src, dest], got {raw!r}")
    return _as_int("failure.src", raw[0]), _as_int("failure.dest", raw[1])


def scenario_from_mapping(data: Any) -> Scenario:
    """Build a Scenario from already-parsed YAML/JSON data."""
    if not isinstance(data, Mapping):
        raise ValidationError("scenario", "expected a mapping at the top level")
    if "nodes" not in data:
        raise ValidationError("nodes", "missing")
    node_count = _as_int("nodes", data["nodes"])
    raw_edges = data.get("edges") or []
    if not isinstance(raw_edges, list):
        raise ValidationError("edges", "expected a list")
    edges = tuple(_parse_edge(i, raw) for i, raw in enumerate(raw_edges))
    max_rounds = _as_int("max_rounds", data.get("max_rounds", MAX_ROUNDS))
    if max_rounds < 1:
        raise ValidationError("max_rounds", f"must be >= 1, got {max_rounds}")
    return Scenario(
        topology=Topology(node_count, edges),
        failure=_parse_failure(data.get("failure")),
        max_rounds=max_rounds,
        threshold=_as_int("threshold", data.get("threshold", INFINITY_THRESHOLD)),
    )


def load_scenario_yaml(path: Path) -> Scenario:
    import yaml  # type: ignore

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValidationError("scenario", f"{path} is not valid YAML: {exc}") from exc
    return scenario_from_mapping(data)


def parse_scenario_text(text: str) -> Scenario:
    """
    Parse the whitespace-separated format.

    Line breaks carry no meaning; tokens are consumed in order.
    """
    tokens: List[str] = text.split()
    pos = 0

    def take(field: str) -> int:
        nonlocal pos
        if pos >= len(tokens):
            raise ValidationError(field, "unexpected end of input")
        value = _as_int(field, tokens[pos])
        pos += 1
        return value

    node_count = take("nodes")
    edge_count = take("edge_count")
    if edge_count < 0:
        raise ValidationError("edge_count", f"must be non-negative, got {edge_count}")
    edges = []
    for idx in range(edge_count):
        edges.append(
            Edge(take(f"edges[{idx}].src"), take(f"edges[{idx}].dest"), take(f"edges[{idx}].cost"))
        )

    failure: Optional[Tuple[int, int]] = None
    remaining = len(tokens) - pos
    if remaining == 2:
        failure = (take("failure.src"), take("failure.dest"))
    elif remaining:
        raise ValidationError("failure", f"expected 'src dest' or nothing, got {tokens[pos:]!r}")

    return Scenario(topology=Topology(node_count, tuple(edges)), failure=failure)


def load_scenario(path: Path) -> Scenario:
    """Pick the reader by extension: .txt uses the plain format, anything else YAML."""
    if path.suffix == ".txt":
        return parse_scenario_text(path.read_text())
    return load_scenario_yaml(path)
