from pathlib import Path

import pytest

from errors import ValidationError
from topology import Edge
from topology_loader import load_scenario, parse_scenario_text, scenario_from_mapping


def test_load_yaml_scenario(tmp_path: Path):
    path = tmp_path / "line.yml"
    path.write_text(
        """
nodes: 3
edges:
  - [1, 2, 1]
  - {src: 2, dest: 3, cost: 4}
failure: [1, 2]
max_rounds: 20
threshold: 50
"""
    )

    scenario = load_scenario(path)

    assert scenario.topology.node_count == 3
    assert scenario.topology.edges == (Edge(1, 2, 1), Edge(2, 3, 4))
    assert scenario.failure == (1, 2)
    assert scenario.max_rounds == 20
    assert scenario.threshold == 50


def test_yaml_defaults_when_optional_keys_missing(tmp_path: Path):
    path = tmp_path / "pair.yaml"
    path.write_text("nodes: 2\nedges:\n  - [1, 2, 3]\n")

    scenario = load_scenario(path)

    assert scenario.failure is None
    assert scenario.max_rounds == 100
    assert scenario.threshold == 100


def test_parse_text_format_with_failure():
    text = """3
2
1 2 1
2 3 1
1 2
"""
    scenario = parse_scenario_text(text)

    assert scenario.topology.node_count == 3
    assert scenario.topology.edges == (Edge(1, 2, 1), Edge(2, 3, 1))
    assert scenario.failure == (1, 2)


def test_parse_text_format_without_failure(tmp_path: Path):
    path = tmp_path / "pair.txt"
    path.write_text("2 1\n1 2 7\n")

    scenario = load_scenario(path)

    assert scenario.topology.edges == (Edge(1, 2, 7),)
    assert scenario.failure is None


@pytest.mark.parametrize(
    "text, field",
    [
        ("", "nodes"),
        ("3 two", "edge_count"),
        ("3 1 1 2", "edges[0].cost"),
        ("3 1 1 5 1", "edges[0].dest"),
        ("3 1 1 2 1 1", "failure"),
        ("3 -1", "edge_count"),
    ],
)
def test_malformed_text_names_the_field(text, field):
    with pytest.raises(ValidationError) as excinfo:
        parse_scenario_text(text)
    assert excinfo.value.field == field


@pytest.mark.parametrize(
    "data, field",
    [
        ([1, 2], "scenario"),
        ({"edges": []}, "nodes"),
        ({"nodes": 2, "edges": "1 2 3"}, "edges"),
        ({"nodes": 2, "edges": [[1, 2]]}, "edges[0]"),
        ({"nodes": 2, "edges": [{"src": 1, "dest": 2}]}, "edges[0]"),
        ({"nodes": 2, "edges": [[1, 2, True]]}, "edges[0].cost"),
        ({"nodes": 2, "edges": [[1, 2, 1]], "failure": [1]}, "failure"),
        ({"nodes": 2, "edges": [[1, 2, 1]], "max_rounds": 0}, "max_rounds"),
    ],
)
def test_malformed_mapping_names_the_field(data, field):
    with pytest.raises(ValidationError) as excinfo:
        scenario_from_mapping(data)
    assert excinfo.value.field == field


def test_yaml_syntax_error_is_a_validation_error(tmp_path: Path):
    path = tmp_path / "broken.yml"
    path.write_text("nodes: [\n")

    with pytest.raises(ValidationError) as excinfo:
        load_scenario(path)
    assert excinfo.value.field == "scenario"
