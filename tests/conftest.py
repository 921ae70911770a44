"""Shared pytest fixtures for testing."""

import copy
import itertools

import pytest

from troubleshooting_flows.data.sample_flows import no_water_at_faucet
from troubleshooting_flows.schemas.wire import decode


SCENARIO_WIRE = {
    "version": 1,
    "start": "s1",
    "nodes": {
        "s1": {
            "title": "Is the heater making noise?",
            "body": "",
            "options": [
                {"text": "Yes", "goto": "s2"},
                {"text": "No", "goto": "end_not_applicable"},
            ],
        },
        "s2": {
            "title": "",
            "body": "Flush the tank, then continue.",
            "options": [{"text": "Continue", "goto": "end_done"}],
        },
    },
}


@pytest.fixture
def scenario_wire() -> dict:
    """Two-node flow: s1 -Yes-> s2 -Continue-> done, s1 -No-> not applicable."""
    return {
        "version": SCENARIO_WIRE["version"],
        "start": SCENARIO_WIRE["start"],
        "nodes": {
            node_id: {**node, "options": [dict(opt) for opt in node["options"]]}
            for node_id, node in SCENARIO_WIRE["nodes"].items()
        },
    }


@pytest.fixture
def scenario_graph(scenario_wire):
    return decode(scenario_wire)


@pytest.fixture
def sample_graph():
    """A strict-valid five node flow."""
    return copy.deepcopy(no_water_at_faucet)


@pytest.fixture
def id_factory():
    """Deterministic node ids: n1, n2, ..."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"
