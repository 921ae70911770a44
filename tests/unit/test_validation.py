"""Unit tests for flow validation."""

from troubleshooting_flows.domain.models import (
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeTarget,
    Outcome,
    TerminalTarget,
)
from troubleshooting_flows.domain.validation import (
    ViolationKind,
    is_valid,
    iter_violations,
    validate,
)

DONE = TerminalTarget(Outcome.DONE)
NA = TerminalTarget(Outcome.NOT_APPLICABLE)


def yes_no_node(node_id, title="Question?", yes=DONE, no=NA):
    return FlowNode(
        id=node_id,
        title=title,
        options=[FlowOption("Yes", yes), FlowOption("No", no)],
    )


class TestGraphLevel:
    """Tests for graph-level invariants."""

    def test_valid_scenario_graph(self, scenario_graph):
        """Test the two-node scenario passes the basic variant."""
        assert validate(scenario_graph) is None
        assert is_valid(scenario_graph)

    def test_empty_graph(self):
        """Test an empty graph is reported before anything else."""
        violation = validate(FlowGraph())

        assert violation.kind == ViolationKind.EMPTY_NODE_SET

    def test_missing_start_reported_before_node_checks(self):
        """Test an unresolved start wins over broken nodes."""
        graph = FlowGraph(
            start="ghost",
            nodes={"a": FlowNode(id="a", options=[FlowOption("", None)])},
        )

        violation = validate(graph, strict=True)

        assert violation.kind == ViolationKind.MISSING_START
        assert violation.node_id == "ghost"
        assert violation.option_index is None

    def test_missing_start_stops_the_walk(self):
        """Test no node violations are listed without a start."""
        graph = FlowGraph(start="", nodes={"a": FlowNode(id="a")})

        kinds = [v.kind for v in iter_violations(graph)]

        assert kinds == [ViolationKind.MISSING_START]


class TestBasicVariant:
    """Tests for the basic (any options) variant."""

    def test_node_without_options(self):
        """Test a node needs at least one option."""
        graph = FlowGraph(start="a", nodes={"a": FlowNode(id="a", title="Q")})

        violation = validate(graph)

        assert violation.kind == ViolationKind.NO_OPTIONS
        assert violation.node_id == "a"

    def test_empty_label(self):
        """Test option labels must be non-blank."""
        graph = FlowGraph(
            start="a",
            nodes={"a": FlowNode(id="a", options=[FlowOption("Ok", DONE), FlowOption("  ", DONE)])},
        )

        violation = validate(graph)

        assert violation.kind == ViolationKind.EMPTY_LABEL
        assert violation.option_index == 1

    def test_unwired_option(self):
        """Test an option without a target is an empty target."""
        graph = FlowGraph(
            start="a", nodes={"a": FlowNode(id="a", options=[FlowOption("Ok")])}
        )

        violation = validate(graph)

        assert violation.kind == ViolationKind.EMPTY_TARGET
        assert violation.option_index == 0

    def test_blank_node_target_is_empty(self):
        """Test a NodeTarget with a blank id counts as empty."""
        graph = FlowGraph(
            start="a",
            nodes={"a": FlowNode(id="a", options=[FlowOption("Ok", NodeTarget(""))])},
        )

        assert validate(graph).kind == ViolationKind.EMPTY_TARGET

    def test_unresolved_target(self):
        """Test an option pointing at a missing node."""
        graph = FlowGraph(
            start="a",
            nodes={
                "a": FlowNode(
                    id="a",
                    options=[FlowOption("One", DONE), FlowOption("Two", NodeTarget("zz"))],
                )
            },
        )

        violation = validate(graph)

        assert violation.kind == ViolationKind.UNRESOLVED_TARGET
        assert violation.node_id == "a"
        assert violation.option_index == 1

    def test_empty_node_id(self):
        """Test a node keyed by a blank id."""
        graph = FlowGraph(
            start="a",
            nodes={
                "a": FlowNode(id="a", options=[FlowOption("Go", DONE)]),
                "": FlowNode(id="", options=[FlowOption("Go", DONE)]),
            },
        )

        assert validate(graph).kind == ViolationKind.EMPTY_NODE_ID

    def test_outcome_tag_as_node_id(self):
        """Test a node cannot be named after an outcome tag in either variant."""
        graph = FlowGraph(
            start="end_done",
            nodes={"end_done": yes_no_node("end_done", yes=NodeTarget("end_done"))},
        )

        for strict in (False, True):
            violation = validate(graph, strict=strict)
            assert violation.kind == ViolationKind.RESERVED_NODE_ID
            assert violation.node_id == "end_done"

    def test_first_violation_follows_display_order(self):
        """Test nodes are walked in insertion order."""
        graph = FlowGraph(
            start="a",
            nodes={
                "a": FlowNode(id="a", options=[FlowOption("Go", NodeTarget("c"))]),
                "c": FlowNode(id="c", options=[]),
                "b": FlowNode(id="b", options=[FlowOption("", DONE)]),
            },
        )

        violations = list(iter_violations(graph))

        assert violations[0].node_id == "c"
        assert violations[0].kind == ViolationKind.NO_OPTIONS
        assert [v.node_id for v in violations] == ["c", "b"]

    def test_validation_does_not_mutate(self, scenario_graph):
        """Test validation leaves the graph untouched."""
        before = repr(scenario_graph)

        validate(scenario_graph, strict=True)

        assert repr(scenario_graph) == before


class TestStrictVariant:
    """Tests for the strict (yes/no) variant."""

    def test_sample_flow_is_valid(self, sample_graph):
        """Test the bundled sample flow passes strict validation."""
        assert validate(sample_graph, strict=True) is None

    def test_missing_negative(self):
        """Test a node with Yes but no No."""
        graph = FlowGraph(
            start="a",
            nodes={"a": FlowNode(id="a", title="Q", options=[FlowOption("Yes", DONE)])},
        )

        violation = validate(graph, strict=True)

        assert violation.kind == ViolationKind.MISSING_NEGATIVE
        assert violation.node_id == "a"

    def test_missing_affirmative(self):
        """Test a node with No but no Yes."""
        graph = FlowGraph(
            start="a",
            nodes={"a": FlowNode(id="a", title="Q", options=[FlowOption("No", DONE)])},
        )

        assert validate(graph, strict=True).kind == ViolationKind.MISSING_AFFIRMATIVE

    def test_duplicate_affirmative(self):
        """Test exactly one Yes is allowed."""
        node = yes_no_node("a")
        node.options.append(FlowOption("yes", NA))
        graph = FlowGraph(start="a", nodes={"a": node})

        assert validate(graph, strict=True).kind == ViolationKind.DUPLICATE_AFFIRMATIVE

    def test_labels_match_case_insensitively(self):
        """Test ' YES ' and 'no' count as the pair."""
        graph = FlowGraph(
            start="a",
            nodes={
                "a": FlowNode(
                    id="a",
                    title="Q",
                    options=[FlowOption(" YES ", DONE), FlowOption("no", NA)],
                )
            },
        )

        assert validate(graph, strict=True) is None

    def test_extra_options_allowed(self):
        """Test options beyond the pair are permitted."""
        node = yes_no_node("a")
        node.options.append(FlowOption("Not sure", TerminalTarget(Outcome.ESCALATE)))
        graph = FlowGraph(start="a", nodes={"a": node})

        assert validate(graph, strict=True) is None

    def test_node_needs_title_or_body(self):
        """Test the title-or-body requirement."""
        node = yes_no_node("a", title="   ")
        graph = FlowGraph(start="a", nodes={"a": node})

        assert validate(graph, strict=True).kind == ViolationKind.EMPTY_CONTENT

        node.body = "Look under the sink."
        assert validate(graph, strict=True) is None

    def test_scenario_fails_strict(self, scenario_graph):
        """Test s2 (a single Continue option) is not a yes/no node."""
        violation = validate(scenario_graph, strict=True)

        assert violation.kind == ViolationKind.MISSING_AFFIRMATIVE
        assert violation.node_id == "s2"

    def test_option_checks_still_apply(self):
        """Test strict nodes still need resolvable targets."""
        graph = FlowGraph(start="a", nodes={"a": yes_no_node("a", no=NodeTarget("gone"))})

        violation = validate(graph, strict=True)

        assert violation.kind == ViolationKind.UNRESOLVED_TARGET
        assert violation.option_index == 1
