from troubleshooting_flows.domain.models import (
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeTarget,
    Outcome,
    TerminalTarget,
)

DONE = TerminalTarget(Outcome.DONE)
ESCALATE = TerminalTarget(Outcome.ESCALATE)
NOT_APPLICABLE = TerminalTarget(Outcome.NOT_APPLICABLE)

# ==============================================================================
# NODE DEFINITIONS
# ==============================================================================

# --- NODE 1: PUMP SWITCH ---
pump_switch = FlowNode(
    id="pump_switch",
    title="Is the water pump switch on?",
    body="The switch is on the monitor panel, usually near the entry door.",
    options=[
        FlowOption(label="Yes", target=NodeTarget("pump_running")),
        FlowOption(label="No", target=NodeTarget("turn_on_pump")),
    ],
)

# --- NODE 1a: TURN ON THE PUMP ---
turn_on_pump = FlowNode(
    id="turn_on_pump",
    title="Turn the pump on. Do faucets have water now?",
    options=[
        FlowOption(label="Yes", target=DONE),
        FlowOption(label="No", target=NodeTarget("pump_running")),
    ],
)

# --- NODE 2: PUMP RUNNING ---
pump_running = FlowNode(
    id="pump_running",
    title="Can you hear the pump running when a faucet is open?",
    body="A humming or buzzing sound under the bed or dinette seat.",
    options=[
        FlowOption(label="Yes", target=NodeTarget("tank_level")),
        FlowOption(label="No", target=NodeTarget("check_fuse")),
    ],
)

# --- NODE 2a: FUSE ---
check_fuse = FlowNode(
    id="check_fuse",
    title="Is the pump fuse intact?",
    body="Check the 12V fuse panel. A blown fuse has a broken wire inside.",
    options=[
        FlowOption(label="Yes", target=ESCALATE),
        FlowOption(label="No", target=DONE),
        FlowOption(label="I can't find the fuse panel", target=ESCALATE),
    ],
)

# --- NODE 3: FRESH TANK LEVEL ---
tank_level = FlowNode(
    id="tank_level",
    title="Does the monitor panel show water in the fresh tank?",
    options=[
        FlowOption(label="Yes", target=ESCALATE),
        FlowOption(label="No", target=NOT_APPLICABLE),
    ],
)

# ==============================================================================
# SAMPLE FLOWS
# ==============================================================================

no_water_at_faucet = FlowGraph(
    start="pump_switch",
    nodes={
        node.id: node
        for node in [pump_switch, turn_on_pump, pump_running, check_fuse, tank_level]
    },
)


# Maps article title -> sample flow
SAMPLE_FLOWS = {
    "No water at the faucets": no_water_at_faucet,
}
