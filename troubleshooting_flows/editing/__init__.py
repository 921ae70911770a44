"""
Editing Layer - Flow Authoring

Structural edit operations that preserve referential integrity, and the
editor session that switches between builder-driven and JSON-driven editing.
"""

from troubleshooting_flows.editing.editor import EditorMode, FlowEditor
from troubleshooting_flows.editing.mutations import (
    Direction,
    add_node,
    add_option,
    insert_linked_node,
    move_node,
    move_option,
    new_node_id,
    remove_node,
    remove_option,
    set_option_label,
    set_option_target,
    set_start,
    update_node_text,
)

__all__ = [
    "Direction",
    "EditorMode",
    "FlowEditor",
    "add_node",
    "add_option",
    "insert_linked_node",
    "move_node",
    "move_option",
    "new_node_id",
    "remove_node",
    "remove_option",
    "set_option_label",
    "set_option_target",
    "set_start",
    "update_node_text",
]
