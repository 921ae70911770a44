"""
Flow Editor Session

Holds the flow being authored and the editing mode.

In BUILDER mode the structured graph is the single source of truth and the
JSON text is a projection recomputed on demand. Editing the JSON directly
switches to JSON mode: the typed text becomes authoritative and builder edits
are refused until `resume_builder()` parses it back into a graph.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..domain.models import FlowGraph, NodeRef
from ..domain.validation import Violation, validate
from ..schemas.wire import decode, encode, encode_json
from ..services.exceptions import BuilderDisabledError, FlowValidationError
from . import mutations
from .mutations import Direction, IdFactory, OptionSelector, new_node_id

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    BUILDER = "builder"
    JSON = "json"


ChangeListener = Callable[["FlowEditor"], None]


class FlowEditor:
    def __init__(
        self,
        graph: Optional[FlowGraph] = None,
        strict: bool = False,
        id_factory: IdFactory = new_node_id,
    ):
        self.strict = strict
        self.id_factory = id_factory
        self.mode = EditorMode.BUILDER
        self.revision = 0
        self._graph = graph if graph is not None else FlowGraph()
        self._json_text: Optional[str] = None
        self._listeners: List[ChangeListener] = []

    @classmethod
    def new(cls, strict: bool = False, id_factory: IdFactory = new_node_id) -> "FlowEditor":
        """An editor holding a single empty start node."""
        editor = cls(strict=strict, id_factory=id_factory)
        editor._graph, _ = mutations.add_node(
            editor._graph, strict=strict, id_factory=id_factory
        )
        return editor

    @classmethod
    def from_wire(
        cls,
        payload: Union[str, Dict[str, Any]],
        strict: bool = False,
        id_factory: IdFactory = new_node_id,
    ) -> "FlowEditor":
        return cls(decode(payload), strict=strict, id_factory=id_factory)

    # --- Observation ---

    def subscribe(self, listener: ChangeListener):
        self._listeners.append(listener)

    def _changed(self):
        self.revision += 1
        for listener in self._listeners:
            listener(self)

    @property
    def graph(self) -> FlowGraph:
        """The builder graph (stale while in JSON mode)."""
        return self._graph

    @property
    def json_text(self) -> str:
        if self.mode == EditorMode.JSON:
            return self._json_text or ""
        return encode_json(self._graph)

    def current_graph(self) -> FlowGraph:
        """
        The authoritative graph for the current mode.

        Raises:
            FlowDecodeError: In JSON mode, if the typed text does not parse.
        """
        if self.mode == EditorMode.JSON:
            return decode(self._json_text or "")
        return self._graph

    def validate(self) -> Optional[Violation]:
        return validate(self.current_graph(), strict=self.strict)

    def commit(self) -> Dict[str, Any]:
        """
        Wire payload ready to save.

        Raises:
            FlowDecodeError: JSON mode text does not parse.
            FlowValidationError: The flow violates a structural invariant.
        """
        graph = self.current_graph()
        violation = validate(graph, strict=self.strict)
        if violation is not None:
            raise FlowValidationError(violation)
        return encode(graph)

    # --- Mode switching ---

    def edit_json(self, text: str):
        """Makes the typed JSON authoritative and disables the builder."""
        if self.mode == EditorMode.BUILDER:
            logger.debug("Manual JSON edit; builder disabled")
        self.mode = EditorMode.JSON
        self._json_text = text
        self._changed()

    def resume_builder(self):
        """
        Parses the JSON text back into the builder. On a decode error the
        editor stays in JSON mode and the error propagates.
        """
        if self.mode == EditorMode.BUILDER:
            return
        self._graph = decode(self._json_text or "")
        self.mode = EditorMode.BUILDER
        self._json_text = None
        self._changed()

    def discard_json(self):
        """Drops the typed JSON and goes back to the last builder graph."""
        if self.mode == EditorMode.JSON:
            self.mode = EditorMode.BUILDER
            self._json_text = None
            self._changed()

    # --- Builder edits ---

    def _apply(self, new_graph: FlowGraph):
        self._graph = new_graph
        self._changed()

    def _require_builder(self):
        if self.mode != EditorMode.BUILDER:
            raise BuilderDisabledError("The builder is disabled while editing JSON directly.")

    def add_node(self, after_index: Optional[int] = None) -> str:
        self._require_builder()
        graph, node_id = mutations.add_node(
            self._graph, after_index, strict=self.strict, id_factory=self.id_factory
        )
        self._apply(graph)
        return node_id

    def remove_node(self, node_id: str):
        self._require_builder()
        self._apply(mutations.remove_node(self._graph, node_id))

    def move_node(self, node_id: str, direction: Direction):
        self._require_builder()
        self._apply(mutations.move_node(self._graph, node_id, direction))

    def set_start(self, node_id: str):
        self._require_builder()
        self._apply(mutations.set_start(self._graph, node_id))

    def update_node_text(
        self, node_id: str, title: Optional[str] = None, body: Optional[str] = None
    ):
        self._require_builder()
        self._apply(mutations.update_node_text(self._graph, node_id, title, body))

    def add_option(self, node_id: str, label: str = "", target: Optional[NodeRef] = None):
        self._require_builder()
        self._apply(mutations.add_option(self._graph, node_id, label, target))

    def remove_option(self, node_id: str, selector: OptionSelector):
        self._require_builder()
        self._apply(
            mutations.remove_option(self._graph, node_id, selector, strict=self.strict)
        )

    def set_option_label(self, node_id: str, selector: OptionSelector, label: str):
        self._require_builder()
        self._apply(
            mutations.set_option_label(
                self._graph, node_id, selector, label, strict=self.strict
            )
        )

    def move_option(self, node_id: str, selector: OptionSelector, direction: Direction):
        self._require_builder()
        self._apply(
            mutations.move_option(
                self._graph, node_id, selector, direction, strict=self.strict
            )
        )

    def set_option_target(
        self, node_id: str, selector: OptionSelector, target: Optional[NodeRef]
    ):
        self._require_builder()
        self._apply(
            mutations.set_option_target(
                self._graph, node_id, selector, target, strict=self.strict
            )
        )

    def insert_linked_node(self, from_id: str, selector: OptionSelector) -> Optional[str]:
        self._require_builder()
        graph, node_id = mutations.insert_linked_node(
            self._graph, from_id, selector, strict=self.strict, id_factory=self.id_factory
        )
        if node_id is not None:
            self._apply(graph)
        return node_id
