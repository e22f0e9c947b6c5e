"""
Discourse models - the node forest built up by an interactive session.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .base import BaseEntity
from .classification import Classification


class NodeKind(str, Enum):
    THESIS = "thesis"
    ANTITHESIS = "antithesis"
    QUINTESSENCE = "quintessence"
    PERSPECTIVE = "perspective"


class Perspective(str, Enum):
    """The five fixed voices simulated for every idea, in display order."""
    KANT = "Kant"
    HEIDEGGER = "Heidegger"
    HEGEL = "Hegel"
    NAGARJUNA = "Nagarjuna"
    WISSENSCHAFT = "Wissenschaft"

    @property
    def tag(self) -> str:
        """Upper-case tag used in multi-party discourse responses."""
        return self.value.upper()


PERSPECTIVE_DESCRIPTIONS = {
    Perspective.KANT: {"de": "Erkenntnisbedingungen", "en": "Conditions of knowledge"},
    Perspective.HEIDEGGER: {"de": "Existenzielle Verwurzelung", "en": "Existential grounding"},
    Perspective.HEGEL: {"de": "Dialektische Synthese", "en": "Dialectical synthesis"},
    Perspective.NAGARJUNA: {"de": "Ontologische Dekonstruktion", "en": "Ontological deconstruction"},
    Perspective.WISSENSCHAFT: {"de": "Empirische Korrelationen", "en": "Empirical correlations"},
}


def new_node_id() -> str:
    return f"node-{uuid.uuid4().hex[:12]}"


class ThesisNode(BaseModel):
    """
    One node of the discourse forest.

    Frozen: nodes are never mutated after creation. Linking a child to its
    parent replaces the parent with a copy (see with_child).
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_node_id)
    kind: NodeKind
    title: str
    content: str
    origin_category: str
    level: int = Field(default=0, ge=0)
    parent_id: Optional[str] = None
    child_ids: tuple[str, ...] = ()
    perspective_name: Optional[str] = None
    # Quintessence nodes list every contributing sibling
    source_ids: tuple[str, ...] = ()
    provider: Optional[str] = None  # None when the content came from the fallback
    created_at: datetime = Field(default_factory=datetime.now)

    def with_child(self, child_id: str) -> "ThesisNode":
        return self.model_copy(update={"child_ids": self.child_ids + (child_id,)})

    @property
    def is_fallback(self) -> bool:
        return self.provider is None

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["child_ids"] = list(self.child_ids)
        data["source_ids"] = list(self.source_ids)
        return data


class SessionState(BaseEntity):
    """Everything one interactive session owns. Reset clears it to empty."""

    idea: str = ""
    classification: Optional[Classification] = None
    nodes: dict[str, ThesisNode] = Field(default_factory=dict)
    selected_id: Optional[str] = None
    in_flight: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def add(self, node: ThesisNode) -> None:
        """Insert a node and link it to its parent."""
        self.nodes[node.id] = node
        if node.parent_id and node.parent_id in self.nodes:
            parent = self.nodes[node.parent_id]
            self.nodes[parent.id] = parent.with_child(node.id)
        self.touch()

    def get(self, node_id: str) -> Optional[ThesisNode]:
        return self.nodes.get(node_id)

    @property
    def selected(self) -> Optional[ThesisNode]:
        return self.nodes.get(self.selected_id) if self.selected_id else None

    def at_level(self, level: int) -> list[ThesisNode]:
        return [n for n in self.nodes.values() if n.level == level]

    def children_of(self, node_id: str) -> list[ThesisNode]:
        return [n for n in self.nodes.values() if n.parent_id == node_id]

    def quintessence_at(self, level: int) -> Optional[ThesisNode]:
        for node in self.at_level(level):
            if node.kind == NodeKind.QUINTESSENCE:
                return node
        return None

    def clear(self) -> None:
        self.idea = ""
        self.classification = None
        self.nodes = {}
        self.selected_id = None
        self.in_flight = False
        self.touch()

    def to_dict(self) -> dict:
        return {
            "idea": self.idea,
            "classification": self.classification.to_dict() if self.classification else None,
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "selected_id": self.selected_id,
            "in_flight": self.in_flight,
            "updated_at": self.updated_at.isoformat(),
        }
