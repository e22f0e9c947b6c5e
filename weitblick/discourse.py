"""
Discourse state machine.

The session's state is the shape of its node forest:

    Empty
      -- start(idea) -->              Perspectives-Generated (level 0)
      -- generate_quintessence() -->  Quintessence-Generated (same level)
      -- think_forward(node) -->      Expanded (level + 1, parented to node)
      ... repeats; only reset() returns to Empty.

Node content is sourced AI-first through the fan-out and falls back to
static text when no provider produced a usable result.
"""

import asyncio
import re
import threading
from contextlib import contextmanager
from typing import Optional

from config import DISCOURSE_STRATEGY, QUINTESSENCE_MIN_SIBLINGS
from models import (
    CredentialSet,
    NodeKind,
    Perspective,
    SessionState,
    ThesisNode,
)
from .classify import classify
from .errors import (
    AnalysisInFlight,
    DiscourseParseError,
    EmptyIdea,
    NoSelection,
    QuintessenceUnavailable,
    UnknownNode,
)
from .fallback import fallback
from .fanout import FanOut, select_result


STRATEGIES = ("per_perspective", "discourse")
MODES = ("perspectives", "dialectic")

TITLES = {
    "de": {
        NodeKind.THESIS: "These",
        NodeKind.ANTITHESIS: "Antithese",
        NodeKind.QUINTESSENCE: "Quintessenz",
    },
    "en": {
        NodeKind.THESIS: "Thesis",
        NodeKind.ANTITHESIS: "Antithesis",
        NodeKind.QUINTESSENCE: "Quintessence",
    },
}

TAG_ALIASES = {"SCIENCE": Perspective.WISSENSCHAFT}
SEGMENT_RE = re.compile(r"^[\s*#]*([A-Za-zÄÖÜäöü]+)[\s*]*:\s*(.*)$", re.DOTALL)


def parse_discourse(text: str) -> dict[Perspective, str]:
    """
    Split a multi-party response into one text per perspective.

    Segments are separated by '|' and matched by their NAME: tag, not by
    position. Raises DiscourseParseError unless every perspective appears
    exactly once and no unknown tag is present.
    """
    tags = {p.tag: p for p in Perspective}
    tags.update(TAG_ALIASES)

    found: dict[Perspective, str] = {}
    for segment in (s.strip() for s in (text or "").split("|")):
        if not segment:
            continue
        match = SEGMENT_RE.match(segment)
        if not match:
            raise DiscourseParseError(f"Untagged segment: {segment[:40]!r}")
        tag, body = match.group(1).upper(), match.group(2).strip()
        perspective = tags.get(tag)
        if perspective is None:
            raise DiscourseParseError(f"Unknown tag: {tag}")
        if perspective in found:
            raise DiscourseParseError(f"Duplicate tag: {tag}")
        if not body:
            raise DiscourseParseError(f"Empty segment for {tag}")
        found[perspective] = f"{perspective.value}: {body}"

    missing = [p.tag for p in Perspective if p not in found]
    if missing:
        raise DiscourseParseError(f"Missing tags: {', '.join(missing)}")
    return found


class DiscourseSession:
    """
    One interactive exploration of an idea.

    Transitions are async and mark the session in flight for their whole
    duration; a second transition meanwhile is rejected with AnalysisInFlight.
    Credentials are injected rather than read from a global store.
    """

    def __init__(
        self,
        credentials: Optional[CredentialSet] = None,
        fanout: Optional[FanOut] = None,
        strategy: Optional[str] = None,
        state: Optional[SessionState] = None,
    ):
        self.credentials = credentials or CredentialSet()
        self.fanout = fanout or FanOut()
        self.strategy = strategy or DISCOURSE_STRATEGY
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {self.strategy}")
        self.state = state or SessionState()
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._generation = 0

    # === Guards ===

    @contextmanager
    def _in_flight(self):
        with self._lock:
            if self.state.in_flight:
                raise AnalysisInFlight("An analysis is already running")
            self.state.in_flight = True
            self._cancel = threading.Event()
            generation = self._generation
        try:
            yield generation
        finally:
            with self._lock:
                if generation == self._generation:
                    self.state.in_flight = False

    def _current(self, generation: int) -> bool:
        """False once a reset happened during the transition."""
        return generation == self._generation

    @property
    def language(self) -> str:
        c = self.state.classification
        return c.language.value if c else "en"

    @property
    def sophistication(self) -> str:
        c = self.state.classification
        return c.sophistication_level.value if c else "basic"

    @property
    def category(self) -> str:
        c = self.state.classification
        return c.category.value if c else "Philosophy"

    def current_level(self) -> int:
        selected = self.state.selected
        return selected.level if selected else 0

    def can_generate_quintessence(self, level: Optional[int] = None) -> bool:
        level = self.current_level() if level is None else level
        if self.state.quintessence_at(level) is not None:
            return False
        contributors = [n for n in self.state.at_level(level) if n.kind != NodeKind.QUINTESSENCE]
        return len(contributors) >= QUINTESSENCE_MIN_SIBLINGS

    # === Content sourcing ===

    async def _source(self, text: str, persona: str, kind: str,
                      perspective: Optional[Perspective] = None) -> tuple[str, Optional[str]]:
        """AI first, static fallback second. Returns (content, provider or None)."""
        results = await self.fanout.analyze_with_all(
            text, persona, self.sophistication, self.language, self.credentials,
            cancel_event=self._cancel,
        )
        picked = select_result(results)
        if picked:
            provider, content = picked
            return content, provider.value
        if results:
            print(f"[discourse] No usable result for {persona} from {len(results)} provider(s), using fallback")
        return fallback(kind, text, self.language, self.sophistication, perspective), None

    async def _discourse_contents(self, seed: str) -> Optional[dict]:
        """One shared multi-party call; None when no response parses."""
        results = await self.fanout.analyze_with_all(
            seed, "discourse", self.sophistication, self.language, self.credentials,
            cancel_event=self._cancel,
        )
        remaining = dict(results)
        while True:
            picked = select_result(remaining)
            if not picked:
                break
            provider, text = picked
            try:
                parsed = parse_discourse(text)
                return {p: (content, provider.value) for p, content in parsed.items()}
            except DiscourseParseError as e:
                print(f"[discourse] Rejected {provider.value} discourse response: {e}")
                remaining.pop(provider)
        return None

    async def _generate_perspectives(self, seed: str, level: int, parent_id: Optional[str],
                                     generation: int) -> list[ThesisNode]:
        contents = None
        if self.strategy == "discourse" and self.credentials.configured():
            contents = await self._discourse_contents(seed)
        if contents is None:
            sourced = await asyncio.gather(*(
                self._source(seed, p.value, "perspective", p) for p in Perspective
            ))
            contents = dict(zip(Perspective, sourced))

        nodes = [
            ThesisNode(
                kind=NodeKind.PERSPECTIVE,
                title=p.value,
                content=contents[p][0],
                origin_category=self.category,
                level=level,
                parent_id=parent_id,
                perspective_name=p.value,
                provider=contents[p][1],
            )
            for p in Perspective
        ]
        return self._commit(nodes, generation)

    def _commit(self, nodes: list[ThesisNode], generation: int) -> list[ThesisNode]:
        if not self._current(generation):
            print("[discourse] Session was reset during analysis, discarding results")
            return []
        for node in nodes:
            self.state.add(node)
        if nodes:
            self.state.selected_id = nodes[0].id
        return nodes

    # === Transitions ===

    async def start(self, idea: str, mode: str = "perspectives") -> list[ThesisNode]:
        """Classify the idea and build the level-0 nodes."""
        idea = str(idea or "").strip()
        if not idea:
            raise EmptyIdea("Idea text is empty")
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")

        with self._in_flight() as generation:
            self.state.nodes = {}
            self.state.selected_id = None
            self.state.idea = idea
            self.state.classification = classify(idea)
            c = self.state.classification
            print(f"[discourse] Start ({mode}): {c.language.value}/{c.sophistication_level.value}/{c.category.value}")

            if mode == "perspectives":
                return await self._generate_perspectives(idea, 0, None, generation)

            (thesis, thesis_provider), (anti, anti_provider) = await asyncio.gather(
                self._source(idea, "thesis", "thesis"),
                self._source(idea, "antithesis", "antithesis"),
            )
            titles = TITLES[self.language]
            nodes = [
                ThesisNode(kind=NodeKind.THESIS, title=titles[NodeKind.THESIS], content=thesis,
                           origin_category=self.category, level=0, provider=thesis_provider),
                ThesisNode(kind=NodeKind.ANTITHESIS, title=titles[NodeKind.ANTITHESIS], content=anti,
                           origin_category=self.category, level=0, provider=anti_provider),
            ]
            return self._commit(nodes, generation)

    async def generate_quintessence(self, level: Optional[int] = None) -> ThesisNode:
        """Synthesize all nodes of a level into one quintessence node."""
        level = self.current_level() if level is None else level
        if self.state.is_empty:
            raise QuintessenceUnavailable("Nothing to synthesize yet")
        if not self.can_generate_quintessence(level):
            raise QuintessenceUnavailable(
                f"Quintessence needs {QUINTESSENCE_MIN_SIBLINGS}+ nodes and none existing at level {level}"
            )

        with self._in_flight() as generation:
            contributors = [n for n in self.state.at_level(level) if n.kind != NodeKind.QUINTESSENCE]
            positions = "\n\n".join(n.content for n in contributors)
            content, provider = await self._source(positions, "quintessence", "quintessence")
            if provider is None:
                content = fallback("quintessence", self.state.idea, self.language, self.sophistication)

            parents = {n.parent_id for n in contributors}
            node = ThesisNode(
                kind=NodeKind.QUINTESSENCE,
                title=TITLES[self.language][NodeKind.QUINTESSENCE],
                content=content,
                origin_category=self.category,
                level=level,
                parent_id=parents.pop() if len(parents) == 1 else None,
                source_ids=tuple(n.id for n in contributors),
                provider=provider,
            )
            committed = self._commit([node], generation)
            return committed[0] if committed else node

    async def think_forward(self, node_id: Optional[str] = None) -> list[ThesisNode]:
        """Run the perspectives step again, seeded with the selected node."""
        with self._in_flight() as generation:
            if node_id is not None:
                self.select(node_id)
            node = self.state.selected
            if node is None:
                raise NoSelection("Select a node to think further")
            print(f"[discourse] Think forward from {node.id} (level {node.level})")
            return await self._generate_perspectives(node.content, node.level + 1, node.id, generation)

    def select(self, node_id: str) -> ThesisNode:
        node_id = str(node_id)
        node = self.state.get(node_id)
        if node is None:
            raise UnknownNode(node_id)
        self.state.selected_id = node_id
        return node

    def cancel(self) -> None:
        """Cancel pending provider calls of the running transition."""
        self._cancel.set()

    def reset(self) -> None:
        """Back to Empty. A running transition is cancelled and its results dropped."""
        with self._lock:
            self._generation += 1
            self._cancel.set()
            self.state.clear()

    def close(self) -> None:
        """Cancel any running transition and release the worker pool."""
        self.cancel()
        self.fanout.close()
