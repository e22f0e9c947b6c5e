"""Unit tests for the discourse state machine and response parsing."""

import asyncio
import time

import pytest

from models import NodeKind, Perspective, ProviderId, CredentialSet
from weitblick.discourse import DiscourseSession, parse_discourse
from weitblick.errors import (
    AnalysisInFlight,
    DiscourseParseError,
    EmptyIdea,
    NoSelection,
    QuintessenceUnavailable,
    UnknownNode,
)
from weitblick import fanout as fanout_module
from weitblick.fanout import FanOut
from fakes import FakeClient, discourse_reply, persona_echo, GEMINI_KEY


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def session():
    """Session without credentials: every node comes from the fallback."""
    return DiscourseSession(fanout=FanOut(clients={}, poll_interval=0.01))


@pytest.fixture
def ai_session(fake_fanout, all_credentials):
    return DiscourseSession(credentials=all_credentials, fanout=fake_fanout)


class TestParseDiscourse:

    def test_tagged_segments(self):
        text = "KANT: a | HEIDEGGER: b | HEGEL: c | NAGARJUNA: d | WISSENSCHAFT: e"
        parsed = parse_discourse(text)
        assert parsed[Perspective.KANT] == "Kant: a"
        assert parsed[Perspective.WISSENSCHAFT] == "Wissenschaft: e"

    def test_order_does_not_matter(self):
        text = "HEGEL: c | KANT: a | WISSENSCHAFT: e | NAGARJUNA: d | HEIDEGGER: b"
        assert parse_discourse(text)[Perspective.KANT] == "Kant: a"

    def test_science_alias_and_markdown(self):
        text = "**Kant:** a | Heidegger: b | Hegel: c | Nagarjuna: d | SCIENCE: e"
        assert parse_discourse(text)[Perspective.WISSENSCHAFT] == "Wissenschaft: e"

    def test_missing_segment(self):
        with pytest.raises(DiscourseParseError):
            parse_discourse("KANT: a | HEIDEGGER: b | HEGEL: c | NAGARJUNA: d")

    def test_duplicate_segment(self):
        with pytest.raises(DiscourseParseError):
            parse_discourse("KANT: a | KANT: b | HEGEL: c | NAGARJUNA: d | WISSENSCHAFT: e")

    def test_unknown_tag(self):
        with pytest.raises(DiscourseParseError):
            parse_discourse("KANT: a | SARTRE: x | HEIDEGGER: b | HEGEL: c | NAGARJUNA: d | WISSENSCHAFT: e")

    def test_untagged(self):
        with pytest.raises(DiscourseParseError):
            parse_discourse("just some prose without structure")


class TestStart:

    def test_empty_idea_rejected(self, session):
        with pytest.raises(EmptyIdea):
            run(session.start("   "))
        assert session.state.is_empty

    def test_missing_idea_rejected(self, session):
        with pytest.raises(EmptyIdea):
            run(session.start(None))

    def test_numeric_idea_is_text(self, session):
        run(session.start(1984))
        assert session.state.idea == "1984"

    def test_fallback_perspectives(self, session, sample_idea):
        nodes = run(session.start(sample_idea))

        assert [n.perspective_name for n in nodes] == [p.value for p in Perspective]
        assert all(n.level == 0 and n.parent_id is None for n in nodes)
        assert all(n.is_fallback for n in nodes)
        assert all(n.origin_category == "Philosophy" for n in nodes)
        assert nodes[0].content.startswith("Kant:")
        assert session.state.selected_id == nodes[0].id
        assert not session.state.in_flight

    def test_ai_perspectives(self, ai_session, sample_idea, fake_clients):
        nodes = run(ai_session.start(sample_idea))

        assert nodes[0].content == "Kant: KI-Analyse"
        assert nodes[4].content == "Wissenschaft: KI-Analyse"
        # gemini wins on priority
        assert all(n.provider == "gemini" for n in nodes)
        assert len(fake_clients[ProviderId.GEMINI].prompts) == 5

    def test_failed_providers_fall_back(self, sample_idea):
        clients = {p: FakeClient(p, response="   ") for p in ProviderId}
        credentials = CredentialSet(gemini=GEMINI_KEY)
        session = DiscourseSession(credentials=credentials, fanout=FanOut(clients=clients, poll_interval=0.01))

        nodes = run(session.start(sample_idea))

        assert all(n.is_fallback for n in nodes)
        assert "Analyse nicht verfügbar" not in nodes[0].content

    def test_restart_replaces_nodes(self, session):
        first = run(session.start("Erste Idee ist hier"))
        second = run(session.start("Zweite Idee ist hier"))

        assert len(session.state.nodes) == 5
        assert not set(n.id for n in first) & set(session.state.nodes)
        assert session.state.idea == "Zweite Idee ist hier"
        assert len(second) == 5

    def test_dialectic_mode(self, session, sample_idea):
        nodes = run(session.start(sample_idea, mode="dialectic"))

        assert [n.kind for n in nodes] == [NodeKind.THESIS, NodeKind.ANTITHESIS]
        assert [n.title for n in nodes] == ["These", "Antithese"]

    def test_unknown_mode(self, session):
        with pytest.raises(ValueError):
            run(session.start("x", mode="trilemma"))


class TestQuintessence:

    def test_rejected_before_start(self, session):
        assert not session.can_generate_quintessence()
        with pytest.raises(QuintessenceUnavailable):
            run(session.generate_quintessence())

    def test_synthesizes_level(self, session, sample_idea):
        perspectives = run(session.start(sample_idea))
        node = run(session.generate_quintessence())

        assert node.kind == NodeKind.QUINTESSENCE
        assert node.level == 0
        assert node.parent_id is None
        assert set(node.source_ids) == {n.id for n in perspectives}
        assert node.title == "Quintessenz"
        assert node.content.startswith("Quintessenz:")
        assert session.state.selected_id == node.id

    def test_only_one_per_level(self, session, sample_idea):
        run(session.start(sample_idea))
        run(session.generate_quintessence())

        assert not session.can_generate_quintessence(0)
        with pytest.raises(QuintessenceUnavailable):
            run(session.generate_quintessence(0))

    def test_ai_quintessence_sees_all_positions(self, ai_session, sample_idea, fake_clients):
        run(ai_session.start(sample_idea))
        node = run(ai_session.generate_quintessence())

        prompt = fake_clients[ProviderId.GEMINI].prompts[-1]
        assert prompt.count("KI-Analyse") == 5
        assert node.provider == "gemini"

    def test_level_one_parent_is_shared_parent(self, session, sample_idea):
        roots = run(session.start(sample_idea))
        run(session.think_forward(roots[2].id))
        node = run(session.generate_quintessence(1))

        assert node.level == 1
        assert node.parent_id == roots[2].id


class TestThinkForward:

    def test_expands_selected_node(self, session, sample_idea):
        roots = run(session.start(sample_idea))
        hegel = roots[2]

        children = run(session.think_forward(hegel.id))

        assert len(children) == 5
        assert all(c.level == 1 and c.parent_id == hegel.id for c in children)
        assert set(session.state.get(hegel.id).child_ids) == {c.id for c in children}
        assert session.current_level() == 1

    def test_uses_selected_when_no_id(self, session, sample_idea):
        roots = run(session.start(sample_idea))
        session.select(roots[1].id)

        children = run(session.think_forward())

        assert all(c.parent_id == roots[1].id for c in children)

    def test_seed_is_node_content(self, ai_session, sample_idea, fake_clients):
        roots = run(ai_session.start(sample_idea))
        run(ai_session.think_forward(roots[0].id))

        assert '"Kant: KI-Analyse"' in fake_clients[ProviderId.GEMINI].prompts[-1]

    def test_from_quintessence(self, session, sample_idea):
        run(session.start(sample_idea))
        q = run(session.generate_quintessence())
        children = run(session.think_forward(q.id))
        assert all(c.level == 1 for c in children)

    def test_without_selection(self, session):
        with pytest.raises(NoSelection):
            run(session.think_forward())

    def test_unknown_node(self, session, sample_idea):
        run(session.start(sample_idea))
        with pytest.raises(UnknownNode):
            run(session.think_forward("node-missing"))


class TestDiscourseStrategy:

    def test_single_shared_call(self, all_credentials, sample_idea):
        clients = {p: FakeClient(p, response=discourse_reply) for p in ProviderId}
        session = DiscourseSession(
            credentials=all_credentials,
            fanout=FanOut(clients=clients, poll_interval=0.01),
            strategy="discourse",
        )

        nodes = run(session.start(sample_idea))

        assert nodes[0].content == "Kant: Stimme von Kant"
        assert nodes[3].content == "Nagarjuna: Stimme von Nagarjuna"
        assert len(clients[ProviderId.GEMINI].prompts) == 1

    def test_unparseable_falls_back_to_per_perspective(self, all_credentials, sample_idea):
        def malformed(prompt):
            if "Beginne deine Antwort" in prompt:
                return persona_echo(prompt)
            return "KANT: nur eine Stimme"

        clients = {p: FakeClient(p, response=malformed) for p in ProviderId}
        session = DiscourseSession(
            credentials=all_credentials,
            fanout=FanOut(clients=clients, poll_interval=0.01),
            strategy="discourse",
        )

        nodes = run(session.start(sample_idea))

        assert [n.content for n in nodes][:2] == ["Kant: KI-Analyse", "Heidegger: KI-Analyse"]

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            DiscourseSession(strategy="round_robin")


class TestConcurrency:

    def _slow_session(self, all_credentials, delay=0.3):
        clients = {p: FakeClient(p, response=persona_echo, delay=delay) for p in ProviderId}
        return DiscourseSession(
            credentials=all_credentials,
            fanout=FanOut(clients=clients, timeout=5, max_concurrency=20, poll_interval=0.01),
        )

    def test_second_transition_rejected(self, all_credentials, sample_idea):
        session = self._slow_session(all_credentials)

        async def both():
            return await asyncio.gather(
                session.start(sample_idea),
                session.start("Zweite Idee ist da"),
                return_exceptions=True,
            )

        first, second = run(both())

        assert len(first) == 5
        assert isinstance(second, AnalysisInFlight)
        assert session.state.idea == sample_idea
        assert not session.state.in_flight

    def test_rejected_think_forward_keeps_selection(self, all_credentials, sample_idea):
        session = self._slow_session(all_credentials)
        roots = run(session.start(sample_idea))

        async def forward_twice():
            task = asyncio.create_task(session.think_forward(roots[1].id))
            await asyncio.sleep(0.05)
            with pytest.raises(AnalysisInFlight):
                await session.think_forward(roots[3].id)
            assert session.state.selected_id == roots[1].id
            return await task

        children = run(forward_twice())

        assert all(n.parent_id == roots[1].id for n in children)
        assert session.state.selected_id == children[0].id

    def test_reset_discards_running_transition(self, all_credentials, sample_idea):
        session = self._slow_session(all_credentials, delay=2.0)

        async def start_then_reset():
            task = asyncio.create_task(session.start(sample_idea))
            await asyncio.sleep(0.05)
            session.reset()
            return await task

        begin = time.perf_counter()
        nodes = run(start_then_reset())
        elapsed = time.perf_counter() - begin
        session.close()

        assert nodes == []
        assert session.state.is_empty
        assert session.state.classification is None
        assert not session.state.in_flight
        assert elapsed < 1.5

    def test_cancel_commits_fallback_without_waiting(self, all_credentials, sample_idea):
        session = self._slow_session(all_credentials, delay=2.0)

        async def start_then_cancel():
            task = asyncio.create_task(session.start(sample_idea))
            await asyncio.sleep(0.05)
            session.cancel()
            return await task

        begin = time.perf_counter()
        nodes = run(start_then_cancel())
        elapsed = time.perf_counter() - begin
        session.close()

        assert len(nodes) == 5
        assert all(n.provider is None for n in nodes)
        assert not session.state.in_flight
        assert elapsed < 1.5

    def test_calls_queued_behind_busy_workers_succeed(self, monkeypatch, all_credentials, sample_idea):
        monkeypatch.setattr(fanout_module, "TIMEOUT_GRACE", 0)
        clients = {p: FakeClient(p, response=persona_echo, delay=0.1) for p in ProviderId}
        session = DiscourseSession(
            credentials=all_credentials,
            fanout=FanOut(clients=clients, timeout=0.5, max_concurrency=2, poll_interval=0.01),
            strategy="per_perspective",
        )

        # Twenty calls on two workers take about a second in total
        nodes = run(session.start(sample_idea))

        assert len(nodes) == 5
        assert all(n.provider == ProviderId.GEMINI.value for n in nodes)

    def test_select_unknown(self, session):
        with pytest.raises(UnknownNode):
            session.select("node-nope")


class TestEndToEnd:

    def test_reference_scenario(self, session, sample_idea):
        """Zero credentials: classify, five level-0 nodes, expand one."""
        roots = run(session.start(sample_idea))

        c = session.state.classification
        assert (c.language.value, c.sophistication_level.value, c.category.value) == ("de", "basic", "Philosophy")
        assert len(roots) == 5

        children = run(session.think_forward(roots[0].id))
        assert len(children) == 5
        assert all(n.level == 1 and n.parent_id == roots[0].id for n in children)
        assert len(session.state.nodes) == 10

        session.reset()
        assert session.state.is_empty
