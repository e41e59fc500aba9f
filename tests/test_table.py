"""Tests for TransitionTableBuilder and TransitionTable."""
from enum import Enum

import pytest

from trigger_fsm.state_machine import (
    DuplicatePolicy,
    DuplicateRuleError,
    TableBuildError,
    TableSealedError,
    TransitionTable,
    UnknownStateError,
    UnknownTriggerError,
    build_table,
)


class Light(Enum):
    OFF = "off"
    ON = "on"
    BROKEN = "broken"


class Switch(Enum):
    FLIP = "flip"
    SMASH = "smash"


def _always(context):
    return True


def _never(context):
    return False


class TestBuilder:
    """Test cases for rule registration and finalization."""

    def test_finalize_returns_table_with_rules_in_insertion_order(self):
        """Rules for a state keep the order they were added in."""
        # Arrange
        builder = build_table()
        builder.add_rule("a", "x", "b")
        builder.add_rule("a", "y", "c")
        builder.add_rule("b", "x", "a")

        # Act
        table = builder.finalize()

        # Assert
        assert isinstance(table, TransitionTable)
        assert [rule.trigger for rule in table.rules_for("a")] == ["x", "y"]
        assert [rule.target for rule in table.rules_for("a")] == ["b", "c"]
        assert len(table) == 3

    def test_add_rule_is_chainable(self):
        """add_rule returns the builder itself."""
        builder = build_table()
        assert builder.add_rule("a", "x", "b") is builder

    def test_states_and_triggers_in_first_use_order(self):
        """Without a closed set, states and triggers are collected as rules mention them."""
        table = (
            build_table()
            .add_rule("idle", "start", "running")
            .add_rule("running", "stop", "idle")
            .finalize()
        )

        assert table.states == ("idle", "running")
        assert table.triggers == ("start", "stop")

    def test_declared_enum_states_are_all_known(self):
        """States from a closed set are known even without rules."""
        table = build_table(states=Light, triggers=Switch).add_rule(Light.OFF, Switch.FLIP, Light.ON).finalize()

        assert table.states == (Light.OFF, Light.ON, Light.BROKEN)
        assert table.knows_state(Light.BROKEN)
        assert table.rules_for(Light.BROKEN) == ()

    def test_unknown_state_rejected_with_closed_set(self):
        """A rule naming a value outside the declared states fails at build time."""
        builder = build_table(states=Light)

        with pytest.raises(UnknownStateError):
            builder.add_rule(Light.OFF, Switch.FLIP, "dimmed")

    def test_unknown_trigger_rejected_with_closed_set(self):
        builder = build_table(states=Light, triggers=Switch)

        with pytest.raises(UnknownTriggerError):
            builder.add_rule(Light.OFF, "clap", Light.ON)

    def test_finalize_twice_raises_sealed(self):
        """The builder is sealed after finalize."""
        builder = build_table().add_rule("a", "x", "b")
        builder.finalize()

        with pytest.raises(TableSealedError):
            builder.finalize()
        with pytest.raises(TableSealedError):
            builder.add_rule("b", "x", "a")

    def test_table_rules_are_immutable(self):
        """Tables expose tuples, not the builder's lists."""
        builder = build_table().add_rule("a", "x", "b")
        table = builder.finalize()

        assert isinstance(table.rules_for("a"), tuple)
        with pytest.raises(TypeError):
            table._rules["a"] = ()  # noqa: SLF001

    def test_terminal_state_with_outgoing_rule_fails(self):
        """Terminal states may not have rules out of them."""
        builder = (
            build_table(states=Light, triggers=Switch)
            .add_rule(Light.ON, Switch.SMASH, Light.BROKEN)
            .add_rule(Light.BROKEN, Switch.FLIP, Light.OFF)
            .declare_terminal(Light.BROKEN)
        )

        with pytest.raises(TableBuildError):
            builder.finalize()

    def test_terminal_states_exposed(self):
        table = (
            build_table(states=Light, triggers=Switch)
            .add_rule(Light.ON, Switch.SMASH, Light.BROKEN)
            .declare_terminal(Light.BROKEN)
            .finalize()
        )

        assert table.terminal_states == frozenset({Light.BROKEN})
        assert table.is_terminal(Light.BROKEN)
        assert not table.is_terminal(Light.ON)

    def test_triggers_for_lists_each_trigger_once(self):
        """Guarded duplicates appear once in the trigger listing."""
        table = (
            build_table()
            .add_rule("a", "x", "b", guard=_never)
            .add_rule("a", "x", "c")
            .add_rule("a", "y", "d")
            .finalize()
        )

        assert table.triggers_for("a") == ("x", "y")
        assert table.has_rule("a", "x")
        assert not table.has_rule("b", "x")


class TestDuplicatePolicy:
    """Test cases for ambiguous (state, trigger) pairs."""

    def test_two_unguarded_rules_raise_and_table_is_not_built(self):
        """The second unguarded rule raises; the builder can no longer finalize."""
        # Arrange
        builder = build_table().add_rule("a", "x", "b")

        # Act
        with pytest.raises(DuplicateRuleError) as excinfo:
            builder.add_rule("a", "x", "c")

        # Assert
        assert excinfo.value.state == "a"
        assert excinfo.value.trigger == "x"
        with pytest.raises(TableBuildError):
            builder.finalize()

    def test_rule_after_unguarded_rule_is_shadowed(self):
        """Even a guarded rule may not follow an unguarded one for the same pair."""
        builder = build_table().add_rule("a", "x", "b")

        with pytest.raises(DuplicateRuleError):
            builder.add_rule("a", "x", "c", guard=_always)

    def test_guarded_rules_may_share_a_pair(self):
        """Guarded rules followed by an unguarded fallback are allowed."""
        table = (
            build_table()
            .add_rule("a", "x", "b", guard=_never)
            .add_rule("a", "x", "c", guard=_always)
            .add_rule("a", "x", "d")
            .finalize()
        )

        assert [rule.target for rule in table.match("a", "x")] == ["b", "c", "d"]

    def test_reject_policy_refuses_guarded_duplicates(self):
        builder = build_table(policy=DuplicatePolicy.REJECT).add_rule("a", "x", "b", guard=_never)

        with pytest.raises(DuplicateRuleError):
            builder.add_rule("a", "x", "c", guard=_always)

    def test_replace_policy_keeps_last_rule(self):
        """REPLACE swaps the earlier rule out in place."""
        table = (
            build_table(policy=DuplicatePolicy.REPLACE)
            .add_rule("a", "x", "b")
            .add_rule("a", "y", "c")
            .add_rule("a", "x", "d")
            .finalize()
        )

        assert [(rule.trigger, rule.target) for rule in table.rules_for("a")] == [("x", "d"), ("y", "c")]

    def test_explicit_replace_overrides_default_policy(self):
        """replace=True is a per-rule override policy."""
        table = build_table().add_rule("a", "x", "b").add_rule("a", "x", "c", replace=True).finalize()

        assert [rule.target for rule in table.match("a", "x")] == ["c"]
        assert "c" in table.states
