"""Tests for guarded rules and the HookRegistry."""
from types import SimpleNamespace

import pytest

from trigger_fsm.state_machine import HookRegistry, Machine, NoTransitionError, build_table


class TestGuardedRules:
    """Test cases for guard evaluation during fire."""

    def test_always_false_guard_behaves_like_missing_rule(self):
        """A rule whose guard never passes is the same as no rule at all."""
        # Arrange
        guarded = build_table().add_rule("a", "x", "b", guard=lambda ctx: False).finalize()
        empty = build_table().add_rule("a", "y", "c").finalize()

        # Act / Assert
        for table in (guarded, empty):
            machine = Machine(table, "a")
            with pytest.raises(NoTransitionError):
                machine.fire("x")
            assert machine.current_state == "a"

    def test_guard_reads_machine_context(self):
        """Guards receive the machine context object."""
        context = SimpleNamespace(open=False)
        table = build_table().add_rule("closed", "push", "opened", guard=lambda ctx: ctx.open).finalize()
        machine = Machine(table, "closed", context=context)

        assert not machine.can_fire("push")
        context.open = True
        assert machine.can_fire("push")
        assert machine.fire("push") == "opened"

    def test_first_passing_guard_wins(self):
        """Among several rules for one trigger, the first passing guard is used."""
        table = (
            build_table()
            .add_rule("idle", "go", "left", guard=lambda ctx: ctx == "left")
            .add_rule("idle", "go", "right", guard=lambda ctx: ctx in ("left", "right"))
            .add_rule("idle", "go", "straight")
            .finalize()
        )

        assert Machine(table, "idle", context="left").fire("go") == "left"
        assert Machine(table, "idle", context="right").fire("go") == "right"
        assert Machine(table, "idle", context=None).fire("go") == "straight"

    def test_failing_guard_does_not_run_action(self):
        calls = []
        table = (
            build_table()
            .add_rule("a", "x", "b", guard=lambda ctx: False, action=lambda s, t, d: calls.append(d))
            .finalize()
        )

        with pytest.raises(NoTransitionError):
            Machine(table, "a").fire("x")

        assert calls == []

    def test_guard_exception_propagates_and_state_is_kept(self):
        def guard(ctx):
            raise RuntimeError("sensor offline")

        table = build_table().add_rule("a", "x", "b", guard=guard).finalize()
        machine = Machine(table, "a")

        with pytest.raises(RuntimeError):
            machine.fire("x")
        assert machine.current_state == "a"


class TestHookRegistry:
    """Test cases for named guards and actions."""

    def test_register_and_get(self):
        hooks = HookRegistry()
        hooks.guards.register("yes", lambda ctx: True)

        assert hooks.guards.has("yes")
        assert hooks.guards.get("yes")(None) is True
        assert hooks.guards.names() == ["yes"]

    def test_unknown_name_raises_key_error(self):
        hooks = HookRegistry()

        with pytest.raises(KeyError):
            hooks.actions.get("missing")

    def test_decorators_register_and_return_function(self):
        hooks = HookRegistry()

        @hooks.guard("armed")
        def armed(ctx):
            return True

        @hooks.action("log")
        def log(source, trigger, target):
            return None

        assert hooks.guards.get("armed") is armed
        assert hooks.actions.get("log") is log

    def test_register_overwrites(self):
        hooks = HookRegistry()
        hooks.guards.register("g", lambda ctx: True)
        hooks.guards.register("g", lambda ctx: False)

        assert hooks.guards.get("g")(None) is False
