"""Rollup fields: the numeric bag and what the send path merges."""

from spanhive.tracer.rollup import RollupFields
from spanhive.tracer.span_context import SpanContext
from spanhive.tracer.trace import Trace


class TestRollupFields:
    def test_add_sums_same_name(self):
        """Test that adding the same name twice sums the values."""
        bag = RollupFields()
        bag.add("db.calls", 1)
        bag.add("db.calls", 2)
        bag.add("db.ms", 1.5)
        assert bag["db.calls"] == 3
        assert bag.as_dict() == {"db.calls": 3, "db.ms": 1.5}

    def test_merge(self):
        """Test that merge() adds every entry of another bag."""
        bag = RollupFields({"a": 1})
        bag.merge(RollupFields({"a": 2, "b": 5}))
        bag.merge({"b": 1})
        assert dict(bag) == {"a": 3, "b": 6}
        assert len(bag) == 2

    def test_as_dict_is_a_copy(self):
        """Test that as_dict() returns an independent copy."""
        bag = RollupFields({"a": 1})
        copy = bag.as_dict()
        copy["a"] = 100
        assert bag["a"] == 1


class TestSendPathMerge:
    def test_span_bag_is_merged_into_its_own_event(self, tracer, context, recorder):
        """Test that each span's rollup bag lands on its own event only."""
        root = tracer.start_trace("root", context=context)
        child = root.create_child()
        child.add_field("name", "child")
        root.rollup_fields.add("counter", 2)
        child.rollup_fields.add("counter", 3)
        root.send()
        # Child bags are not folded into the parent's bag when sending.
        assert recorder.by_name("root")[0].data["counter"] == 2
        assert recorder.by_name("child")[0].data["counter"] == 3

    def test_trace_bag_overrides_on_root(self, tracer, context, recorder):
        """Test that trace rollups override the root's own bag on the root event."""
        root = tracer.start_trace("root", context=context)
        root.rollup_fields.add("counter", 2)
        root.trace.add_rollup_field("counter", 7)
        root.send()
        assert recorder.events[0].data["counter"] == 7

    def test_add_rollup_field_totals_on_root_only(self, tracer, context, recorder):
        """Test that add_rollup_field() totals appear on the root event only."""
        root = tracer.start_trace("root", context=context)
        root.add_rollup_field("db.calls", 1)
        child = root.create_child()
        child.add_field("name", "child")
        child.add_rollup_field("db.calls", 2)
        child.add_rollup_field("db.calls", 3)
        root.send()

        root_data = recorder.by_name("root")[0].data
        child_data = recorder.by_name("child")[0].data
        assert root_data["db.calls"] == 1
        assert root_data["rollup.db.calls"] == 6
        assert child_data["db.calls"] == 5
        assert "rollup.db.calls" not in child_data

    def test_subroot_does_not_carry_trace_rollups(self, provider, context, recorder):
        """Test that a subroot event does not carry trace-wide rollups."""
        remote = SpanContext(trace_id="12" * 16, span_id="34" * 8)
        root = Trace(provider, context, parent_context=remote).root_span
        root.add_rollup_field("bytes", 10)
        root.send()
        data = recorder.events[0].data
        assert data["bytes"] == 10
        assert "rollup.bytes" not in data
