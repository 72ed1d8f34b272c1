"""Tests for TimeValue materialization and the fluent Time builder."""

from __future__ import annotations

import pytest

from beattime.errors import TimeSyntaxError, ValidationError
from beattime.model.time_value import (
    ChainedOperation,
    Time,
    TimeValue,
    materialize,
    parse_time,
    to_time_value,
)
from beattime.model.units import Operator, Unit
from beattime.parser.expression import parse_expression


# ---------------------------------------------------------------------------
# TimeValue
# ---------------------------------------------------------------------------


class TestTimeValue:
    def test_defaults_to_no_operations(self):
        tv = TimeValue(unit=Unit.DUPLET, magnitude=4)
        assert tv.operations == ()

    def test_with_operation_returns_copy(self):
        base = TimeValue(unit=Unit.DUPLET, magnitude=4)
        added = base.with_operation(Operator.ADD, TimeValue(Unit.MEASURE, 1))
        assert base.operations == ()
        assert len(added.operations) == 1
        assert added.operations[0].operator is Operator.ADD

    def test_frozen(self):
        tv = TimeValue(unit=Unit.SECONDS, magnitude=1)
        with pytest.raises(AttributeError):
            tv.magnitude = 2

    def test_transport_requires_triple(self):
        with pytest.raises(ValidationError):
            TimeValue(unit=Unit.TRANSPORT_TIME, magnitude=3)

    def test_scalar_units_reject_tuples(self):
        with pytest.raises(ValidationError):
            TimeValue(unit=Unit.SECONDS, magnitude=(1.0, 2.0, 0.0))

    def test_rejects_strings(self):
        with pytest.raises(ValidationError):
            TimeValue(unit=Unit.SECONDS, magnitude="2")

    def test_rejects_bool(self):
        with pytest.raises(ValidationError):
            TimeValue(unit=Unit.SECONDS, magnitude=True)

    def test_str(self):
        assert str(parse_time("1m+2n*3n")) == "(1m + (2n * 3n))"
        assert str(parse_time("+4n")) == "(4n + now)"


# ---------------------------------------------------------------------------
# materialize
# ---------------------------------------------------------------------------


class TestMaterialize:
    def test_leaf(self):
        assert materialize(parse_expression("4n")) == TimeValue(Unit.DUPLET, 4)

    def test_binary_attaches_right_operand(self):
        tv = parse_time("1m+2n")
        assert tv.unit is Unit.MEASURE
        assert tv.operations == (
            ChainedOperation(Operator.ADD, TimeValue(Unit.DUPLET, 2)),
        )

    def test_higher_precedence_nests(self):
        tv = parse_time("1m+2n*3n")
        assert len(tv.operations) == 1
        operand = tv.operations[0].operand
        assert operand.unit is Unit.DUPLET
        assert operand.operations[0].operator is Operator.MULTIPLY

    def test_left_chain_is_flat_in_order(self):
        tv = parse_time("1m-4n-8n")
        assert [op.operator for op in tv.operations] == [
            Operator.SUBTRACT,
            Operator.SUBTRACT,
        ]
        assert [op.operand.magnitude for op in tv.operations] == [4, 8]

    def test_group_then_multiply(self):
        tv = parse_time("(1m+2n)*3n")
        assert [op.operator for op in tv.operations] == [
            Operator.ADD,
            Operator.MULTIPLY,
        ]

    def test_negate_is_multiply_by_minus_one(self):
        tv = parse_time("-4n")
        (op,) = tv.operations
        assert op.operator is Operator.MULTIPLY
        assert op.operand == TimeValue(Unit.SECONDS, -1)

    def test_negate_applies_before_further_chaining(self):
        tv = parse_time("-4n+1m")
        assert [op.operator for op in tv.operations] == [
            Operator.MULTIPLY,
            Operator.ADD,
        ]

    def test_now_has_no_operand(self):
        tv = parse_time("+1m")
        assert tv.operations == (ChainedOperation(Operator.NOW, None),)

    def test_reused_tree_is_not_contaminated(self):
        tree = parse_expression("4n+2n")
        first = materialize(tree)
        second = materialize(tree)
        assert first == second
        assert len(first.operations) == 1

    def test_invalid_text(self):
        with pytest.raises(TimeSyntaxError):
            parse_time("4x")


# ---------------------------------------------------------------------------
# to_time_value
# ---------------------------------------------------------------------------


class TestToTimeValue:
    def test_number_defaults_to_seconds(self):
        assert to_time_value(2) == TimeValue(Unit.SECONDS, 2)

    def test_number_with_suffix(self):
        assert to_time_value(4, "n") == TimeValue(Unit.DUPLET, 4)

    def test_number_with_unit(self):
        assert to_time_value(3, Unit.MEASURE) == TimeValue(Unit.MEASURE, 3)

    def test_transport_sequence_padded(self):
        tv = to_time_value([1, 2], "tr")
        assert tv.magnitude == (1.0, 2.0, 0.0)

    def test_transport_too_long(self):
        with pytest.raises(ValidationError):
            to_time_value([1, 2, 3, 4], "tr")

    def test_string_is_parsed(self):
        assert to_time_value("4n+1m") == parse_time("4n+1m")

    def test_time_value_passthrough(self):
        tv = TimeValue(Unit.TICK, 96)
        assert to_time_value(tv) is tv

    def test_none_is_now(self):
        tv = to_time_value(None)
        assert tv.unit is Unit.SECONDS
        assert tv.magnitude == 0
        assert tv.operations[0].operator is Operator.NOW

    def test_unknown_unit(self):
        with pytest.raises(ValidationError):
            to_time_value(4, "x")


# ---------------------------------------------------------------------------
# Time builder
# ---------------------------------------------------------------------------


class TestTimeBuilder:
    def test_methods_return_self(self):
        t = Time("4n")
        assert t.add(1, "m") is t
        assert t.sub("8n") is t
        assert t.mult(2) is t
        assert t.div(2) is t
        assert t.quantize("16n") is t
        assert t.from_now() is t

    def test_operations_in_call_order(self):
        tv = Time("4n").add(1, "m").mult(2).quantize("8n").from_now().build()
        assert [op.operator for op in tv.operations] == [
            Operator.ADD,
            Operator.MULTIPLY,
            Operator.QUANTIZE,
            Operator.NOW,
        ]

    def test_operand_coercion(self):
        tv = Time(1, "m").add(4, "n").build()
        assert tv.operations[0].operand == TimeValue(Unit.DUPLET, 4)

    def test_build_is_a_snapshot(self):
        t = Time("4n")
        before = t.build()
        t.add("1m")
        assert before.operations == ()
        assert len(t.build().operations) == 1

    def test_seeded_from_expression_keeps_chain(self):
        tv = Time("1m+2n").sub("4n").build()
        assert [op.operator for op in tv.operations] == [
            Operator.ADD,
            Operator.SUBTRACT,
        ]

    def test_builder_as_operand_is_snapshotted(self):
        inner = Time("2n")
        outer = Time("1m").add(inner)
        inner.mult(100)
        operand = outer.build().operations[0].operand
        assert operand.operations == ()

    def test_bare_number_string_takes_units(self):
        assert Time("4", "n").build() == TimeValue(Unit.DUPLET, 4)
        assert Time("1.5", "m").build() == TimeValue(Unit.MEASURE, 1.5)

    def test_literal_string_in_matching_units(self):
        assert Time("4n", "n").build() == TimeValue(Unit.DUPLET, 4)

    def test_literal_string_in_other_units_rejected(self):
        with pytest.raises(ValidationError):
            Time("4n", "m")

    def test_expression_string_with_units_rejected(self):
        with pytest.raises(ValidationError):
            Time("4n+1m", "n")

    def test_operand_string_takes_units(self):
        tv = Time("1m").add("2", "n").build()
        assert tv.operations[0].operand == TimeValue(Unit.DUPLET, 2)

    def test_default_is_now(self):
        tv = Time().build()
        assert tv.operations == (ChainedOperation(Operator.NOW, None),)

    def test_from_time_value(self):
        tv = parse_time("4n*2")
        assert Time(tv).build() == tv

    def test_repr(self):
        assert repr(Time("4n").add("1m")) == "Time((4n + 1m))"
