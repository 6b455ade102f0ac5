from __future__ import annotations

import pytest

from sqlmock.db.results import new_result
from sqlmock.db.rows import new_rows
from sqlmock.engine.errors import ExpectationUsageError, MismatchError
from sqlmock.engine.expectations import Expectation, ExpectationKind, ExpectationQueue
from sqlmock.infra.result import DatabaseError, Err, Ok


class TestExpectationBuilder:
    @pytest.mark.unit
    def test_chained_refinement_returns_same_handle(self) -> None:
        rows = new_rows(["id"]).add_row(1)
        expectation = Expectation(ExpectationKind.QUERY, "FROM orders")

        assert expectation.with_args(1).will_return_rows(rows) is expectation
        assert expectation.expected_args == (1,)
        assert expectation.outcome is rows
        assert expectation.fulfilled is False

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "kind", [ExpectationKind.BEGIN, ExpectationKind.COMMIT, ExpectationKind.ROLLBACK]
    )
    def test_args_on_transaction_kinds_are_rejected(self, kind: ExpectationKind) -> None:
        with pytest.raises(ExpectationUsageError, match="do not accept arguments"):
            Expectation(kind).with_args(1)

    @pytest.mark.unit
    def test_pattern_on_transaction_kind_is_rejected(self) -> None:
        with pytest.raises(ExpectationUsageError, match="cannot carry a query pattern"):
            Expectation(ExpectationKind.COMMIT, "COMMIT")

    @pytest.mark.unit
    def test_invalid_pattern_fails_at_declaration(self) -> None:
        with pytest.raises(ExpectationUsageError):
            Expectation(ExpectationKind.EXEC, "UPDATE orders SET (")

    @pytest.mark.unit
    def test_second_outcome_is_rejected(self) -> None:
        expectation = Expectation(ExpectationKind.QUERY).will_return_rows(new_rows(["id"]))
        with pytest.raises(ExpectationUsageError, match="already returns rows"):
            expectation.will_return_error("boom")

    @pytest.mark.unit
    def test_arguments_attach_only_once(self) -> None:
        expectation = Expectation(ExpectationKind.EXEC).with_args(1)
        with pytest.raises(ExpectationUsageError, match="already attached"):
            expectation.with_args(2)

    @pytest.mark.unit
    def test_outcome_must_suit_the_kind(self) -> None:
        with pytest.raises(ExpectationUsageError, match="Exec expectations cannot return rows"):
            Expectation(ExpectationKind.EXEC).will_return_rows(new_rows(["id"]))
        with pytest.raises(ExpectationUsageError, match="Query expectations cannot return a result"):
            Expectation(ExpectationKind.QUERY).will_return_result(new_result(1, 1))
        with pytest.raises(ExpectationUsageError):
            Expectation(ExpectationKind.COMMIT).will_return_result(new_result(0, 0))

    @pytest.mark.unit
    def test_string_error_becomes_database_error(self) -> None:
        expectation = Expectation(ExpectationKind.COMMIT).will_return_error("deadlock")
        assert isinstance(expectation.outcome, DatabaseError)
        assert str(expectation.outcome) == "deadlock"

    @pytest.mark.unit
    def test_fulfilled_expectation_is_sealed(self) -> None:
        expectation = Expectation(ExpectationKind.QUERY)
        expectation.fulfilled = True
        with pytest.raises(ExpectationUsageError, match="already fulfilled"):
            expectation.with_args(1)

    @pytest.mark.unit
    def test_describe(self) -> None:
        assert Expectation(ExpectationKind.BEGIN).describe() == "BeginTransaction"
        described = Expectation(ExpectationKind.QUERY, "FROM orders").with_args(1, "x").describe()
        assert described == "Query(pattern='FROM orders', args=[1, 'x'])"


class TestExpectationQueue:
    @pytest.mark.unit
    def test_consumes_head_in_declaration_order(self) -> None:
        queue = ExpectationQueue()
        begin = queue.append(Expectation(ExpectationKind.BEGIN))
        query = queue.append(Expectation(ExpectationKind.QUERY, "orders"))

        first = queue.try_consume(ExpectationKind.BEGIN)
        second = queue.try_consume(ExpectationKind.QUERY, "SELECT * FROM orders")

        assert isinstance(first, Ok) and first.unwrap() is begin
        assert isinstance(second, Ok) and second.unwrap() is query
        assert begin.fulfilled and query.fulfilled
        assert queue.head is None
        assert queue.unmet() == []

    @pytest.mark.unit
    def test_never_searches_past_the_head(self) -> None:
        queue = ExpectationQueue()
        queue.append(Expectation(ExpectationKind.BEGIN))
        query = queue.append(Expectation(ExpectationKind.QUERY))

        result = queue.try_consume(ExpectationKind.QUERY, "SELECT 1")

        assert isinstance(result, Err)
        assert result.unwrap_err().dimension == "kind"
        assert query.fulfilled is False
        assert queue.head is not None and queue.head.kind is ExpectationKind.BEGIN

    @pytest.mark.unit
    def test_reports_exhausted_queue(self) -> None:
        queue = ExpectationQueue()
        result = queue.try_consume(ExpectationKind.COMMIT)

        error = result.unwrap_err()
        assert isinstance(error, MismatchError)
        assert error.dimension == "exhausted"
        assert "call to Commit was not expected" in error.message

    @pytest.mark.unit
    def test_reports_pattern_then_args(self) -> None:
        queue = ExpectationQueue()
        queue.append(Expectation(ExpectationKind.EXEC, "^UPDATE orders").with_args(2))

        pattern_miss = queue.try_consume(ExpectationKind.EXEC, "UPDATE users SET x = 1", (2,))
        args_miss = queue.try_consume(ExpectationKind.EXEC, "UPDATE orders SET x = 1", (3,))

        assert pattern_miss.unwrap_err().dimension == "pattern"
        assert args_miss.unwrap_err().dimension == "args"
        assert args_miss.unwrap_err().expected == [2]
        assert args_miss.unwrap_err().actual == [3]
        assert queue.unmet() == list(queue)

    @pytest.mark.unit
    def test_precondition_can_veto_a_matching_head(self) -> None:
        queue = ExpectationQueue()
        commit = queue.append(Expectation(ExpectationKind.COMMIT))

        result = queue.try_consume(
            ExpectationKind.COMMIT, precondition=lambda _: "no transaction is in progress"
        )

        error = result.unwrap_err()
        assert error.dimension == "state"
        assert "no transaction is in progress" in error.message
        assert commit.fulfilled is False
