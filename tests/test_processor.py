"""Tests for the request processing pipeline."""
import time
from unittest.mock import patch

import pytest
from pymongo.errors import AutoReconnect

from lambdalogs.connection import ClientHolder
from lambdalogs.counter import InvocationCounter
from lambdalogs.errors import (
    CommandExecutionError,
    ConfigurationError,
    DeadlineExceededError,
    NotInitializedError,
    PersistenceError,
)
from lambdalogs.processor import (
    ACTION,
    MISSING_MESSAGE,
    event_message,
    process_work,
    remaining_seconds,
)

from .conftest import MONGODB_URL, REDACTED_URL, FakeDiagnostics


class TestEventMessage:

    @pytest.mark.parametrize("event, expected", [
        ({"message": "hi"}, "hi"),
        ({"message": ""}, ""),
        ({}, MISSING_MESSAGE),
        ({"message": 42}, MISSING_MESSAGE),
        ({"message": None}, MISSING_MESSAGE),
        ("not a dict", MISSING_MESSAGE),
        (None, MISSING_MESSAGE),
    ])
    def test_extraction(self, event, expected):
        assert event_message(event) == expected


class TestRemainingSeconds:

    def test_no_deadline(self):
        assert remaining_seconds(0) is None

    def test_time_left(self):
        assert remaining_seconds(10_500, now_ms=10_000) == pytest.approx(0.5)

    def test_deadline_passed(self):
        with pytest.raises(DeadlineExceededError):
            remaining_seconds(10_000, now_ms=10_001)


class TestProcessWork:

    def run(self, holder, counter=None, diagnostics=None, environ=None, message="hello",
            deadline=0):
        return process_work(
            message, "req-1", 128, deadline,
            environ=environ if environ is not None else {"MONGODB_URL": MONGODB_URL},
            holder=holder,
            counter=counter or InvocationCounter(),
            diagnostics=diagnostics or FakeDiagnostics(cores=4),
        )

    def test_success_response(self, holder):
        response = self.run(holder)
        assert response == {
            "mongodb_url": REDACTED_URL,
            "invocation_count": 1,
            "action": ACTION,
            "message_received": "hello",
        }

    def test_persisted_record(self, holder, mock_client, collection):
        counter = InvocationCounter()
        counter.increment_and_fetch()

        response = self.run(holder, counter=counter, message="  odd {message} ")

        mock_client.get_database.assert_called_with("test")
        mock_client.get_database.return_value.get_collection.assert_called_with("lambdalogs")
        doc = collection.insert_one.call_args.args[0]
        assert doc["message"] == "  odd {message} "
        assert doc["request_id"] == "req-1"
        assert doc["invocation_count"] == response["invocation_count"] == 2
        assert doc["cpu_cores"] == 4
        assert doc["allocated_memory"] == 128
        assert doc["execution_deadline_millis"] == 0

    def test_custom_database_and_collection(self, holder, mock_client):
        environ = {
            "MONGODB_URL": MONGODB_URL,
            "MONGODB_DBNAME": "telemetry",
            "MONGODB_COLLNAME": "invocations",
        }
        self.run(holder, environ=environ)
        mock_client.get_database.assert_called_with("telemetry")
        mock_client.get_database.return_value.get_collection.assert_called_with("invocations")

    def test_missing_url_has_no_side_effects(self, holder, collection):
        counter = InvocationCounter()
        diagnostics = FakeDiagnostics()
        with pytest.raises(ConfigurationError):
            self.run(holder, counter=counter, diagnostics=diagnostics, environ={})
        assert counter.value == 0
        assert diagnostics.timeouts == []
        collection.insert_one.assert_not_called()

    def test_not_initialized(self):
        with pytest.raises(NotInitializedError):
            self.run(ClientHolder())

    def test_diagnostic_failure_writes_nothing(self, holder, collection):
        diagnostics = FakeDiagnostics(error=CommandExecutionError("exit 1"))
        with pytest.raises(CommandExecutionError):
            self.run(holder, diagnostics=diagnostics)
        collection.insert_one.assert_not_called()

    def test_persistence_failure(self, holder, collection):
        collection.insert_one.side_effect = AutoReconnect("reset")
        with pytest.raises(PersistenceError):
            self.run(holder)

    def test_deadline_bounds_diagnostics(self, holder):
        diagnostics = FakeDiagnostics()
        deadline = int(time.time() * 1000) + 5000
        self.run(holder, diagnostics=diagnostics, deadline=deadline)
        assert 0 < diagnostics.timeouts[0] <= 5

    def test_expired_deadline_skips_work(self, holder, collection):
        diagnostics = FakeDiagnostics()
        with pytest.raises(DeadlineExceededError):
            self.run(holder, diagnostics=diagnostics, deadline=1)
        assert diagnostics.timeouts == []
        collection.insert_one.assert_not_called()

    def test_uses_process_wide_holder_by_default(self, mock_client, collection):
        holder = ClientHolder()
        holder.get_or_init(MONGODB_URL, factory=lambda url: mock_client)
        with patch("lambdalogs.connection.MONGODB_CLIENT", holder):
            process_work("m", "r", 1, 0, environ={"MONGODB_URL": MONGODB_URL},
                         counter=InvocationCounter(), diagnostics=FakeDiagnostics())
        collection.insert_one.assert_called_once()
