"""Unit tests for MessageDispatcher"""

from typing import List, Tuple

from sqlalchemy import select

from syslog_router.classifier import ClassificationResult, Classifier
from syslog_router.database_writer import syslog_table
from syslog_router.dispatcher import MessageDispatcher


class RecordingSink:
    """Test double that records writes, optionally failing every call"""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Tuple[str, str]] = []

    def write(self, message: str, level: str) -> bool:
        self.calls.append((message, level))
        return not self.fail

    def forward(self, message: str, level: str) -> bool:
        return self.write(message, level)


class TestMessageDispatcher:
    """Tests for the classify-then-fan-out pipeline"""

    def test_dispatch_classifies_and_writes_all_sinks(self, sample_rules):
        """Test that the result reaches both default sinks"""
        local, database = RecordingSink(), RecordingSink()
        dispatcher = MessageDispatcher(Classifier(sample_rules), local, database)

        result = dispatcher.dispatch('ERROR101 failed')

        assert result == ClassificationResult(message='err: ERROR101', level='error')
        assert local.calls == [('err: ERROR101', 'error')]
        assert database.calls == [('err: ERROR101', 'error')]

    def test_database_is_optional(self, sample_rules):
        """Test dispatch with only the local sink"""
        local = RecordingSink()
        dispatcher = MessageDispatcher(Classifier(sample_rules), local)

        dispatcher.dispatch('OK done')

        assert local.calls == [('OK', 'info')]

    def test_failing_sink_does_not_block_others(self, sample_rules):
        """Test that sinks are independent"""
        local, database = RecordingSink(fail=True), RecordingSink()
        dispatcher = MessageDispatcher(Classifier(sample_rules), local, database)

        dispatcher.dispatch('OK done')

        assert database.calls == [('OK', 'info')]

    def test_forwarder_not_used_by_default(self, sample_rules):
        """Test that remote forwarding is available but off by default"""
        forwarder = RecordingSink()
        dispatcher = MessageDispatcher(Classifier(sample_rules), RecordingSink(), forwarder=forwarder)

        dispatcher.dispatch('OK done')

        assert forwarder.calls == []

    def test_forwarder_used_when_enabled(self, sample_rules):
        """Test that forwarding can be switched on"""
        forwarder = RecordingSink()
        dispatcher = MessageDispatcher(
            Classifier(sample_rules), RecordingSink(), forwarder=forwarder, forward_remote=True
        )

        dispatcher.dispatch('OK done')

        assert forwarder.calls == [('OK', 'info')]

    def test_empty_message_falls_back(self):
        """Test that an empty message yields the default result"""
        local = RecordingSink()
        dispatcher = MessageDispatcher(Classifier([]), local)

        assert dispatcher.dispatch('') == ClassificationResult(message='', level='info')
        assert local.calls == [('', 'info')]

    def test_dispatch_with_real_sinks(self, dispatcher, local_log_path, database_writer):
        """Test the pipeline with the file and SQLite sinks"""
        dispatcher.dispatch('server1 sshd[1]: Accepted publickey')

        with open(local_log_path, 'r', encoding='utf-8') as f:
            line = f.readline()
        assert line.endswith(' - warning - syslog: auth event on server1: Accepted publickey\n')

        with database_writer.engine.connect() as conn:
            rows = conn.execute(select(syslog_table.c.level, syslog_table.c.message)).all()
        assert [tuple(row) for row in rows] == [('warning', 'auth event on server1: Accepted publickey')]
