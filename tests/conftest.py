"""Pytest configuration and shared fixtures for test suite"""

import json
import os
import tempfile
import threading
import time
from typing import Any, Callable, Dict, Generator, List, Tuple

import pytest

from syslog_router.classifier import Classifier
from syslog_router.database_writer import DatabaseWriter
from syslog_router.dispatcher import MessageDispatcher
from syslog_router.local_writer import LocalLogWriter
from syslog_router.rule_loader import LogicEntry
from syslog_router.tcp_syslog_receiver import TCPSyslogReceiver
from syslog_router.udp_syslog_receiver import UDPSyslogReceiver


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests requiring network")
    config.addinivalue_line("markers", "scenario: Real-world scenario and performance tests")
    config.addinivalue_line("markers", "slow: Tests that take longer than 1 second")


@pytest.fixture
def temp_log_dir() -> Generator[str, None, None]:
    """Create temporary directory for log and rule files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def write_rules(temp_log_dir: str) -> Callable[[str, List[Dict[str, Any]]], str]:
    """Write a rule document below the temporary directory and return its path"""
    def _write(relative_path: str, logic: List[Dict[str, Any]]) -> str:
        path = os.path.join(temp_log_dir, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({'logic': logic}, f)
        return path
    return _write


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout expires"""
    def _wait(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.02) -> bool:
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()
    return _wait


@pytest.fixture
def sample_rules() -> List[LogicEntry]:
    """Small rule set covering wildcard, substitution and default rules"""
    return [
        LogicEntry(condition='$0==ERR*', message='err: $0', level='error'),
        LogicEntry(condition='$1==sshd*', message='auth event on $0: $2 $3', level='warning'),
        LogicEntry(condition='$0==???', message='short code $0', level='notice'),
        LogicEntry(condition='default', message='$0', level='info'),
    ]


@pytest.fixture
def local_log_path(temp_log_dir: str) -> str:
    return os.path.join(temp_log_dir, 'syslog.log')


@pytest.fixture
def local_writer(local_log_path: str) -> LocalLogWriter:
    """Create LocalLogWriter writing into the temporary directory"""
    return LocalLogWriter(local_log_path)


@pytest.fixture
def database_writer(temp_log_dir: str) -> Generator[DatabaseWriter, None, None]:
    """Create DatabaseWriter backed by a SQLite file in the temporary directory"""
    writer = DatabaseWriter(url=f"sqlite:///{os.path.join(temp_log_dir, 'syslog.db')}")
    yield writer
    writer.close()


@pytest.fixture
def dispatcher(sample_rules: List[LogicEntry], local_writer: LocalLogWriter,
               database_writer: DatabaseWriter) -> MessageDispatcher:
    """Dispatcher wired to the local and database sinks"""
    return MessageDispatcher(
        classifier=Classifier(sample_rules),
        local_writer=local_writer,
        database_writer=database_writer,
    )


@pytest.fixture
def udp_receiver_with_port(
    dispatcher: MessageDispatcher
) -> Generator[Tuple[UDPSyslogReceiver, int], None, None]:
    """Create UDP receiver bound to a free port"""
    receiver = UDPSyslogReceiver(host='127.0.0.1', port=0, dispatcher=dispatcher)
    receiver.bind()

    # Start receiver in background thread
    thread = threading.Thread(target=receiver.start, daemon=True)
    thread.start()

    yield receiver, receiver.port

    receiver.stop()
    thread.join(timeout=3)


@pytest.fixture
def tcp_receiver_with_port(
    dispatcher: MessageDispatcher
) -> Generator[Tuple[TCPSyslogReceiver, int], None, None]:
    """Create TCP receiver bound to a free port"""
    receiver = TCPSyslogReceiver(host='127.0.0.1', port=0, dispatcher=dispatcher)
    receiver.bind()

    thread = threading.Thread(target=receiver.start, daemon=True)
    thread.start()

    yield receiver, receiver.port

    receiver.stop()
    thread.join(timeout=3)


@pytest.fixture
def real_world_log_samples() -> dict:
    """Real-world log lines as plain whitespace-separated text"""
    return {
        'kernel_error': 'ERROR101 kernel: Out of memory: Kill process 12345',
        'ssh_login': 'server1 sshd[12345]: Accepted publickey for admin from 192.168.1.50',
        'short_code': 'OOM triggered on db01',
        'nginx_access': 'web01 nginx: 192.168.1.100 - - "GET /api/v1/users HTTP/1.1" 200 1234',
        'cron_job': 'server1 CRON[12345]: (root) CMD (/usr/local/bin/backup.sh)',
    }
