"""
Syslog Router Application Package

Receives syslog messages over TCP or UDP, classifies them against an
ordered, include-aware rule set and routes the result to a local log,
a relational database and optionally a remote collector.
"""

from .classifier import ClassificationResult, Classifier, classify, tokenize
from .condition_evaluator import evaluate
from .config import ConfigError, DatabaseConfig, ServerConfig
from .database_writer import DatabaseWriter
from .dispatcher import MessageDispatcher
from .local_writer import LocalLogWriter
from .remote_forwarder import RemoteForwarder
from .rule_loader import IncludeCycleError, LoadError, LogicEntry, RuleLoader
from .server import create_receiver
from .tcp_syslog_receiver import TCPSyslogReceiver
from .udp_syslog_receiver import UDPSyslogReceiver
from .variable_substituter import substitute
from .wildcard_matcher import WildcardMatcher

__all__ = [
    'ClassificationResult',
    'Classifier',
    'ConfigError',
    'DatabaseConfig',
    'DatabaseWriter',
    'IncludeCycleError',
    'LoadError',
    'LocalLogWriter',
    'LogicEntry',
    'MessageDispatcher',
    'RemoteForwarder',
    'RuleLoader',
    'ServerConfig',
    'TCPSyslogReceiver',
    'UDPSyslogReceiver',
    'WildcardMatcher',
    'classify',
    'create_receiver',
    'evaluate',
    'substitute',
    'tokenize',
]

__version__ = '1.0.0'
