from typing import Union

from .config import VALID_MODES, ConfigError, ServerConfig
from .dispatcher import MessageDispatcher
from .tcp_syslog_receiver import TCPSyslogReceiver
from .udp_syslog_receiver import UDPSyslogReceiver

Receiver = Union[TCPSyslogReceiver, UDPSyslogReceiver]


def create_receiver(config: ServerConfig, dispatcher: MessageDispatcher) -> Receiver:
    """Build the receiver for the configured mode. Unknown modes raise ConfigError."""
    if config.mode == 'tcp':
        return TCPSyslogReceiver(
            host=config.host,
            port=config.port,
            dispatcher=dispatcher,
            max_concurrency=config.max_concurrency,
            read_timeout=config.read_timeout,
        )
    if config.mode == 'udp':
        return UDPSyslogReceiver(
            host=config.host,
            port=config.port,
            dispatcher=dispatcher,
            max_concurrency=config.max_concurrency,
        )
    raise ConfigError(
        f"Unknown mod: {config.mode}. Use {' or '.join(repr(m) for m in VALID_MODES)}."
    )
