"""
Configuration loading for the syslog router.

Server and database settings are read from YAML files; a few server
settings can be overridden through SYSLOG_* environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml
from sqlalchemy.engine import URL, make_url

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

RULES_FILE_NAME = 'syslog.rules'
VALID_MODES = ('tcp', 'udp')


class ConfigError(Exception):
    """Configuration could not be read, parsed or validated"""


@dataclass(frozen=True)
class ServerConfig:
    port: int = 514
    mode: str = 'udp'
    rules_dir: str = 'rules'
    host: str = '0.0.0.0'
    log_file: str = 'syslog.log'
    send_addr: str = ''
    send_port: int = 514
    forward_remote: bool = False
    max_concurrency: Optional[int] = None
    read_timeout: Optional[float] = None

    @property
    def rules_file(self) -> str:
        return os.path.join(self.rules_dir, RULES_FILE_NAME)


@dataclass(frozen=True)
class DatabaseConfig:
    addr: str = 'localhost'
    port: int = 3306
    user: str = ''
    password: str = ''
    database: str = ''
    enable: bool = False
    driver: str = 'mysql+pymysql'
    url: Optional[str] = None
    create_table: bool = True

    def sqlalchemy_url(self) -> URL:
        """Build the engine URL; an explicit `url` wins over the individual fields"""
        if self.url:
            return make_url(self.url)
        return URL.create(
            drivername=self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.addr or None,
            port=self.port,
            database=self.database or None,
        )


def parse_bool(value: Any) -> bool:
    """YAML may hand us a bool or a string such as "True"; both are accepted"""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == 'true'


def read_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML mapping from path. Raises ConfigError on any failure."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"failed to parse config file {path}: expected a mapping")
    return data


def _optional(value: Any, convert: Any, name: str) -> Any:
    if value is None or value == '':
        return None
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value for {name}: {value!r}") from e


def _required(value: Any, convert: Any, name: str) -> Any:
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value for {name}: {value!r}") from e


def build_server_config(data: Mapping[str, Any],
                        environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build a ServerConfig from parsed YAML, applying environment overrides"""
    env = os.environ if environ is None else environ
    defaults = ServerConfig()

    port = env.get('SYSLOG_PORT', data.get('port', defaults.port))
    mode = env.get('SYSLOG_MODE', data.get('mod', defaults.mode))

    return ServerConfig(
        port=_required(port, int, 'port'),
        mode=str(mode).strip().lower(),
        rules_dir=env.get('SYSLOG_RULES_DIR', data.get('rulesdir', defaults.rules_dir)),
        host=env.get('SYSLOG_HOST', data.get('host', defaults.host)),
        log_file=env.get('SYSLOG_LOG_FILE', data.get('logfile', defaults.log_file)),
        send_addr=str(data.get('sendaddr') or ''),
        send_port=_required(data.get('sendport', defaults.send_port), int, 'sendport'),
        forward_remote=parse_bool(data.get('forward_remote', False)),
        max_concurrency=_optional(data.get('max_concurrency'), int, 'max_concurrency'),
        read_timeout=_optional(data.get('read_timeout'), float, 'read_timeout'),
    )


def build_database_config(data: Mapping[str, Any]) -> DatabaseConfig:
    defaults = DatabaseConfig()
    return DatabaseConfig(
        addr=str(data.get('myaddr') or defaults.addr),
        port=_required(data.get('myport', defaults.port), int, 'myport'),
        user=str(data.get('myuser') or ''),
        password=str(data.get('mypasswd') or ''),
        database=str(data.get('mydatabase') or ''),
        enable=parse_bool(data.get('enable', False)),
        driver=str(data.get('driver') or defaults.driver),
        url=str(data['url']) if data.get('url') else None,
        create_table=parse_bool(data.get('create_table', True)),
    )


def load_server_config(path: str) -> ServerConfig:
    config = build_server_config(read_yaml(path))
    logger.info(f"Loaded server config from {path} (mode: {config.mode}, port: {config.port})")
    return config


def load_database_config(path: str) -> DatabaseConfig:
    config = build_database_config(read_yaml(path))
    if config.enable:
        logger.info(f"Database write is enabled ({config.driver} at {config.addr}:{config.port})")
    else:
        logger.info("Database write is disabled.")
    return config
