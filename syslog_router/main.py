#!/usr/bin/env python3
"""
Syslog Router - Main Entry Point
Receives syslog messages over TCP or UDP, classifies them against the
rule set in <rulesdir>/syslog.rules and writes the result to the local
log and, when enabled, to the database.
"""

import argparse
import logging
import sys
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .classifier import Classifier
from .config import ConfigError, load_database_config, load_server_config
from .database_writer import DatabaseWriter
from .dispatcher import MessageDispatcher
from .local_writer import LocalLogWriter
from .remote_forwarder import RemoteForwarder
from .rule_loader import LoadError, RuleLoader
from .server import create_receiver

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Rule-based syslog classifier and router')
    parser.add_argument('--config', default='config.yaml',
                        help='Path to the configuration file')
    parser.add_argument('--dbconfig', default='db.yaml',
                        help='Path to the database configuration file')
    return parser.parse_args(argv)


def _abort(database_writer: Optional[DatabaseWriter]) -> int:
    if database_writer:
        database_writer.close()
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    database_writer: Optional[DatabaseWriter] = None

    logger.info("Starting Syslog Router")

    try:
        config = load_server_config(args.config)
        db_config = load_database_config(args.dbconfig)

        rules = RuleLoader.load(config.rules_file)

        if db_config.enable:
            database_writer = DatabaseWriter.from_config(db_config)
            database_writer.ping()

        dispatcher = MessageDispatcher(
            classifier=Classifier(rules),
            local_writer=LocalLogWriter(config.log_file),
            database_writer=database_writer,
            forwarder=RemoteForwarder(config.send_addr, config.send_port),
            forward_remote=config.forward_remote,
        )

        receiver = create_receiver(config, dispatcher)
    except ConfigError as e:
        logger.critical(f"Invalid configuration: {e}")
        return _abort(database_writer)
    except LoadError as e:
        logger.critical(f"Failed to load rules: {e}")
        return _abort(database_writer)
    except SQLAlchemyError as e:
        logger.critical(f"Failed to connect to database: {e}")
        return _abort(database_writer)
    except ImportError as e:
        logger.critical(f"Database driver is not installed: {e}")
        return _abort(database_writer)
    except OSError as e:
        logger.critical(f"Failed to prepare local log {config.log_file}: {e}")
        return _abort(database_writer)

    try:
        receiver.bind()
    except OSError as e:
        logger.critical(f"Failed to listen on {config.mode.upper()} port {config.port}: {e}")
        return _abort(database_writer)

    try:
        receiver.start()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        receiver.stop()
    finally:
        if database_writer:
            database_writer.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
