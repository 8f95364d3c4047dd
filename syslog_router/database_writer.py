import logging
import threading
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import DatabaseConfig
from .local_writer import TIMESTAMP_FORMAT

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

metadata = MetaData()

syslog_table = Table(
    'syslog',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('currentTime', String(19), nullable=False),
    Column('level', String(64), nullable=False),
    Column('message', Text, nullable=False),
)


class DatabaseWriter:
    """
    Insert classified messages into the `syslog` table.
    All inserts share one engine and are serialized by a single lock.
    """

    def __init__(self,
                 url: Optional[Any] = None,
                 engine: Optional[Engine] = None,
                 create_table: bool = True) -> None:
        """
        Initialize the database writer.

        Args:
            url: SQLAlchemy URL (string or URL object), used when no engine is given
            engine: Pre-built engine to share
            create_table: Create the syslog table if it does not exist
        """
        owns_engine = engine is None
        if engine is None:
            if url is None:
                raise ValueError("DatabaseWriter needs either a url or an engine")
            engine = create_engine(url)
        self.engine: Engine = engine
        self.lock: threading.Lock = threading.Lock()

        if create_table:
            try:
                metadata.create_all(self.engine, checkfirst=True)
            except SQLAlchemyError:
                if owns_engine:
                    self.engine.dispose()
                raise

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> 'DatabaseWriter':
        return cls(url=config.sqlalchemy_url(), create_table=config.create_table)

    def ping(self) -> None:
        """Check the database is reachable. Raises SQLAlchemyError if not."""
        with self.engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        logger.info("Successfully connected to database")

    def write(self, message: str, level: str) -> bool:
        """
        Insert one row. Thread-safe: the lock covers only the insert.
        Returns False if the insert failed.
        """
        current_time = datetime.now().strftime(TIMESTAMP_FORMAT)
        statement = syslog_table.insert().values(
            currentTime=current_time, level=level, message=message
        )

        with self.lock:
            try:
                with self.engine.begin() as conn:
                    conn.execute(statement)
            except SQLAlchemyError as e:
                logger.error(f"Failed to insert data into database: {e}")
                return False

        return True

    def close(self) -> None:
        """Release pooled connections"""
        self.engine.dispose()

    def __enter__(self) -> 'DatabaseWriter':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False
