# paintwall/db/engine.py

from typing import Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from paintwall.core.config import get_settings

_engines: Dict[str, Engine] = {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    url = get_settings().database_url
    engine = _engines.get(url)
    if engine is None:
        # echo=True if you want to see SQL printed in the terminal
        engine = create_engine(url, future=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        _engines[url] = engine
    return engine


def reset_engines() -> None:
    """Dispose every cached engine; the next get_engine() call reconnects."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
