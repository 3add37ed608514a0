"""
Dialect-aware INSERT for atomic upserts (ON CONFLICT DO NOTHING / DO UPDATE).
Counters are bumped in SQL, never read-modify-written in Python.
"""
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def dialect_insert(db: Session, model):
    """Return an INSERT construct for model that supports on_conflict_* on the session's dialect."""
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upserts are not supported for dialect {dialect!r}")
    return insert(model)
