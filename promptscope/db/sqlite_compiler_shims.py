"""SQLite compilation shim for PostgreSQL JSONB.

Lets ``Base.metadata.create_all()`` run against the in-memory SQLite engine
used by the test suite. JSONB operators are not emulated; SQLite stores the
value as plain JSON text.

Usage: Imported for side-effects by promptscope.db.models.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    return "JSON"
