from __future__ import annotations

from dataclasses import dataclass, field
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

# Columns the scheduling services query directly; a database missing any of
# them predates the current migrations.
REQUIRED_COLUMNS: dict[str, set[str]] = {
    "class_sessions": {
        "id",
        "class_name",
        "section",
        "instructor_id",
        "date",
        "start_time",
        "end_time",
        "room",
        "status",
        "recurrence_id",
        "notifications_sent",
    },
    "schedule_templates": {
        "id",
        "recurrence_pattern",
        "recurrence_days",
        "start_time",
        "end_time",
        "duration",
        "generated_session_ids",
        "last_applied",
    },
    "exams": {"id", "class_name", "section", "date", "start_time", "end_time", "room", "status"},
    "notifications": {"id", "recipient_class", "session_id", "event"},
}


@dataclass
class SchemaReport:
    missing_tables: list[str] = field(default_factory=list)
    missing_columns: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.missing_tables and not self.missing_columns


def inspect_schema(connection: Connection) -> SchemaReport:
    inspector = inspect(connection)
    present = set(inspector.get_table_names())
    report = SchemaReport()
    for table_name in sorted(REQUIRED_COLUMNS):
        if table_name not in present:
            report.missing_tables.append(table_name)
            continue
        columns = {column["name"] for column in inspector.get_columns(table_name)}
        absent = sorted(REQUIRED_COLUMNS[table_name] - columns)
        if absent:
            report.missing_columns[table_name] = absent
    return report


def ensure_runtime_schema_compatibility() -> None:
    """Create scheduling tables on an empty database; warn about stale ones."""
    with engine.begin() as connection:
        report = inspect_schema(connection)
        if report.missing_tables:
            logger.info("Creating missing tables: %s", ", ".join(report.missing_tables))
            Base.metadata.create_all(bind=connection)
            return
        for table_name, absent in report.missing_columns.items():
            logger.warning(
                "Table %s lacks columns %s; run `alembic -c database/alembic.ini upgrade head`",
                table_name,
                ", ".join(absent),
            )
