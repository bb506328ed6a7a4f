"""Check that the live database has the tables and columns the models expect."""

import logging

from sqlalchemy import Column, Engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Dialects report the same type under different names
type_mapping = {
    "datetime": ["datetime", "timestamp"],
    "integer": ["int", "integer", "int4", "serial"],
    "string": ["string", "varchar", "text"],
}


def normalize_type(type_name: str) -> str:
    for base_type, variants in type_mapping.items():
        if any(variant in type_name for variant in variants):
            return base_type
    return type_name


def check_column(column: Column, db_columns: dict[str, dict], tables: list[str], engine: Engine) -> bool:
    """Check a single model column against the reflected table. Returns True if there are errors."""
    table = column.table.name
    if column.key not in db_columns:
        logger.error("Table %s declares column %s which does not exist in database %s", table, column.key, engine.url)
        return True

    errors = False
    db_column = db_columns[column.key]
    if normalize_type(str(column.type).lower()) != normalize_type(str(db_column["type"]).lower()):
        logger.error(
            "Table %s column %s has type %s but database has type %s", table, column.key, column.type, db_column["type"]
        )
        errors = True

    for fk in column.foreign_keys:
        if fk.column.table.name not in tables:
            logger.error(
                "Table %s declares foreign key %s to table %s which does not exist in database %s",
                table,
                column.key,
                fk.column.table.name,
                engine.url,
            )
            errors = True

    # Primary keys are reported as nullable by some dialects
    if not column.primary_key and column.nullable != db_column["nullable"]:
        logger.error(
            "Table %s declares column %s with nullable=%s but database has nullable=%s",
            table,
            column.key,
            column.nullable,
            db_column["nullable"],
        )
        errors = True
    return errors


def is_sane_database(base_cls: type[DeclarativeBase], engine: Engine) -> bool:
    """Check whether the current database matches the tables declared in the model base.

    Checks that every table exists with every column, that column types and nullability match, and that foreign keys
    point at existing tables.

    Args:
        base_cls: The SQLAlchemy declarative base class containing the models to check.
        engine: A synchronous engine connected to the database.

    Returns:
        True if the database matches the models.

    Raises:
        TypeError: If the provided engine is an AsyncEngine instead of a synchronous Engine.
    """
    if isinstance(engine, AsyncEngine):
        raise TypeError("The engine must be a synchronous SQLAlchemy Engine, not an AsyncEngine.")

    # If this doesn't work, all queries will fail later anyway, so we don't suppress errors raised here.
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    inspector = inspect(engine)
    tables = inspector.get_table_names()
    errors = False

    for table in base_cls.metadata.sorted_tables:
        logger.debug("Checking table %s", table.name)
        if table.name not in tables:
            logger.error("Model declares table %s which does not exist in database %s", table.name, engine.url)
            errors = True
            continue
        try:
            db_columns = {c["name"]: c for c in inspector.get_columns(table.name)}
        except SQLAlchemyError as e:
            logger.error("Error inspecting table %s: %s", table.name, e)
            errors = True
            continue
        for column in table.columns:
            if check_column(column, db_columns, tables, engine):
                errors = True

    return not errors
