"""DDL helpers shared by the versioned migrations."""

from alembic import op

UPDATED_AT_FUNCTION = "update_updated_at_column"


def create_updated_at_function() -> None:
    """Trigger function that stamps ``updated_at`` on every UPDATE."""
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION {UPDATED_AT_FUNCTION}()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """
    )


def drop_updated_at_function() -> None:
    op.execute(f"DROP FUNCTION IF EXISTS {UPDATED_AT_FUNCTION}()")


def create_updated_at_trigger(table: str) -> None:
    """Attach the BEFORE UPDATE trigger to ``table``."""
    op.execute(
        f"""
        CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION {UPDATED_AT_FUNCTION}()
        """
    )


def drop_updated_at_trigger(table: str) -> None:
    op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
