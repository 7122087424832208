from sqlalchemy import inspect

from app.database import engine

TABLES = ["employees", "employee_actions"]


def check_schema():
    inspector = inspect(engine)
    existing = set(inspector.get_table_names())

    print(f"--- Checking Schema for {engine.url} ---")

    for table in TABLES:
        print(f"\nTable: {table}")
        if table not in existing:
            print("  Table not found. Start the API once or run scripts/seed_employees.py.")
            continue
        for column in inspector.get_columns(table):
            print(f"  - {column['name']} ({column['type']})")


if __name__ == "__main__":
    check_schema()
