"""
Example 01: Basic Table Usage

This example declares a prefixed table and reads, writes and counts rows
through it using logical field names only.
"""

import sqlite3
import tempfile

from row_orm import MATCH_ALL, ConnectionConfig, FieldType, SQLStore, StoreConfig, Table


class UserTable(Table):
    name = "users"
    field_prefix = "user_"
    fields = {
        "id": FieldType.ID,
        "name": FieldType.STR,
        "email": FieldType.STR,
        "active": FieldType.BOOL,
        "roles": FieldType.ARRAY,
    }
    defaults = {"active": True, "roles": []}


def main():
    # Create a temporary database with prefixed column names
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            user_id INTEGER PRIMARY KEY,
            user_name TEXT NOT NULL,
            user_email TEXT NOT NULL,
            user_active INTEGER DEFAULT 1,
            user_roles TEXT
        )
    """)
    conn.commit()
    conn.close()

    store = SQLStore.from_config(StoreConfig(primary=ConnectionConfig(driver="sqlite", database=db_path)))
    users = UserTable(store)

    print("=== Basic Table Usage ===\n")

    # Rows are created with logical names and saved through the table
    for name, active in (("Alice", True), ("Bob", True), ("Charlie", False)):
        row = users.new_row({"name": name, "email": f"{name.lower()}@example.com", "active": active}, load_defaults=True)
        row.save()
        print(f"Inserted {name} with id {row.get_id()}")

    # One field collapses to a list, two fields to a dict
    print(f"\nNames: {users.select_fields('name', options={'ORDER BY': 'name'})}")
    print(f"Id → email: {users.select_fields(['id', 'email'])}")

    # Positional conditions carry raw fragments; the first token is a field name
    b_names = users.select_fields("name", {0: "name LIKE 'B%'"})
    print(f"Names starting with B: {b_names}")

    # select_row returns None when nothing matches
    alice = users.select_row(conditions={"name": "Alice"})
    print(f"\nAlice: {alice}")
    print(f"Missing: {users.select_row(conditions={'name': 'Zed'})}")

    # Update and count
    users.update({"roles": ["admin"]}, {"id": alice.get_id()})
    print(f"\nAlice roles: {users.select_fields_row('roles', {'id': alice.get_id()})}")
    print(f"Active users: {users.count({'active': True})}")

    # Deleting every row needs the explicit marker
    users.delete(MATCH_ALL)
    print(f"Rows after delete: {users.count()}")

    store.close()


if __name__ == "__main__":
    main()
