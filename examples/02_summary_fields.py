"""
Example 02: Summary Fields and Read Replicas

This example keeps a denormalized member count on each team. Reads
normally go to the replica; update_summary_fields() recomputes the counts
while every read in the batch hits the primary.
"""

import logging
import sqlite3
import tempfile

from row_orm import ConnectionConfig, FieldType, ReadMode, Row, SQLStore, StoreConfig, Table, configure

SCHEMA = (
    "CREATE TABLE teams (team_id INTEGER PRIMARY KEY, team_name TEXT, team_member_count INTEGER DEFAULT 0)",
    "CREATE TABLE members (member_id INTEGER PRIMARY KEY, member_team_id INTEGER, member_name TEXT)",
)


class MemberTable(Table):
    name = "members"
    field_prefix = "member_"
    fields = {"id": FieldType.ID, "team_id": FieldType.INT, "name": FieldType.STR}


class TeamRow(Row):
    def compute_summary_field(self, name):
        return MemberTable.singleton().count({"team_id": self.get_id()})


class TeamTable(Table):
    name = "teams"
    field_prefix = "team_"
    fields = {"id": FieldType.ID, "name": FieldType.STR, "member_count": FieldType.INT}
    summary_fields = ("member_count",)
    row_class = TeamRow


def _create_db():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_file.close()
    conn = sqlite3.connect(db_file.name)
    for ddl in SCHEMA:
        conn.execute(ddl)
    conn.commit()
    conn.close()
    return db_file.name


def main():
    logging.basicConfig(level=logging.INFO)

    # Two separate files stand in for a primary and a replica that lags behind
    config = StoreConfig(
        primary=ConnectionConfig(driver="sqlite", database=_create_db()),
        replica=ConnectionConfig(driver="sqlite", database=_create_db()),
    )
    store = SQLStore.from_config(config)
    configure(store)

    teams = TeamTable.singleton()
    members = MemberTable.singleton()

    print("=== Summary Fields ===\n")

    team_id = teams.insert({"name": "platform"})
    for name in ("ana", "ben", "cy"):
        members.insert({"team_id": team_id, "name": name})

    print(f"Members seen on the replica: {members.count()}")
    print(f"Members seen on the primary: {members.count(read_mode=ReadMode.PRIMARY)}")

    saved = teams.update_summary_fields()
    print(f"\nRecomputed {saved} team(s)")
    print(f"Counts on primary: {teams.select_fields(['name', 'member_count'], read_mode=ReadMode.PRIMARY)}")
    print(f"Reads are back on: {teams.get_read_mode().value}")

    store.close()


if __name__ == "__main__":
    main()
