"""sqlite persistence for scenarios owned by authenticated users."""

from __future__ import annotations

import json
import os
import sqlite3
import uuid
from typing import Any, Dict, List

from wealth_planner.schemas.projection import InvestmentInputs
from wealth_planner.schemas.scenario import utc_timestamp


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _serialize(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "inputs": json.loads(row["inputs"]),
        "createdAt": row["created_at"],
    }


def init_db(db_path: str) -> None:
    folder = os.path.dirname(db_path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            create table if not exists scenarios (
                seq integer primary key autoincrement,
                id text not null unique,
                user_id text not null,
                name text not null,
                inputs text not null,
                created_at text not null
            )
            """
        )
        conn.execute(
            "create index if not exists scenarios_user_id on scenarios (user_id, seq)"
        )
        conn.commit()
    finally:
        conn.close()


def list_scenarios(db_path: str, user_id: str) -> List[Dict[str, Any]]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            """
            select id, name, inputs, created_at
            from scenarios
            where user_id = ?
            order by seq desc
            """,
            (user_id,),
        ).fetchall()
        return [_serialize(row) for row in rows]
    finally:
        conn.close()


def create_scenario(
    db_path: str, user_id: str, name: str, inputs: InvestmentInputs
) -> Dict[str, Any]:
    record = {
        "id": uuid.uuid4().hex,
        "name": name,
        "inputs": inputs.model_dump(mode="json"),
        "createdAt": utc_timestamp(),
    }
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            insert into scenarios (id, user_id, name, inputs, created_at)
            values (?, ?, ?, ?, ?)
            """,
            (
                record["id"],
                user_id,
                record["name"],
                json.dumps(record["inputs"]),
                record["createdAt"],
            ),
        )
        conn.commit()
    finally:
        conn.close()
    return record


def delete_scenario(db_path: str, user_id: str, scenario_id: str) -> bool:
    """Delete one of the user's scenarios; False when nothing matched."""
    conn = _connect(db_path)
    try:
        cursor = conn.execute(
            "delete from scenarios where id = ? and user_id = ?",
            (scenario_id, user_id),
        )
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()
