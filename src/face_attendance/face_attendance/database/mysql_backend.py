from __future__ import annotations

import json
import logging
from contextlib import contextmanager

from ..core.exceptions import CorruptStateError
from .codec import decode_state, encode_state
from .connection import DatabaseConnection
from .state import AttendanceState

logger = logging.getLogger(__name__)


class MySQLBackend:
    """Stores state in the ``identities`` and ``events`` tables.

    Signatures are kept as JSON text; ``seq`` preserves insertion order.
    A save rewrites both tables inside a single transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def _cursor(self):
        conn = self._conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def load(self) -> AttendanceState:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT identity_id, display_name, external_code, signature, enrolled_at
                FROM identities
                ORDER BY seq ASC
                """
            )
            identity_rows = list(cur.fetchall() or [])
            cur.execute(
                """
                SELECT event_id, identity_id, identity_name, timestamp
                FROM events
                ORDER BY seq ASC
                """
            )
            event_rows = list(cur.fetchall() or [])

        identities: dict[str, dict] = {}
        for r in identity_rows:
            try:
                signature = json.loads(r["signature"])
            except (TypeError, ValueError) as e:
                raise CorruptStateError(f"identity {r['identity_id']!r}: signature is not valid JSON") from e
            identities[r["identity_id"]] = {
                "display_name": r["display_name"],
                "external_code": r["external_code"],
                "signature": signature,
                "enrolled_at": r["enrolled_at"],
            }

        events = {
            r["event_id"]: {
                "identity_id": r["identity_id"],
                "identity_name": r["identity_name"],
                "timestamp": r["timestamp"],
            }
            for r in event_rows
        }

        try:
            return decode_state(identities, events)
        except CorruptStateError as e:
            logger.error("Corrupt rows in MySQL store: %s", e)
            raise

    def save(self, state: AttendanceState) -> None:
        identities, events = encode_state(state)

        with self._cursor() as cur:
            cur.execute("DELETE FROM events")
            cur.execute("DELETE FROM identities")
            if identities:
                cur.executemany(
                    """
                    INSERT INTO identities(identity_id, seq, display_name, external_code, signature, enrolled_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            identity_id,
                            seq,
                            r["display_name"],
                            r["external_code"],
                            json.dumps(r["signature"]),
                            r["enrolled_at"],
                        )
                        for seq, (identity_id, r) in enumerate(identities.items())
                    ],
                )
            if events:
                cur.executemany(
                    """
                    INSERT INTO events(event_id, seq, identity_id, identity_name, timestamp)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [
                        (event_id, seq, r["identity_id"], r["identity_name"], r["timestamp"])
                        for seq, (event_id, r) in enumerate(events.items())
                    ],
                )
