import logging
import os
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import pool as pg_pool
from psycopg2.extras import RealDictCursor, execute_values

from .errors import Conflict, NotFound

logger = logging.getLogger(__name__)

_POOL: Optional[pg_pool.AbstractConnectionPool] = None


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _connect_kwargs() -> Dict[str, Any]:
    """Connection kwargs shared by pooled and direct connections.

    connect_timeout defaults to 10s (DB_CONNECT_TIMEOUT); TCP keepalives are
    on unless DB_KEEPALIVES is 0/false, with optional IDLE/INTERVAL/COUNT.
    """
    kwargs: Dict[str, Any] = {}
    ct = _env_int("DB_CONNECT_TIMEOUT")
    kwargs["connect_timeout"] = ct if ct is not None else 10

    ka = os.environ.get("DB_KEEPALIVES")
    if ka is None:
        kwargs["keepalives"] = 1
    else:
        kwargs["keepalives"] = 0 if str(ka).lower() in ("0", "false") else 1

    for env_name, key in (
        ("DB_KEEPALIVES_IDLE", "keepalives_idle"),
        ("DB_KEEPALIVES_INTERVAL", "keepalives_interval"),
        ("DB_KEEPALIVES_COUNT", "keepalives_count"),
    ):
        val = _env_int(env_name)
        if val is not None:
            kwargs[key] = val
    return kwargs


def init_pool(minconn: int = 1, maxconn: int = 10) -> None:
    """Create the global connection pool from DATABASE_URL (idempotent)."""
    global _POOL
    if _POOL is not None:
        return
    url = os.environ.get("DATABASE_URL")
    if not url:
        return
    _POOL = pg_pool.ThreadedConnectionPool(minconn, maxconn, dsn=url, **_connect_kwargs())


def _ping(conn) -> bool:
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
        if not getattr(conn, "autocommit", False):
            conn.rollback()
        return True
    except (psycopg2.OperationalError, psycopg2.InterfaceError):
        return False


def _release(conn) -> None:
    # status 1/2/3 = active, in transaction, in error
    if getattr(conn, "closed", 0) == 0 and not getattr(conn, "autocommit", False):
        if getattr(conn, "status", 0) in (1, 2, 3):
            try:
                conn.rollback()
            except psycopg2.Error:
                pass
    _POOL.putconn(conn)


@contextmanager
def _get_conn():
    """Yield a healthy connection from the pool, or a direct one.

    A pooled connection that fails its ``SELECT 1`` ping is discarded and
    replaced once; a second failure raises OperationalError. Any exception
    raised by the caller rolls the transaction back before propagating.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL not set; configure a PostgreSQL connection string")
    if _POOL is None:
        conn = psycopg2.connect(url, **_connect_kwargs())
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return

    conn = _POOL.getconn()
    if not _ping(conn):
        _POOL.putconn(conn, close=True)
        logger.warning("Discarded stale pooled connection; retrying checkout")
        conn = _POOL.getconn()
        if not _ping(conn):
            _POOL.putconn(conn, close=True)
            raise psycopg2.OperationalError("Failed to acquire healthy DB connection after retry")
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        _release(conn)


def _num(val):
    if isinstance(val, Decimal):
        return int(val) if val == val.to_integral_value() else float(val)
    return val


def _iso(val) -> Optional[str]:
    if val is None:
        return None
    try:
        return val.isoformat()
    except AttributeError:
        return str(val)


# ---------------------------------------------------------------------------
# Events / competitions / editions
# ---------------------------------------------------------------------------

_EDITION_SELECT = """
    SELECT ed.id, ed.competition_id, ed.year, ed.slug, ed.distance, ed.elevation,
           ed.max_participants, ed.current_participants, ed.city, ed.status,
           ed.registration_status, ed.registration_open_date, ed.registration_close_date,
           ed.start_date, ed.end_date,
           c.name AS competition_name, c.slug AS competition_slug, c.type AS competition_type,
           c.status AS competition_status, c.base_distance, c.base_elevation,
           c.base_max_participants,
           e.id AS event_id, e.name AS event_name, e.slug AS event_slug,
           e.country AS event_country, e.city AS event_city
    FROM editions ed
    JOIN competitions c ON c.id = ed.competition_id
    JOIN events e ON e.id = c.event_id
"""


def _edition_fields(r: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": r.get("id"),
        "competitionId": r.get("competition_id"),
        "year": r.get("year"),
        "slug": r.get("slug"),
        "distance": _num(r.get("distance")),
        "elevation": r.get("elevation"),
        "maxParticipants": r.get("max_participants"),
        "currentParticipants": r.get("current_participants") or 0,
        "city": r.get("city"),
        "status": r.get("status"),
        "registrationStatus": r.get("registration_status"),
        "registrationOpenDate": _iso(r.get("registration_open_date")),
        "registrationCloseDate": _iso(r.get("registration_close_date")),
        "startDate": _iso(r.get("start_date")),
        "endDate": _iso(r.get("end_date")),
    }


def _nested_edition(r: Dict[str, Any]) -> Dict[str, Any]:
    """Edition with its competition and event nested (the ``/editions`` shape)."""
    out = _edition_fields(r)
    out["competition"] = {
        "id": r.get("competition_id"),
        "name": r.get("competition_name"),
        "slug": r.get("competition_slug"),
        "type": r.get("competition_type"),
        "status": r.get("competition_status"),
        "baseDistance": _num(r.get("base_distance")),
        "baseElevation": r.get("base_elevation"),
        "baseMaxParticipants": r.get("base_max_participants"),
        "event": {
            "id": r.get("event_id"),
            "name": r.get("event_name"),
            "slug": r.get("event_slug"),
            "country": r.get("event_country"),
            "city": r.get("event_city"),
        },
    }
    return out


def _flat_edition(r: Dict[str, Any]) -> Dict[str, Any]:
    """Edition with parent attributes flattened under prefixed names."""
    out = _edition_fields(r)
    out.update(
        {
            "competitionName": r.get("competition_name"),
            "competitionSlug": r.get("competition_slug"),
            "competitionType": r.get("competition_type"),
            "competitionStatus": r.get("competition_status"),
            "baseDistance": _num(r.get("base_distance")),
            "baseElevation": r.get("base_elevation"),
            "baseMaxParticipants": r.get("base_max_participants"),
            "eventId": r.get("event_id"),
            "eventName": r.get("event_name"),
            "eventSlug": r.get("event_slug"),
            "eventCountry": r.get("event_country"),
            "eventCity": r.get("event_city"),
        }
    )
    return out


def find_competition(competition_id: str) -> Optional[Dict[str, Any]]:
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            """
            SELECT c.id, c.event_id, c.name, c.slug, c.type, c.status,
                   c.base_distance, c.base_elevation, c.base_max_participants,
                   e.name AS event_name, e.city AS event_city
            FROM competitions c JOIN events e ON e.id = c.event_id
            WHERE c.id = %s
            """,
            (competition_id,),
        )
        r = cur.fetchone()
        if not r:
            return None
        return {
            "id": r["id"],
            "eventId": r.get("event_id"),
            "name": r.get("name"),
            "slug": r.get("slug"),
            "type": r.get("type"),
            "status": r.get("status"),
            "baseDistance": _num(r.get("base_distance")),
            "baseElevation": r.get("base_elevation"),
            "baseMaxParticipants": r.get("base_max_participants"),
            "event": {"id": r.get("event_id"), "name": r.get("event_name"), "city": r.get("event_city")},
        }


def find_edition(edition_id: str) -> Optional[Dict[str, Any]]:
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(_EDITION_SELECT + " WHERE ed.id = %s", (edition_id,))
        r = cur.fetchone()
        return _nested_edition(r) if r else None


def find_edition_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(_EDITION_SELECT + " WHERE ed.slug = %s", (slug,))
        r = cur.fetchone()
        return _nested_edition(r) if r else None


def find_edition_by_year(competition_id: str, year: int) -> Optional[Dict[str, Any]]:
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            _EDITION_SELECT + " WHERE ed.competition_id = %s AND ed.year = %s",
            (competition_id, int(year)),
        )
        r = cur.fetchone()
        return _nested_edition(r) if r else None


def list_competition_editions(competition_id: str, descending: bool = True) -> List[Dict[str, Any]]:
    order = "DESC" if descending else "ASC"
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            _EDITION_SELECT + f" WHERE ed.competition_id = %s ORDER BY ed.year {order}",
            (competition_id,),
        )
        return [_flat_edition(r) for r in cur.fetchall() or []]


def list_edition_years(competition_id: str) -> List[int]:
    with _get_conn() as conn, conn.cursor() as cur:
        cur.execute(
            "SELECT DISTINCT year FROM editions WHERE competition_id = %s ORDER BY year DESC",
            (competition_id,),
        )
        return [int(row[0]) for row in cur.fetchall() or []]


_EDITION_COLUMNS = {
    "year": "year",
    "slug": "slug",
    "distance": "distance",
    "elevation": "elevation",
    "maxParticipants": "max_participants",
    "currentParticipants": "current_participants",
    "city": "city",
    "status": "status",
    "registrationStatus": "registration_status",
    "registrationOpenDate": "registration_open_date",
    "registrationCloseDate": "registration_close_date",
    "startDate": "start_date",
    "endDate": "end_date",
}


def _unique_slug(cur, base: str) -> str:
    cur.execute("SELECT slug FROM editions WHERE slug = %s OR slug LIKE %s", (base, base + "-%"))
    taken = {row[0] for row in cur.fetchall() or []}
    slug, counter = base, 1
    while slug in taken:
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def create_edition(competition_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Insert one edition; the slug gets a ``-N`` suffix if already taken."""
    with _get_conn() as conn:
        with conn.cursor() as cur:
            fields = dict(fields)
            fields["slug"] = _unique_slug(cur, fields["slug"])
            keys = [k for k in _EDITION_COLUMNS if k in fields]
            cols = ", ".join(["competition_id"] + [_EDITION_COLUMNS[k] for k in keys])
            marks = ", ".join(["%s"] * (len(keys) + 1))
            try:
                cur.execute(
                    f"INSERT INTO editions ({cols}) VALUES ({marks}) RETURNING id",
                    [competition_id] + [fields[k] for k in keys],
                )
            except pg_errors.UniqueViolation as exc:
                conn.rollback()
                raise Conflict(f"Edition for year {fields.get('year')} already exists") from exc
            except pg_errors.ForeignKeyViolation as exc:
                conn.rollback()
                raise NotFound("Competition not found") from exc
            new_id = cur.fetchone()[0]
        conn.commit()
    return find_edition(new_id)


def create_editions_bulk(competition_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Insert all ``rows`` in one transaction; any collision aborts the batch."""
    if not rows:
        return []
    values = [
        (
            competition_id,
            int(r["year"]),
            r["slug"],
            r.get("status"),
            r.get("registrationStatus"),
        )
        for r in rows
    ]
    with _get_conn() as conn:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            try:
                created = execute_values(
                    cur,
                    """
                    INSERT INTO editions (competition_id, year, slug, status, registration_status)
                    VALUES %s
                    RETURNING id, competition_id, year, slug, distance, elevation, max_participants,
                              current_participants, city, status, registration_status,
                              registration_open_date, registration_close_date, start_date, end_date
                    """,
                    values,
                    fetch=True,
                )
            except pg_errors.UniqueViolation as exc:
                conn.rollback()
                raise Conflict("One or more editions already exist for the requested years") from exc
            except pg_errors.ForeignKeyViolation as exc:
                conn.rollback()
                raise NotFound("Competition not found") from exc
        conn.commit()
    out = [_edition_fields(r) for r in created or []]
    out.sort(key=lambda e: e["year"], reverse=True)
    return out


# ---------------------------------------------------------------------------
# Participation ledgers
# ---------------------------------------------------------------------------

_LEDGER_COLUMNS = {
    "status": "status",
    "finishTime": "finish_time",
    "finishTimeSeconds": "finish_time_seconds",
    "position": "position",
    "categoryPosition": "category_position",
    "notes": "notes",
    "personalRating": "personal_rating",
    "completedAt": "completed_at",
}

_EDITION_LEDGER_COLUMNS = dict(
    _LEDGER_COLUMNS,
    categoryType="category_type",
    categoryName="category_name",
    bibNumber="bib_number",
)

# table -> (target column, target key in output, column map)
_LEDGERS = {
    "user_competitions": ("competition_id", "competitionId", _LEDGER_COLUMNS),
    "user_editions": ("edition_id", "editionId", _EDITION_LEDGER_COLUMNS),
}


def _ledger_out(table: str, r: Dict[str, Any]) -> Dict[str, Any]:
    target_col, target_key, columns = _LEDGERS[table]
    out: Dict[str, Any] = {"id": r.get("id"), "userId": r.get("user_id"), target_key: r.get(target_col)}
    for key, col in columns.items():
        out[key] = r.get(col)
    out["completedAt"] = _iso(r.get("completed_at"))
    if "marked_at" in r:
        out["markedAt"] = _iso(r.get("marked_at"))
    if "created_at" in r:
        out["createdAt"] = _iso(r.get("created_at"))
    return out


def _update_ledger(cur, table: str, user_id: str, target_id: str, fields: Dict[str, Any]):
    target_col, _key, columns = _LEDGERS[table]
    keys = [k for k in columns if k in fields]
    if not keys:
        cur.execute(
            f"SELECT * FROM {table} WHERE user_id = %s AND {target_col} = %s",
            (user_id, target_id),
        )
        return cur.fetchone()
    sets = ", ".join(f"{columns[k]} = %s" for k in keys)
    cur.execute(
        f"UPDATE {table} SET {sets} WHERE user_id = %s AND {target_col} = %s RETURNING *",
        [fields[k] for k in keys] + [user_id, target_id],
    )
    return cur.fetchone()


def upsert_ledger(table: str, user_id: str, target_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Insert or update the (user, target) row in a single statement.

    Only the keys present in ``fields`` are written on update. A unique
    violation (a concurrent first insert) is retried once as an UPDATE.
    """
    target_col, _key, columns = _LEDGERS[table]
    keys = [k for k in columns if k in fields]
    cols = ["user_id", target_col] + [columns[k] for k in keys]
    marks = ", ".join(["%s"] * len(cols))
    if keys:
        sets = ", ".join(f"{columns[k]} = EXCLUDED.{columns[k]}" for k in keys)
    else:
        sets = "user_id = EXCLUDED.user_id"
    sql = (
        f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({marks}) "
        f"ON CONFLICT (user_id, {target_col}) DO UPDATE SET {sets} RETURNING *"
    )
    params = [user_id, target_id] + [fields[k] for k in keys]
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        try:
            cur.execute(sql, params)
            row = cur.fetchone()
        except pg_errors.UniqueViolation:
            conn.rollback()
            logger.warning(
                "Unique conflict inserting %s row user=%s target=%s; retrying as update",
                table, user_id, target_id,
            )
            row = _update_ledger(cur, table, user_id, target_id, fields)
            if row is None:
                raise Conflict("Participation row changed concurrently; retry the request")
        except pg_errors.ForeignKeyViolation as exc:
            conn.rollback()
            raise NotFound("User or participation target not found") from exc
        conn.commit()
    return _ledger_out(table, row)


def update_ledger(table: str, user_id: str, target_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        row = _update_ledger(cur, table, user_id, target_id, fields)
        conn.commit()
    return _ledger_out(table, row) if row else None


def get_ledger(table: str, user_id: str, target_id: str) -> Optional[Dict[str, Any]]:
    target_col = _LEDGERS[table][0]
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            f"SELECT * FROM {table} WHERE user_id = %s AND {target_col} = %s",
            (user_id, target_id),
        )
        row = cur.fetchone()
    return _ledger_out(table, row) if row else None


def delete_ledger(table: str, user_id: str, target_id: str) -> bool:
    target_col = _LEDGERS[table][0]
    with _get_conn() as conn, conn.cursor() as cur:
        cur.execute(
            f"DELETE FROM {table} WHERE user_id = %s AND {target_col} = %s",
            (user_id, target_id),
        )
        deleted = cur.rowcount or 0
        conn.commit()
    return deleted > 0


def list_user_competitions(user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """Competition ledger rows of a user, newest completion/mark first."""
    sql = """
        SELECT uc.*, c.name AS competition_name, c.slug AS competition_slug,
               c.type AS competition_type, c.base_distance, c.base_elevation,
               e.name AS event_name, e.city AS event_city, e.country AS event_country
        FROM user_competitions uc
        JOIN competitions c ON c.id = uc.competition_id
        JOIN events e ON e.id = c.event_id
        WHERE uc.user_id = %s
    """
    params: List[Any] = [user_id]
    if status:
        sql += " AND uc.status = %s"
        params.append(status)
    sql += " ORDER BY uc.completed_at DESC NULLS LAST, uc.marked_at DESC"
    out: List[Dict[str, Any]] = []
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(sql, params)
        for r in cur.fetchall() or []:
            row = _ledger_out("user_competitions", r)
            row["competition"] = {
                "id": r.get("competition_id"),
                "name": r.get("competition_name"),
                "slug": r.get("competition_slug"),
                "type": r.get("competition_type"),
                "baseDistance": _num(r.get("base_distance")),
                "baseElevation": r.get("base_elevation"),
                "event": {
                    "name": r.get("event_name"),
                    "city": r.get("event_city"),
                    "country": r.get("event_country"),
                },
            }
            out.append(row)
    return out


# Both ledgers projected onto one row shape for analytics
_LEDGER_UNION = """
    SELECT 'competition' AS scope, uc.id, uc.user_id, uc.competition_id,
           NULL::text AS edition_id, NULL::integer AS year,
           uc.status, uc.finish_time, uc.finish_time_seconds, uc.completed_at,
           NULL::numeric AS distance, NULL::integer AS elevation,
           NULL::integer AS max_participants, NULL::text AS city,
           c.name AS competition_name, c.base_distance, c.base_elevation,
           c.base_max_participants, e.id AS event_id, e.name AS event_name,
           e.city AS event_city
    FROM user_competitions uc
    JOIN competitions c ON c.id = uc.competition_id
    JOIN events e ON e.id = c.event_id
    WHERE {where_uc}
    UNION ALL
    SELECT 'edition' AS scope, ue.id, ue.user_id, ed.competition_id,
           ue.edition_id, ed.year,
           ue.status, ue.finish_time, ue.finish_time_seconds, ue.completed_at,
           ed.distance, ed.elevation, ed.max_participants, ed.city,
           c.name AS competition_name, c.base_distance, c.base_elevation,
           c.base_max_participants, e.id AS event_id, e.name AS event_name,
           e.city AS event_city
    FROM user_editions ue
    JOIN editions ed ON ed.id = ue.edition_id
    JOIN competitions c ON c.id = ed.competition_id
    JOIN events e ON e.id = c.event_id
    WHERE {where_ue}
"""


def _analytics_row(r: Dict[str, Any]) -> Dict[str, Any]:
    edition = None
    if r.get("scope") == "edition":
        edition = {
            "id": r.get("edition_id"),
            "year": r.get("year"),
            "distance": _num(r.get("distance")),
            "elevation": r.get("elevation"),
            "maxParticipants": r.get("max_participants"),
            "city": r.get("city"),
        }
    return {
        "scope": r.get("scope"),
        "id": r.get("id"),
        "userId": r.get("user_id"),
        "competitionId": r.get("competition_id"),
        "editionId": r.get("edition_id"),
        "status": r.get("status"),
        "finishTime": r.get("finish_time"),
        "finishTimeSeconds": r.get("finish_time_seconds"),
        "completedAt": _iso(r.get("completed_at")),
        "edition": edition,
        "competition": {
            "id": r.get("competition_id"),
            "name": r.get("competition_name"),
            "baseDistance": _num(r.get("base_distance")),
            "baseElevation": r.get("base_elevation"),
            "baseMaxParticipants": r.get("base_max_participants"),
        },
        "event": {"id": r.get("event_id"), "name": r.get("event_name"), "city": r.get("event_city")},
    }


def list_user_ledger(user_id: str) -> List[Dict[str, Any]]:
    """Every ledger row (competition and edition scope) of one user."""
    sql = _LEDGER_UNION.format(where_uc="uc.user_id = %s", where_ue="ue.user_id = %s")
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(sql, (user_id, user_id))
        return [_analytics_row(r) for r in cur.fetchall() or []]


def list_completed_ledger() -> List[Dict[str, Any]]:
    """All COMPLETED ledger rows across users."""
    sql = _LEDGER_UNION.format(where_uc="uc.status = 'COMPLETED'", where_ue="ue.status = 'COMPLETED'")
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(sql)
        return [_analytics_row(r) for r in cur.fetchall() or []]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def _user_out(r: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": r.get("id"),
        "username": r.get("username"),
        "firstName": r.get("first_name"),
        "lastName": r.get("last_name"),
        "country": r.get("country"),
    }


def list_users(user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    if not user_ids:
        return {}
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            "SELECT id, username, first_name, last_name, country FROM users WHERE id = ANY(%s)",
            (list(user_ids),),
        )
        return {r["id"]: _user_out(r) for r in cur.fetchall() or []}


def rank_users_by_completed(limit: int, offset: int = 0) -> List[Tuple[Dict[str, Any], int]]:
    """Return ``(user, completed_count)`` ordered by count, highest first."""
    with _get_conn() as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            """
            SELECT u.id, u.username, u.first_name, u.last_name, u.country,
                   COUNT(l.user_id) AS completed
            FROM users u
            LEFT JOIN (
                SELECT user_id FROM user_competitions WHERE status = 'COMPLETED'
                UNION ALL
                SELECT user_id FROM user_editions WHERE status = 'COMPLETED'
            ) l ON l.user_id = u.id
            GROUP BY u.id, u.username, u.first_name, u.last_name, u.country
            ORDER BY completed DESC
            LIMIT %s OFFSET %s
            """,
            (int(limit), int(offset)),
        )
        return [(_user_out(r), int(r.get("completed") or 0)) for r in cur.fetchall() or []]
