from typing import Any, Dict, List, Optional, Tuple

# Datastore proxy
# Services call these names; each delegates to datastore_pg at call time so
# the PostgreSQL functions can be swapped for in-memory ones in tests.

from . import datastore_pg as _pg

COMPETITION_LEDGER = "user_competitions"
EDITION_LEDGER = "user_editions"


def find_competition(competition_id: str) -> Optional[Dict[str, Any]]:
    return _pg.find_competition(competition_id)


def find_edition(edition_id: str) -> Optional[Dict[str, Any]]:
    return _pg.find_edition(edition_id)


def find_edition_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    return _pg.find_edition_by_slug(slug)


def find_edition_by_year(competition_id: str, year: int) -> Optional[Dict[str, Any]]:
    return _pg.find_edition_by_year(competition_id, year)


def list_competition_editions(competition_id: str, descending: bool = True) -> List[Dict[str, Any]]:
    return _pg.list_competition_editions(competition_id, descending=descending)


def list_edition_years(competition_id: str) -> List[int]:
    return _pg.list_edition_years(competition_id)


def create_edition(competition_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return _pg.create_edition(competition_id, fields)


def create_editions_bulk(competition_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return _pg.create_editions_bulk(competition_id, rows)


def upsert_ledger(table: str, user_id: str, target_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return _pg.upsert_ledger(table, user_id, target_id, fields)


def update_ledger(table: str, user_id: str, target_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _pg.update_ledger(table, user_id, target_id, fields)


def get_ledger(table: str, user_id: str, target_id: str) -> Optional[Dict[str, Any]]:
    return _pg.get_ledger(table, user_id, target_id)


def delete_ledger(table: str, user_id: str, target_id: str) -> bool:
    return _pg.delete_ledger(table, user_id, target_id)


def list_user_competitions(user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    return _pg.list_user_competitions(user_id, status=status)


def list_user_ledger(user_id: str) -> List[Dict[str, Any]]:
    return _pg.list_user_ledger(user_id)


def list_completed_ledger() -> List[Dict[str, Any]]:
    return _pg.list_completed_ledger()


def list_users(user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    return _pg.list_users(user_ids)


def rank_users_by_completed(limit: int, offset: int = 0) -> List[Tuple[Dict[str, Any], int]]:
    return _pg.rank_users_by_completed(limit, offset=offset)
