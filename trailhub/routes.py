import os

from flask import Blueprint, jsonify, request

from . import editions as editions_service
from . import ledger
from . import ranking as ranking_service
from . import stats as stats_service
from .errors import ValidationError, register_error_handlers


bp = Blueprint('main', __name__)
register_error_handlers(bp)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


@bp.route('/health/db')
def health_db():
    """Database connectivity check; always HTTP 200 with a status body."""
    url = os.environ.get('DATABASE_URL')
    if not url:
        return {'connected': False, 'status': 'no_database_url'}
    try:
        import psycopg2  # type: ignore
        with psycopg2.connect(url, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute('SELECT current_user, current_database(), version()')
                user, db, ver = cur.fetchone()
        return {
            'connected': True,
            'status': 'ok',
            'user': user,
            'database': db,
            'server_version': (ver or '').split('\n')[0],
        }
    except Exception as e:  # pragma: no cover - best-effort health output
        return {'connected': False, 'status': 'error', 'error': str(e)}


# Editions -------------------------------------------------------------------

@bp.route('/editions/<edition_id>')
def edition_detail(edition_id):
    return editions_service.get_edition(edition_id)


@bp.route('/editions/<edition_id>/resolved')
def edition_resolved(edition_id):
    return editions_service.get_resolved_edition(edition_id)


@bp.route('/editions/slug/<slug>/resolved')
def edition_resolved_by_slug(slug):
    return editions_service.get_resolved_edition_by_slug(slug)


@bp.route('/editions/<edition_id>/status-check')
def edition_status_check(edition_id):
    return editions_service.status_check(edition_id)


@bp.route('/competitions/<competition_id>/editions')
def competition_editions(competition_id):
    sort = (request.args.get('sort') or 'desc').lower()
    if sort not in ('asc', 'desc'):
        raise ValidationError(f"Invalid sort '{sort}'. Expected asc or desc.")
    return jsonify(editions_service.list_resolved_editions(competition_id, descending=(sort == 'desc')))


@bp.route('/competitions/<competition_id>/editions', methods=['POST'])
def create_edition(competition_id):
    edition = editions_service.create_edition(competition_id, _json_body())
    return edition, 201


@bp.route('/competitions/<competition_id>/editions/years')
def edition_years(competition_id):
    return jsonify(editions_service.available_years(competition_id))


@bp.route('/competitions/<competition_id>/editions/<int:year>')
def edition_by_year(competition_id, year):
    return editions_service.get_resolved_edition_by_year(competition_id, year)


@bp.route('/competitions/<competition_id>/editions/bulk', methods=['POST'])
def create_editions_bulk(competition_id):
    payload = _json_body()
    created = editions_service.create_bulk(competition_id, payload.get('years'))
    return jsonify(created), 201


# Competition ledger -----------------------------------------------------------

@bp.route('/users/<user_id>/competitions')
def user_competitions(user_id):
    rows = ledger.list_user_competitions(user_id, request.args.get('status'))
    return {'data': rows, 'count': len(rows)}


@bp.route('/users/<user_id>/competitions/<competition_id>/mark', methods=['POST'])
def mark_competition(user_id, competition_id):
    row = ledger.mark_competition(user_id, competition_id, _json_body().get('status'))
    return row, 201


@bp.route('/users/<user_id>/competitions/<competition_id>/result', methods=['POST'])
def add_result(user_id, competition_id):
    return ledger.add_result(user_id, competition_id, _json_body())


@bp.route('/users/<user_id>/competitions/<competition_id>/status')
def competition_status(user_id, competition_id):
    row = ledger.get_competition_status(user_id, competition_id)
    return {'data': row, 'isMarked': row is not None}


@bp.route('/users/<user_id>/competitions/<competition_id>', methods=['PUT'])
def update_user_competition(user_id, competition_id):
    return ledger.update_competition(user_id, competition_id, _json_body())


@bp.route('/users/<user_id>/competitions/<competition_id>', methods=['DELETE'])
def unmark_competition(user_id, competition_id):
    return ledger.unmark_competition(user_id, competition_id)


# Edition ledger ---------------------------------------------------------------

@bp.route('/users/<user_id>/editions/<edition_id>/participation', methods=['PUT'])
def upsert_participation(user_id, edition_id):
    return ledger.upsert_edition_participation(user_id, edition_id, _json_body())


@bp.route('/users/<user_id>/editions/<edition_id>/participation')
def get_participation(user_id, edition_id):
    return ledger.get_edition_participation(user_id, edition_id)


@bp.route('/users/<user_id>/editions/<edition_id>/participation', methods=['DELETE'])
def delete_participation(user_id, edition_id):
    return ledger.delete_edition_participation(user_id, edition_id)


# Analytics --------------------------------------------------------------------

@bp.route('/users/<user_id>/stats')
def user_stats(user_id):
    return stats_service.get_user_stats(user_id)


@bp.route('/ranking')
def ranking():
    metric = (request.args.get('type') or ranking_service.METRIC_COMPETITIONS).lower()
    limit = ranking_service.parse_limit(request.args.get('limit'))
    offset = ranking_service.parse_offset(request.args.get('offset'))
    return jsonify(ranking_service.get_global_ranking(metric, limit, offset=offset))
