"""
Flask JSON API around the bracket generators.

Requests carry everything needed to build a bracket (participants, type and
seed), so nothing is stored between requests. Sending back the seed returned
by /api/bracket/generate reproduces the same bracket for export.
"""
import os
import random
from flask import Flask, request, jsonify, Response
from brackets.double_elimination import generate_double_elimination
from brackets.elimination import generate_single_elimination
from brackets.errors import BracketError
from brackets.export import export_schedule, export_filename
from brackets.models import serialize_result
from brackets.participants import parse_participants, remove_participant
from brackets.seeding import filter_competitors

app = Flask(__name__)


def _int_from_env(name, default=None):
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        app.logger.warning(f'Ignoring non-integer {name}={value!r}')
        return default


MAX_PARTICIPANTS = _int_from_env('BRACKET_MAX_PARTICIPANTS', 4096)
DEFAULT_SEED = _int_from_env('BRACKET_RANDOM_SEED')

GENERATORS = {
    'single': generate_single_elimination,
    'double': generate_double_elimination,
}


def _resolve_seed(data) -> int:
    """Seed from the request, else the configured default, else a fresh one."""
    seed = data.get('seed')
    if seed is None:
        seed = DEFAULT_SEED
    if seed is None:
        return random.randrange(2 ** 32)
    if isinstance(seed, bool):
        raise BracketError('Seed must be an integer.')
    try:
        return int(seed)
    except (TypeError, ValueError):
        raise BracketError('Seed must be an integer.')


def build_bracket(data):
    """
    Generate the bracket described by a request body.

    Returns (tournament_type, seed, players, result). Raises
    BracketError for anything the client has to fix.
    """
    tournament_type = data.get('type', 'single')
    generator = GENERATORS.get(tournament_type)
    if generator is None:
        raise BracketError("Tournament type must be 'single' or 'double'.")

    participants = data.get('participants')
    if isinstance(participants, list) and len(participants) > MAX_PARTICIPANTS:
        raise BracketError(f'At most {MAX_PARTICIPANTS} participants are supported.')

    seed = _resolve_seed(data)
    result = generator(participants, rng=random.Random(seed))
    if result['error']:
        raise BracketError(result['error'])
    return tournament_type, seed, filter_competitors(participants), result


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BracketError('Request body must be a JSON object.')
    return data


def _error_response(e: BracketError, status=400):
    app.logger.warning(f'{request.path}: {e.message}')
    return jsonify({'success': False, 'error': e.message}), status


@app.route('/api/participants/parse', methods=['POST'])
def api_parse_participants():
    """Add names pasted as comma or newline separated text."""
    try:
        data = _json_body()
        parsed = parse_participants(data.get('text', ''), data.get('participants') or [])
    except BracketError as e:
        return _error_response(e)
    return jsonify({'success': True, **parsed})


@app.route('/api/participants/remove', methods=['POST'])
def api_remove_participant():
    try:
        data = _json_body()
    except BracketError as e:
        return _error_response(e)
    name = data.get('name')
    name = name.strip() if isinstance(name, str) else ''
    if not name:
        return _error_response(BracketError('Participant name is required.'))
    participants = remove_participant(data.get('participants') or [], name)
    return jsonify({'success': True, 'participants': participants, 'message': f'{name} removed.'})


@app.route('/api/bracket/generate', methods=['POST'])
def api_generate_bracket():
    """Generate a single or double elimination bracket as JSON."""
    try:
        data = _json_body()
        tournament_type, seed, participants, result = build_bracket(data)
    except BracketError as e:
        return _error_response(e)

    app.logger.info(f'Generated {tournament_type} elimination bracket for {len(participants)} participants (seed={seed})')
    return jsonify({
        'success': True,
        'type': tournament_type,
        'seed': seed,
        'bracket': serialize_result(result),
    })


@app.route('/api/bracket/export', methods=['POST'])
def api_export_bracket():
    """Export a bracket as a downloadable plain text schedule."""
    try:
        data = _json_body()
        tournament_type, seed, participants, result = build_bracket(data)
        text = export_schedule(result, tournament_type, len(participants))
    except BracketError as e:
        return _error_response(e)

    return Response(
        text,
        mimetype='text/plain',
        headers={'Content-Disposition': f'attachment; filename={export_filename(tournament_type)}'}
    )


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
