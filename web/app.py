"""
Keyword Rank Tracker - Flask Application
"""

import asyncio
import logging
import threading
from datetime import datetime
from pathlib import Path

from flask import Flask, jsonify, request
from flask_socketio import SocketIO

from serp.fetcher.google import GooglePageFetcher
from serp.resolver import RankResolver
from tracker import (
    CancellationToken,
    ConfigError,
    RetryingOrchestrator,
    RunState,
    TrackerConfig,
    load_config,
    resolve_target_domain,
)
from tracker.orchestrator import validate_keywords

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = 'rank-tracker-secret-key'
socketio = SocketIO(app, cors_allowed_origins="*")

# Base paths
BASE_DIR = Path(__file__).parent.parent
CONFIG_PATH = BASE_DIR / 'config.json'

# Global state for the background run
run_state = {
    'running': False,
    'target_domain': None,
    'started_at': None,
    'finished_at': None,
    'state': None,
}
_cancel_token: CancellationToken | None = None
_run_thread: threading.Thread | None = None
_run_lock = threading.Lock()


def get_config() -> TrackerConfig:
    return load_config(CONFIG_PATH)


def create_resolver(config: TrackerConfig) -> RankResolver:
    """Resolver backed by a real browser"""
    return RankResolver(GooglePageFetcher(config.fetcher), config.max_pages)


@app.after_request
def add_cors_headers(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    return response


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({'error': 'Method not allowed'}), 405


# ==================== Rank API ====================

@app.route('/api/rank/<path:keyword>', methods=['GET'])
def get_rank(keyword):
    """Resolve the rank of the selected site for one keyword"""
    keyword = keyword.strip()
    if not keyword:
        return jsonify({'error': 'Keyword is required'}), 400

    try:
        config = get_config()
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        return jsonify({'error': 'Invalid server configuration', 'details': str(e)}), 500

    try:
        target_domain = resolve_target_domain(request.args.get('site'), config)
    except ConfigError as e:
        return jsonify({'error': str(e)}), 400

    outcome = asyncio.run(create_resolver(config).resolve(keyword, target_domain))

    if outcome.is_error:
        return jsonify({
            'error': 'Failed to fetch search rank',
            'details': outcome.error_message,
        }), 500

    return jsonify({
        'keyword': keyword,
        'activeRank': outcome.rank if outcome.is_found else 'N/A',
        'sourceUrl': outcome.source_url or None,
        'top10Count': outcome.top10_count,
        'results': [entry.to_dict() for entry in outcome.entries],
    })


# ==================== Run API ====================

@app.route('/api/runs', methods=['POST'])
def start_run():
    """Start a keyword set run in the background"""
    global _cancel_token, _run_thread

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    keywords = data.get('keywords') or []
    if not isinstance(keywords, list):
        return jsonify({'error': 'keywords must be a list'}), 400

    try:
        config = get_config()
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        return jsonify({'error': 'Invalid server configuration', 'details': str(e)}), 500

    try:
        keywords = validate_keywords(keywords)
        target_domain = resolve_target_domain(data.get('site'), config)
        retry_budget = int(data.get('retry_budget', config.retry_budget))
        if retry_budget < 0:
            raise ValueError('retry_budget must be >= 0')
    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400

    with _run_lock:
        if run_state['running']:
            return jsonify({'error': 'A run is already in progress'}), 409

        state = RunState()
        state.reset(keywords)
        run_state.update({
            'running': True,
            'target_domain': target_domain,
            'started_at': datetime.now().isoformat(),
            'finished_at': None,
            'state': state,
        })
        _cancel_token = CancellationToken()

        _run_thread = threading.Thread(
            target=run_keywords,
            args=(config, keywords, target_domain, retry_budget, state, _cancel_token),
        )
        _run_thread.daemon = True
        _run_thread.start()

    return jsonify({'success': True, 'keywords': len(keywords)}), 202


@app.route('/api/runs/status', methods=['GET'])
def run_status():
    """Current run and per-keyword state"""
    state = run_state['state']
    return jsonify({
        'running': run_state['running'],
        'target_domain': run_state['target_domain'],
        'started_at': run_state['started_at'],
        'finished_at': run_state['finished_at'],
        'state': state.to_dict() if state else None,
    })


@app.route('/api/runs/stop', methods=['POST'])
def stop_run():
    """Cancel the running run at the next keyword boundary"""
    if not run_state['running'] or _cancel_token is None:
        return jsonify({'error': 'No run in progress'}), 400

    _cancel_token.cancel()
    return jsonify({'success': True})


def run_keywords(config, keywords, target_domain, retry_budget, state, cancel_token):
    """Run the orchestrator in a background thread"""
    orchestrator = RetryingOrchestrator(
        create_resolver(config), courtesy_delay=config.courtesy_delay
    )

    def emit_update(update):
        socketio.emit('keyword_update', update.to_dict())

    try:
        outcomes = asyncio.run(orchestrator.run(
            keywords,
            target_domain,
            retry_budget=retry_budget,
            on_update=emit_update,
            cancel_token=cancel_token,
            state=state,
        ))
        socketio.emit('run_finished', {
            'target_domain': target_domain,
            'cancelled': cancel_token.cancelled,
            'outcomes': {kw: o.to_dict() for kw, o in outcomes.items()},
        })
    except Exception as e:
        logger.error(f"Rank run failed: {e}", exc_info=True)
        socketio.emit('run_finished', {'target_domain': target_domain, 'error': str(e)})
    finally:
        run_state['running'] = False
        run_state['finished_at'] = datetime.now().isoformat()
