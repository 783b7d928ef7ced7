"""
Webhook Server

Flask app receiving GitHub ``issue_comment`` webhook deliveries and
running the retest handler for each of them.
"""

import hmac
import hashlib
import logging
from typing import Optional

from flask import Flask, request, jsonify

from . import __version__
from .api import RetestAPI
from .config import AppConfig
from .github.client import GitHubAPIError
from .retest.handler import UnsupportedEventError, check_event_kind


logger = logging.getLogger(__name__)


def verify_signature(secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Check an X-Hub-Signature-256 header against the request body."""
    if not signature or not signature.startswith('sha256='):
        return False
    expected = hmac.new(secret.encode('utf-8'), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={expected}", signature)


def create_app(config: Optional[AppConfig] = None, api: Optional[RetestAPI] = None) -> Flask:
    """
    Create the webhook Flask app.

    Args:
        config: Configuration; the GitHub token and webhook secret are read from it
        api: Optional RetestAPI (default: built from config)
    """
    config = config or AppConfig.from_env()
    config.validate()
    if not config.github.token:
        raise ValueError("GitHub token is required")

    retest_api = api or RetestAPI(config)
    app = Flask(__name__)

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'pr-retest',
            'version': __version__
        })

    @app.route('/api/v1/webhooks/github', methods=['POST'])
    def github_webhook():
        """Handle a GitHub webhook delivery."""
        secret = config.server.webhook_secret
        if secret and not verify_signature(secret, request.get_data(), request.headers.get('X-Hub-Signature-256')):
            logger.warning("Rejected webhook delivery with invalid signature")
            return jsonify({'error': 'Invalid signature', 'status': 'failed'}), 401

        event_name = request.headers.get('X-GitHub-Event', '')
        if event_name == 'ping':
            return jsonify({'status': 'pong'})

        try:
            check_event_kind(event_name)
        except UnsupportedEventError as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 400

        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify({'error': 'Request body must be JSON', 'status': 'failed'}), 400

        try:
            event = retest_api.parser.parse_event_context(event_name, payload)
            result = retest_api.retest(event, config.github.token)
        except (UnsupportedEventError, ValueError) as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 400
        except GitHubAPIError as e:
            logger.error(f"GitHub API failure while handling delivery: {e}")
            return jsonify({'error': str(e), 'status': 'failed'}), 502

        return jsonify({
            'status': result.status,
            'rerun_count': result.rerun_count if result.emits_output else None,
            'reruns': [outcome.to_dict() for outcome in result.outcomes]
        })

    return app
