"""
Integration tests for the webhook server.
"""

import hashlib
import hmac
import json
import pytest
from unittest.mock import Mock

from pr_retest.api import RetestAPI
from pr_retest.config import AppConfig, GitHubConfig, ServerConfig
from pr_retest.github.client import GitHubClient, GitHubAPIError
from pr_retest.models.workflow import PullRequestSummary, RunConclusion, WorkflowRun, WorkflowRunList
from pr_retest.server import create_app, verify_signature


COMMENT_PAYLOAD = {
    'action': 'created',
    'comment': {'body': '/retest'},
    'issue': {'number': 123, 'pull_request': {}},
    'repository': {'name': 'test-repo', 'full_name': 'test-owner/test-repo', 'owner': {'login': 'test-owner'}},
}


def sign(secret: str, body: bytes) -> str:
    return 'sha256=' + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class TestWebhookServer:
    """Test the webhook Flask app."""

    def setup_method(self):
        """Set up test fixtures."""
        self.github = Mock(spec=GitHubClient)
        self.github.get_pull_request.return_value = PullRequestSummary('Test PR', 'abc123')
        self.github.list_workflow_runs.return_value = WorkflowRunList(total_count=2, runs=[
            WorkflowRun(1, 'Test Workflow 1', 10, RunConclusion.FAILURE),
            WorkflowRun(2, 'Test Workflow 2', 11, RunConclusion.SUCCESS),
        ])
        self.client_factory = Mock(return_value=self.github)

    def make_app(self, secret=None):
        config = AppConfig(
            github=GitHubConfig(token='server-token'),
            server=ServerConfig(webhook_secret=secret),
        )
        api = RetestAPI(config, client_factory=self.client_factory)
        app = create_app(config, api)
        app.testing = True
        return app.test_client()

    def post(self, client, payload, event='issue_comment', headers=None):
        return client.post(
            '/api/v1/webhooks/github',
            data=json.dumps(payload),
            content_type='application/json',
            headers={'X-GitHub-Event': event, **(headers or {})},
        )

    def test_health_check(self):
        response = self.make_app().get('/api/v1/health')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'
        assert response.get_json()['service'] == 'pr-retest'

    def test_requires_token(self):
        with pytest.raises(ValueError, match='GitHub token is required'):
            create_app(AppConfig())

    def test_retest_comment(self):
        """Test a /retest comment reruns the failed run."""
        response = self.post(self.make_app(), COMMENT_PAYLOAD)

        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'completed'
        assert body['rerun_count'] == 1
        assert body['reruns'] == [{
            'run_id': 1, 'name': 'Test Workflow 1', 'run_number': 10, 'succeeded': True, 'error': None
        }]
        self.client_factory.assert_called_once_with(
            'server-token', base_url='https://api.github.com', timeout=None, max_retries=0
        )
        self.github.rerun_workflow.assert_called_once_with('test-owner', 'test-repo', 1)

    def test_skipped_comment(self):
        payload = dict(COMMENT_PAYLOAD, comment={'body': 'thanks!'})

        response = self.post(self.make_app(), payload)

        assert response.status_code == 200
        assert response.get_json()['status'] == 'skipped'
        assert response.get_json()['rerun_count'] is None
        self.github.get_pull_request.assert_not_called()

    def test_unsupported_event(self):
        response = self.post(self.make_app(), COMMENT_PAYLOAD, event='pull_request')

        assert response.status_code == 400
        assert 'Current event: pull_request' in response.get_json()['error']
        self.github.rerun_workflow.assert_not_called()

    def test_unsupported_event_without_repository(self):
        """Test deliveries lacking a repository still fail on the event kind."""
        payload = {
            'action': 'created',
            'installation': {'id': 1},
            'repositories': [{'id': 2, 'name': 'test-repo', 'full_name': 'test-owner/test-repo'}],
        }

        response = self.post(self.make_app(), payload, event='installation')

        assert response.status_code == 400
        assert 'Current event: installation' in response.get_json()['error']
        self.client_factory.assert_not_called()

    def test_unsupported_event_with_invalid_payload(self):
        response = self.post(self.make_app(), {'issue': {'number': 'abc'}}, event='issues')

        assert response.status_code == 400
        assert 'Current event: issues' in response.get_json()['error']

    def test_ping(self):
        response = self.post(self.make_app(), {'zen': 'Keep it logically awesome.'}, event='ping')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'pong'}

    def test_non_json_body(self):
        response = self.make_app().post(
            '/api/v1/webhooks/github', data='not json', headers={'X-GitHub-Event': 'issue_comment'}
        )
        assert response.status_code == 400

    def test_github_failure(self):
        self.github.get_pull_request.side_effect = GitHubAPIError('GitHub API error: 404 - Not Found', 404)

        response = self.post(self.make_app(), COMMENT_PAYLOAD)

        assert response.status_code == 502
        assert response.get_json()['error'] == 'GitHub API error: 404 - Not Found'

    def test_valid_signature(self):
        body = json.dumps(COMMENT_PAYLOAD).encode()
        client = self.make_app(secret='s3cret')

        response = client.post(
            '/api/v1/webhooks/github',
            data=body,
            content_type='application/json',
            headers={'X-GitHub-Event': 'issue_comment', 'X-Hub-Signature-256': sign('s3cret', body)},
        )

        assert response.status_code == 200
        assert response.get_json()['rerun_count'] == 1

    def test_invalid_signature(self):
        client = self.make_app(secret='s3cret')

        response = self.post(client, COMMENT_PAYLOAD, headers={'X-Hub-Signature-256': 'sha256=bad'})

        assert response.status_code == 401
        self.github.get_pull_request.assert_not_called()

    def test_missing_signature(self):
        response = self.post(self.make_app(secret='s3cret'), COMMENT_PAYLOAD)
        assert response.status_code == 401


class TestVerifySignature:

    def test_signature_round(self):
        assert verify_signature('key', b'{}', sign('key', b'{}'))
        assert not verify_signature('key', b'{}', sign('other', b'{}'))
        assert not verify_signature('key', b'{}', None)
        assert not verify_signature('key', b'{}', 'sha1=abc')
