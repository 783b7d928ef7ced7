"""
Unit tests for configuration.
"""

import logging
import pytest

from pr_retest.config import AppConfig, ConfigManager, GitHubConfig, LoggingConfig, configure_logging


class TestAppConfig:
    """Unit tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.github.api_base_url == 'https://api.github.com'
        assert config.github.timeout_seconds is None
        assert config.github.max_retries == 0
        assert config.server.port == 8000
        config.validate()

    def test_from_env(self):
        """Test loading the runner environment."""
        config = AppConfig.from_env({
            'GITHUB_TOKEN': 'tok',
            'GITHUB_API_URL': 'https://ghe.example.com/api/v3',
            'GITHUB_EVENT_NAME': 'issue_comment',
            'GITHUB_EVENT_PATH': '/tmp/event.json',
            'GITHUB_REPOSITORY': 'octo/hello',
            'GITHUB_OUTPUT': '/tmp/output',
            'GITHUB_TIMEOUT': '15',
            'LOG_LEVEL': 'debug',
            'RUNNER_DEBUG': '1',
        })

        assert config.github.token == 'tok'
        assert config.github.api_base_url == 'https://ghe.example.com/api/v3'
        assert config.github.timeout_seconds == 15.0
        assert config.action.event_name == 'issue_comment'
        assert config.action.event_path == '/tmp/event.json'
        assert config.action.repository == 'octo/hello'
        assert config.action.output_path == '/tmp/output'
        assert config.logging.level == 'debug'
        assert config.debug is True
        config.validate()

    def test_from_yaml(self, tmp_path):
        """Test loading a YAML file with runner details from the environment."""
        config_file = tmp_path / 'config.yml'
        config_file.write_text(
            "github:\n"
            "  api_base_url: https://ghe.example.com/api/v3\n"
            "  timeout_seconds: 20\n"
            "server:\n"
            "  port: 9000\n"
            "  webhook_secret: s3cret\n"
            "logging:\n"
            "  level: WARNING\n"
        )

        config = AppConfig.from_yaml(str(config_file), {
            'GITHUB_TOKEN': 'env-token',
            'GITHUB_EVENT_NAME': 'issue_comment',
        })

        assert config.github.api_base_url == 'https://ghe.example.com/api/v3'
        assert config.github.timeout_seconds == 20
        assert config.github.token == 'env-token'
        assert config.server.port == 9000
        assert config.server.webhook_secret == 's3cret'
        assert config.logging.level == 'WARNING'
        assert config.action.event_name == 'issue_comment'

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(str(tmp_path / 'missing.yml'))

    @pytest.mark.parametrize('config', [
        AppConfig(github=GitHubConfig(api_base_url='ftp://example.com')),
        AppConfig(github=GitHubConfig(timeout_seconds=0)),
        AppConfig(github=GitHubConfig(max_retries=-1)),
        AppConfig(logging=LoggingConfig(level='LOUD')),
    ])
    def test_validation(self, config):
        with pytest.raises(ValueError, match='Configuration validation failed'):
            config.validate()

    def test_to_dict_excludes_secrets(self):
        config = AppConfig.from_env({'GITHUB_TOKEN': 'tok', 'GITHUB_WEBHOOK_SECRET': 'shh'})
        data = config.to_dict()

        assert 'token' not in data['github']
        assert 'webhook_secret' not in data['server']
        assert data['github']['api_base_url'] == 'https://api.github.com'


class TestLogging:
    """Unit tests for logging setup."""

    def test_configure_logging(self, restore_root_logger):
        handler = logging.NullHandler()
        configure_logging(LoggingConfig(level='WARNING'), handler)

        assert restore_root_logger.level == logging.WARNING
        assert handler in restore_root_logger.handlers

    def test_configure_logging_debug(self, restore_root_logger):
        configure_logging(LoggingConfig(level='ERROR'), logging.NullHandler(), debug=True)
        assert restore_root_logger.level == logging.DEBUG

    def test_configure_logging_with_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / 'retest.log'
        configure_logging(LoggingConfig(file_path=str(log_file)), logging.NullHandler())

        logging.getLogger('pr_retest.tests').info('written to file')
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert 'written to file' in log_file.read_text()

    def test_config_manager_validates(self, restore_root_logger):
        with pytest.raises(ValueError):
            ConfigManager(AppConfig(logging=LoggingConfig(level='LOUD')))

        manager = ConfigManager(AppConfig(), logging.NullHandler())
        assert manager.config.github.max_retries == 0
