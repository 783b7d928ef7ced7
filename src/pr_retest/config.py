"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path
from urllib.parse import urlparse
import logging
from logging.handlers import RotatingFileHandler


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: Optional[float] = None  # None: 원격 API 제한에 맡김
    max_retries: int = 0


@dataclass
class ActionConfig:
    """Actions 러너 환경 설정"""
    event_name: str = ""
    event_path: Optional[str] = None
    repository: Optional[str] = None
    output_path: Optional[str] = None


@dataclass
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8000
    webhook_secret: Optional[str] = None


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    action: ActionConfig = field(default_factory=ActionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        env = os.environ if environ is None else environ
        timeout = env.get("GITHUB_TIMEOUT")
        return cls(
            github=GitHubConfig(
                token=env.get("GITHUB_TOKEN"),
                api_base_url=env.get("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=float(timeout) if timeout else None,
                max_retries=int(env.get("GITHUB_MAX_RETRIES", "0")),
            ),
            action=ActionConfig(
                event_name=env.get("GITHUB_EVENT_NAME", ""),
                event_path=env.get("GITHUB_EVENT_PATH"),
                repository=env.get("GITHUB_REPOSITORY"),
                output_path=env.get("GITHUB_OUTPUT"),
            ),
            server=ServerConfig(
                host=env.get("SERVER_HOST", "0.0.0.0"),
                port=int(env.get("SERVER_PORT", "8000")),
                webhook_secret=env.get("GITHUB_WEBHOOK_SECRET"),
            ),
            logging=LoggingConfig(
                level=env.get("LOG_LEVEL", "INFO"),
                format=env.get("LOG_FORMAT", "%(message)s"),
                file_path=env.get("LOG_FILE"),
                max_file_size=int(env.get("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(env.get("LOG_BACKUP_COUNT", "5")),
            ),
            debug=env.get("RUNNER_DEBUG", "0") == "1" or env.get("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str, environ: Optional[Dict[str, str]] = None) -> "AppConfig":
        """YAML 파일에서 설정 로드 (러너 환경 정보는 환경 변수에서)"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        env_config = cls.from_env(environ)
        github = GitHubConfig(**config_data.get('github', {}))
        if not github.token:
            github.token = env_config.github.token

        return cls(
            github=github,
            action=env_config.action,
            server=ServerConfig(**config_data.get('server', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors: List[str] = []

        # API 주소 확인
        parsed = urlparse(self.github.api_base_url)
        if parsed.scheme not in {'http', 'https'} or not parsed.netloc:
            errors.append(f"Invalid GitHub API URL: {self.github.api_base_url}")

        if self.github.timeout_seconds is not None and self.github.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if self.github.max_retries < 0:
            errors.append("Max retries must be non-negative")

        if not 0 < self.server.port < 65536:
            errors.append(f"Invalid server port: {self.server.port}")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                'max_retries': self.github.max_retries,
                # 보안상 토큰은 제외
            },
            'action': {
                'event_name': self.action.event_name,
                'event_path': self.action.event_path,
                'repository': self.action.repository,
                'output_path': self.action.output_path,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                # 보안상 시크릿은 제외
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def configure_logging(config: LoggingConfig, handler: Optional[logging.Handler] = None, debug: bool = False) -> None:
    """로깅 설정"""
    level = logging.DEBUG if debug else getattr(logging, config.level.upper())
    handlers: List[logging.Handler] = [handler or logging.StreamHandler()]

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        handlers.append(RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        ))

    for h in handlers:
        h.setFormatter(logging.Formatter(config.format))

    logging.basicConfig(level=level, handlers=handlers, force=True)


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None, log_handler: Optional[logging.Handler] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        configure_logging(self._config.logging, log_handler, debug=self._config.debug)

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config
