"""
GitHub Integration Layer

This module provides GitHub API integration for pull request lookup,
workflow run listing and workflow reruns.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import GitHubResponseParser

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'GitHubResponseParser']
