"""
Retest Processing

This module provides the comment-triggered rerun of failed workflow runs.
"""

from .handler import RetestHandler, UnsupportedEventError, TRIGGER_PHRASE, check_event_kind

__all__ = ['RetestHandler', 'UnsupportedEventError', 'TRIGGER_PHRASE', 'check_event_kind']
