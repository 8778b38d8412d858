"""
Sentry Client Module

Client handles built on sentry_sdk and the registry that caches them.
"""

from .client import DEBUG, ERROR, FATAL, INFO, WARNING, SentryClient
from .registry import ClientProvider, ClientRegistry

__all__ = [
    'SentryClient',
    'ClientRegistry',
    'ClientProvider',
    'DEBUG',
    'INFO',
    'WARNING',
    'ERROR',
    'FATAL',
]
