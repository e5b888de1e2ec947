"""
Domain objects for autodoc.
"""

from .publish import PublishResult, PublishStatus

__all__ = [
    'PublishResult',
    'PublishStatus',
]
