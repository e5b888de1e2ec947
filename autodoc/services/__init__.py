"""
Service layer for autodoc.

Services orchestrate infrastructure calls into user-level operations:
- PublishService: build docs and push them to a branch
"""

from .publish_service import PublishOptions, PublishService

__all__ = [
    'PublishOptions',
    'PublishService',
]
