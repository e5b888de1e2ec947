"""
autodoc - Keep a separate branch of generated docs.

autodoc runs your documentation command, commits its output to a branch
such as gh-pages and pushes it, without checking that branch out and
without touching your index.

Quick Start:
    from autodoc import PublishService, PublishOptions

    service = PublishService()
    options = PublishOptions(doc_cmd="make html", doc_dir="build/html")
    for message in service.publish(options):
        print(message)

    print(service.last_result.status)

Domain Objects:
    PublishResult - What a publish did (tree, commit, parent, status)
    PublishStatus - published, unchanged or dry_run

Services:
    PublishService - The publish sequence
"""

__version__ = "0.1.0"

from .domain import PublishResult, PublishStatus
from .services import PublishOptions, PublishService
from .infra import GitClient
from .config import load_config, save_config

__all__ = [
    "__version__",
    "PublishResult",
    "PublishStatus",
    "PublishOptions",
    "PublishService",
    "GitClient",
    "load_config",
    "save_config",
]
