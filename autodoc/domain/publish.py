"""
Publish result domain objects for autodoc.

Provides the result type of a documentation publish, serialisable
for JSON output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class PublishStatus(Enum):
    """Outcome of a publish."""
    PUBLISHED = "published"
    UNCHANGED = "unchanged"
    DRY_RUN = "dry_run"


@dataclass
class PublishResult:
    """
    What a publish did.

    ``commit`` is None when the output tree matched the remote tree and
    no commit was created. ``parent`` is None for the first commit of
    the branch.
    """
    status: PublishStatus
    remote: str
    branch: str
    tree: str
    message: str
    source_branch: str
    source_commit: str
    doc_dir: str
    commit: Optional[str] = None
    parent: Optional[str] = None
    log_stat: Optional[str] = None

    @property
    def pushed(self) -> bool:
        return self.status == PublishStatus.PUBLISHED

    @property
    def orphan(self) -> bool:
        """True if the commit starts a new history line."""
        return self.commit is not None and self.parent is None

    @property
    def target_ref(self) -> str:
        return f"refs/heads/{self.branch}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'status': self.status.value,
            'remote': self.remote,
            'branch': self.branch,
            'tree': self.tree,
            'commit': self.commit,
            'parent': self.parent,
            'source_branch': self.source_branch,
            'source_commit': self.source_commit,
            'doc_dir': self.doc_dir,
            'message': self.message,
        }
        if self.log_stat:
            result['log_stat'] = self.log_stat
        return result
