"""
Git client infrastructure for autodoc.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import os
import subprocess
from typing import List, Optional, Tuple
import logging

from ..exit_codes import GitCommandError

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over git commands.

    Every method runs in the repository given by ``path``. Methods that
    take ``index_file`` point git at that file instead of the
    repository's own index, leaving the caller's staging area alone.

    Example:
        client = GitClient()
        if client.index_is_clean("/path/to/repo"):
            tree = client.write_tree("/path/to/repo", index_file="/tmp/x/index")
    """

    def __init__(self, git: str = "git", timeout: Optional[int] = None):
        """
        Initialize GitClient.

        Args:
            git: git executable to run
            timeout: Command timeout in seconds (default: no timeout,
                fetch and push may take a while)
        """
        self.git = git
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: str,
        check: bool = True,
        index_file: Optional[str] = None,
    ) -> Tuple[str, int]:
        """
        Run a git command.

        Args:
            args: Arguments after the git executable
            cwd: Working directory
            check: Raise GitCommandError on non-zero exit
            index_file: Use this file as the index (GIT_INDEX_FILE)

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = [self.git] + list(args)
        run_env = None
        if index_file:
            run_env = os.environ.copy()
            run_env["GIT_INDEX_FILE"] = index_file

        logger.debug(f"Running in '{cwd}': {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=run_env,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            raise GitCommandError(cmd, -1, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise GitCommandError(cmd, -1, str(e)) from e

        if result.returncode != 0:
            if result.stderr and result.stderr.strip():
                logger.debug(result.stderr.strip())
            if check:
                raise GitCommandError(cmd, result.returncode, result.stderr)

        return result.stdout.rstrip('\n'), result.returncode

    def is_work_tree(self, path: str) -> bool:
        """Check if path is inside a git work tree."""
        if not os.path.isdir(path):
            return False
        output, code = self._run(["rev-parse", "--is-inside-work-tree"], cwd=path, check=False)
        return code == 0 and output.strip() == "true"

    def toplevel(self, path: str) -> str:
        """Absolute path of the work tree root."""
        output, _ = self._run(["rev-parse", "--show-toplevel"], cwd=path)
        return output.strip()

    def git_dir(self, path: str) -> str:
        """Absolute path of the repository's .git directory."""
        output, _ = self._run(["rev-parse", "--absolute-git-dir"], cwd=path)
        return output.strip()

    def index_is_clean(self, path: str) -> bool:
        """
        True when nothing is staged relative to HEAD.

        `git diff-index --quiet` exits 1 for differences; any other
        non-zero status (e.g. no HEAD yet) is an error.
        """
        _, code = self._run(["diff-index", "--quiet", "--cached", "HEAD", "--"], cwd=path, check=False)
        if code == 0:
            return True
        if code == 1:
            return False
        raise GitCommandError([self.git, "diff-index", "--quiet", "--cached", "HEAD"], code,
                              "could not compare the index with HEAD (does HEAD exist?)")

    def current_branch(self, path: str) -> str:
        """Get current branch name (HEAD when detached)."""
        output, _ = self._run(["rev-parse", "--abbrev-ref", "HEAD"], cwd=path)
        return output.strip()

    def head_commit(self, path: str) -> str:
        """Full sha of HEAD."""
        output, _ = self._run(["rev-parse", "HEAD"], cwd=path)
        return output.strip()

    def status_porcelain(self, path: str) -> str:
        output, _ = self._run(["status", "--porcelain"], cwd=path)
        return output

    def status_short(self, path: str) -> str:
        output, _ = self._run(["status", "--short"], cwd=path)
        return output

    def diff(self, path: str) -> str:
        output, _ = self._run(["diff"], cwd=path)
        return output

    def fetch(self, path: str, remote: str = "origin") -> None:
        """Fetch from remote."""
        self._run(["fetch", remote], cwd=path)

    def ref_exists(self, path: str, ref: str) -> bool:
        """Check a fully qualified ref, e.g. refs/remotes/origin/gh-pages."""
        _, code = self._run(["show-ref", "--quiet", "--verify", ref], cwd=path, check=False)
        return code == 0

    def rev_parse(self, path: str, rev: str) -> str:
        output, _ = self._run(["rev-parse", "--verify", "--quiet", rev], cwd=path)
        return output.strip()

    def tree_of(self, path: str, rev: str) -> str:
        """Sha of the tree object a commit points to."""
        return self.rev_parse(path, f"{rev}^{{tree}}")

    def add_all(self, path: str, work_tree: str, index_file: str) -> None:
        """
        Stage the full contents of ``work_tree`` into ``index_file``.

        Runs from inside the work tree with explicit --git-dir so paths
        are recorded relative to ``work_tree``.
        """
        git_dir = self.git_dir(path)
        self._run(
            [f"--git-dir={git_dir}", f"--work-tree={work_tree}", "add", "-A", "--", "."],
            cwd=work_tree,
            index_file=index_file,
        )

    def checkout_tree(self, path: str, rev: str, work_tree: str, index_file: str) -> None:
        """Write the tree of ``rev`` into ``work_tree`` through ``index_file``."""
        git_dir = self.git_dir(path)
        self._run(["read-tree", rev], cwd=path, index_file=index_file)
        self._run(
            [f"--git-dir={git_dir}", f"--work-tree={work_tree}", "checkout-index", "-a", "-f"],
            cwd=work_tree,
            index_file=index_file,
        )

    def write_tree(self, path: str, index_file: str) -> str:
        """Create a tree object from ``index_file``; returns its sha."""
        output, _ = self._run(["write-tree"], cwd=path, index_file=index_file)
        return output.strip()

    def commit_tree(self, path: str, tree: str, message: str, parent: Optional[str] = None) -> str:
        """Create a commit object for ``tree``; orphan when ``parent`` is None."""
        args = ["commit-tree"]
        if parent:
            args += ["-p", parent]
        args += [tree, "-m", message]
        output, _ = self._run(args, cwd=path)
        return output.strip()

    def push_ref(self, path: str, remote: str, commit: str, branch: str) -> str:
        """Push ``commit`` straight to refs/heads/<branch> on ``remote``."""
        output, _ = self._run(["push", remote, f"{commit}:refs/heads/{branch}"], cwd=path)
        return output

    def log_stat(self, path: str, rev: str) -> str:
        """`git log -1 --stat` for rev."""
        output, _ = self._run(["log", "-1", "--stat", rev], cwd=path)
        return output
