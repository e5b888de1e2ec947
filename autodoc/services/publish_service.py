"""
Publish service for autodoc.

Builds documentation with a user-supplied command and commits the
output to a separate branch of the repository without checking that
branch out. The caller's working tree and index are left alone: the
output is staged into a private index file and turned into a tree and
commit with git plumbing, then pushed straight to the remote ref.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Generator, Optional

from ..config import load_config
from ..domain.publish import PublishResult, PublishStatus
from ..exit_codes import (
    ConfigError,
    DirtyIndexError,
    DocCommandError,
    EmptyOutputError,
    MissingDocCommandError,
    NotAGitRepoError,
    TempDirError,
)
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


@dataclass
class PublishOptions:
    """Options for a publish."""
    repo_path: str = "."
    remote: str = "origin"
    branch: str = "gh-pages"
    doc_cmd: str = ""
    doc_dir: str = "gh-pages"
    doc_subdir: str = ""
    message: str = ""
    dry_run: bool = False
    capture_output: bool = False

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> "PublishOptions":
        """Build options from the `publish` config section; None overrides are ignored."""
        section = dict(config.get("publish", {}))
        section.update({k: v for k, v in overrides.items() if v is not None})
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in section.items() if k in known})


def build_commit_message(branch: str, commit: str, porcelain: str = "",
                         status: str = "", diff: str = "") -> str:
    """
    Commit message for a docs commit.

    Records what the docs were built from; when the working tree had
    local modifications, their status and diff are appended.
    """
    message = f"Updating docs based on {branch} {commit}"
    if porcelain.strip():
        message += f"\n\n    Status:\n{status}\n\n    Diff:\n{diff}"
    return message


def normalize_subdir(subdir: str) -> str:
    """Validate a branch subdirectory; returns it in posix form or ''."""
    if not subdir:
        return ""
    normalized = PurePosixPath(subdir.replace(os.sep, "/"))
    if normalized.is_absolute() or ".." in normalized.parts:
        raise ConfigError(f"Output subdirectory must be a relative path inside the branch: {subdir}")
    text = str(normalized)
    return "" if text == "." else text


def is_empty_dir(path: Path) -> bool:
    """True if path is missing, not a directory, or has no entries."""
    if not path.is_dir():
        return True
    return next(path.iterdir(), None) is None


def clear_path(path: Path) -> None:
    """Remove whatever is at path: a directory tree, a file or a link."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.is_symlink() or path.exists():
        path.unlink()


def make_empty_dir(path: Path) -> None:
    """Replace path with an empty directory; ConfigError if that fails."""
    try:
        clear_path(path)
        path.mkdir(parents=True)
    except OSError as e:
        raise ConfigError(f"Cannot use {path} as output directory: {e}") from e


class PublishService:
    """
    Service that publishes generated docs to a branch.

    Yields human-readable progress messages; the result is the
    generator's return value and is also kept in ``last_result``.

    Example:
        service = PublishService()
        options = PublishOptions(doc_cmd="make html", doc_dir="build/html")

        for progress in service.publish(options):
            print(progress)

        result = service.last_result
        print(result.status, result.commit)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize PublishService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
        """
        self.config = config or load_config()
        self.git = git_client or GitClient()
        self.last_result: Optional[PublishResult] = None

    def resolve_doc_dir(self, toplevel: str, doc_dir: str, base: Optional[Path] = None) -> Path:
        """
        Absolute output directory; relative paths are taken from base
        (the directory the doc command runs in), or the repository root.

        The directory is wiped before every build, so it may not be the
        repository itself or any of its parents.
        """
        if not doc_dir:
            raise ConfigError("No output directory configured")
        root = Path(toplevel).resolve()
        path = Path(doc_dir).expanduser()
        if not path.is_absolute():
            path = (base or root) / path
        path = path.resolve()
        if path == root or path in root.parents:
            raise ConfigError(f"Refusing to use {path} as output directory: it contains the repository")
        git_dir = Path(self.git.git_dir(toplevel)).resolve()
        if path == git_dir or git_dir in path.parents or path in git_dir.parents:
            raise ConfigError(f"Refusing to use {path} as output directory: it overlaps {git_dir}")
        return path

    def check_preconditions(self, options: PublishOptions) -> str:
        """
        Fail fast before anything is touched.

        Returns:
            The repository's top-level directory
        """
        if not self.git.is_work_tree(options.repo_path):
            raise NotAGitRepoError(options.repo_path)
        toplevel = self.git.toplevel(options.repo_path)

        if not self.git.index_is_clean(toplevel):
            raise DirtyIndexError()

        if not options.doc_cmd or not options.doc_cmd.strip():
            raise MissingDocCommandError()

        return toplevel

    def commit_message(self, toplevel: str, options: PublishOptions):
        """Returns (message, source_branch, source_commit)."""
        source_branch = self.git.current_branch(toplevel)
        source_commit = self.git.head_commit(toplevel)
        if options.message:
            return options.message, source_branch, source_commit

        porcelain = self.git.status_porcelain(toplevel)
        status = diff = ""
        if porcelain.strip():
            status = self.git.status_short(toplevel)
            diff = self.git.diff(toplevel)
        message = build_commit_message(source_branch, source_commit, porcelain, status, diff)
        return message, source_branch, source_commit

    def run_doc_command(self, doc_cmd: str, cwd: str, capture_output: bool = False) -> None:
        """
        Run the documentation command through the shell.

        Its output goes straight to the terminal unless capture_output
        is set, in which case stdout is logged at DEBUG and stderr only
        when the command fails.
        """
        logger.debug(f"Running command in '{cwd}': {doc_cmd}")
        if not capture_output:
            returncode = subprocess.run(doc_cmd, shell=True, cwd=cwd).returncode
            if returncode != 0:
                raise DocCommandError(doc_cmd, returncode)
            return

        result = subprocess.run(
            doc_cmd,
            shell=True,
            cwd=cwd,
            capture_output=True,
            text=True,
        )
        if result.stdout and result.stdout.strip():
            logger.debug(result.stdout.strip())
        if result.returncode != 0:
            if result.stderr and result.stderr.strip():
                logger.error(result.stderr.strip())
            raise DocCommandError(doc_cmd, result.returncode)

    def _prepare_output(self, toplevel: str, doc_path: Path, subdir: str,
                        remote_ref: Optional[str], index_file: str) -> Path:
        """
        Start from a clean slate and return the directory doc_cmd must fill.

        With a subdirectory and an existing remote branch, the branch is
        checked out into doc_path first so only the subdirectory changes.
        """
        make_empty_dir(doc_path)
        if not subdir:
            return doc_path

        if remote_ref:
            self.git.checkout_tree(toplevel, remote_ref, str(doc_path), index_file)
        output_path = doc_path / subdir
        make_empty_dir(output_path)
        return output_path

    def publish(self, options: Optional[PublishOptions] = None) -> Generator[str, None, PublishResult]:
        """
        Generate the docs and push them to the target branch.

        Args:
            options: Publish options (built from the config if None)

        Yields:
            Progress messages

        Returns:
            PublishResult describing what happened

        Raises:
            CommandError subclasses on any failure; nothing is pushed then.
        """
        self.last_result = None
        if options is None:
            options = PublishOptions.from_config(self.config)
        toplevel = self.check_preconditions(options)
        subdir = normalize_subdir(options.doc_subdir)
        # doc_cmd and a relative doc_dir are taken from the invocation directory
        base = Path(options.repo_path).resolve()
        doc_path = self.resolve_doc_dir(toplevel, options.doc_dir, base)

        message, source_branch, source_commit = self.commit_message(toplevel, options)

        # Only what's currently on the remote matters, not local branches
        yield f"Fetching {options.remote}"
        self.git.fetch(toplevel, options.remote)

        remote_ref = f"refs/remotes/{options.remote}/{options.branch}"
        parent = None
        if self.git.ref_exists(toplevel, remote_ref):
            parent = self.git.rev_parse(toplevel, remote_ref)

        try:
            tmp_dir = tempfile.mkdtemp(prefix="autodoc-")
        except OSError as e:
            raise TempDirError(str(e)) from e

        try:
            index_file = os.path.join(tmp_dir, "index")
            output_path = self._prepare_output(
                toplevel, doc_path, subdir, remote_ref if parent else None, index_file
            )

            yield "Generating docs"
            self.run_doc_command(options.doc_cmd, str(base), options.capture_output)

            if is_empty_dir(output_path):
                raise EmptyOutputError(options.doc_cmd, str(output_path))

            yield "Adding files to git index"
            self.git.add_all(toplevel, str(doc_path), index_file)

            tree = self.git.write_tree(toplevel, index_file)
            yield f"Created git tree {tree}"
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)

        result = PublishResult(
            status=PublishStatus.UNCHANGED,
            remote=options.remote,
            branch=options.branch,
            tree=tree,
            message=message,
            source_branch=source_branch,
            source_commit=source_commit,
            doc_dir=str(doc_path),
            parent=parent,
        )
        self.last_result = result

        if parent and self.git.tree_of(toplevel, parent) == tree:
            yield (f"WARNING: No changes in documentation output from previous commit. "
                   f"Not pushing to {options.branch}")
            return result

        if parent:
            yield f"Creating commit with parent {remote_ref} {parent}"
        else:
            yield "Creating first commit of the branch"
        result.commit = self.git.commit_tree(toplevel, tree, message, parent=parent)

        if options.dry_run:
            result.status = PublishStatus.DRY_RUN
            yield f"Would push {result.commit} to {options.branch}"
            return result

        yield f"Pushing {result.commit} to {options.branch}"
        self.git.push_ref(toplevel, options.remote, result.commit, options.branch)

        # Keep the remote-tracking ref in step with what was pushed
        self.git.fetch(toplevel, options.remote)
        result.log_stat = self.git.log_stat(toplevel, f"{options.remote}/{options.branch}")
        result.status = PublishStatus.PUBLISHED
        return result
