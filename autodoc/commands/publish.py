"""
Publish command for autodoc.

Generates documentation, commits it to a separate branch and pushes
it upstream without checking that branch out. Local file
modifications are fine; the git index (staging area) must be clean.
"""

import json
import sys
from typing import Optional

import click

from ..config import configure_logging, load_config, logger
from ..exit_codes import CommandError, get_exit_code_for_exception
from ..services.publish_service import PublishOptions, PublishService


@click.command('publish')
@click.option('--repo', 'repo_path', default='.', show_default=True,
              type=click.Path(file_okay=False), help='Directory inside the repository to run the doc command in')
@click.option('--remote', help='Git remote to fetch and push to (env: TARGET_REMOTE)')
@click.option('--branch', help='Branch to commit and push to (env: TARGET_BRANCH)')
@click.option('--doc-cmd', help='Command that generates the docs (env: DOC_CMD)')
@click.option('--doc-dir', help='Directory the docs end up in (env: DOC_DIR)')
@click.option('--subdir', 'doc_subdir', help='Only replace this path of the branch (env: DOC_SUBDIR)')
@click.option('--message', '-m', help='Commit message (default: source branch and commit)')
@click.option('--dry-run', is_flag=True, help='Build and commit, but do not push')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSONL')
@click.option('--pretty', is_flag=True, help='Display with rich formatting')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def publish_handler(
    repo_path: str,
    remote: Optional[str],
    branch: Optional[str],
    doc_cmd: Optional[str],
    doc_dir: Optional[str],
    doc_subdir: Optional[str],
    message: Optional[str],
    dry_run: bool,
    output_json: bool,
    pretty: bool,
    debug: bool,
):
    """
    Generate docs and push them to a separate branch.

    The output of the doc command is staged into a private index, turned
    into a commit on top of the remote branch (or a new orphan commit)
    and pushed directly to the remote ref. Nothing is pushed when the
    output is identical to what the branch already has.

    \b
    Examples:
        # Build with codox and publish to origin/gh-pages
        autodoc publish --doc-cmd "lein codox" --doc-dir gh-pages
        # Same, configured from the environment
        DOC_CMD="make html" DOC_DIR=build/html autodoc publish
        # Versioned docs in a subdirectory of the branch
        autodoc publish --doc-cmd "make html" --subdir v1.2
        # Build and commit without pushing
        autodoc publish --dry-run
    """
    config = load_config()
    configure_logging(config, debug=debug)

    options = PublishOptions.from_config(
        config,
        repo_path=repo_path,
        remote=remote,
        branch=branch,
        doc_cmd=doc_cmd,
        doc_dir=doc_dir,
        doc_subdir=doc_subdir,
        message=message,
        dry_run=dry_run,
        # doc_cmd output would break the JSONL stream
        capture_output=output_json,
    )
    service = PublishService(config=config)

    try:
        for progress in service.publish(options):
            if output_json:
                print(json.dumps({'progress': progress}), flush=True)
            else:
                print(progress, flush=True)
    except CommandError as e:
        _handle_error(e, output_json)
    except KeyboardInterrupt as e:
        print("Interrupted.", file=sys.stderr)
        sys.exit(get_exit_code_for_exception(e))

    result = service.last_result
    if output_json:
        print(json.dumps(result.to_dict()), flush=True)
    elif pretty:
        from ..render import render_publish_table
        render_publish_table(result)
    elif result.pushed and result.log_stat:
        # Show what happened: a little stat diff of the changes
        print()
        print(result.log_stat, flush=True)


def _handle_error(e: CommandError, output_json: bool):
    """Report a failed publish and exit with its code."""
    logger.debug("publish failed", exc_info=True)
    exit_code = get_exit_code_for_exception(e)
    if output_json:
        print(json.dumps({'error': str(e), 'exit_code': exit_code}), file=sys.stderr)
    else:
        print(str(e), file=sys.stderr)
    sys.exit(exit_code)
