#!/usr/bin/env python3

import click

from autodoc import __version__
from autodoc.commands.publish import publish_handler
from autodoc.commands.config import config_cmd


@click.group()
@click.version_option(__version__, prog_name="autodoc")
def cli():
    """autodoc - Keep a separate branch of generated docs.

    Generates documentation, commits it to a separate branch and pushes it
    upstream without checking the branch out, so your current working tree
    is left alone. Local file modifications are fine, but the git index
    (staging area) must be clean.
    """
    pass


cli.add_command(publish_handler, name='publish')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
