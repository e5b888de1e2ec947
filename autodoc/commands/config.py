import click
from autodoc.config import load_config
import json
from pathlib import Path

@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass

@config_cmd.command("generate")
@click.option("--path", "config_path", default=".autodoc.json", show_default=True,
              type=click.Path(dir_okay=False), help="Where to write the example")
def generate_config(config_path):
    """Generate an example configuration file."""
    from autodoc.config import get_example_config, save_config

    example = get_example_config()
    if Path(config_path).exists():
        click.echo(f"Configuration already exists at {config_path}. Example configuration:\n{json.dumps(example, indent=2)}")
        return
    save_config(example, config_path)
    click.echo(f"Example configuration written to {config_path}. Example configuration:\n{json.dumps(example, indent=2)}")

@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Print the settings `autodoc publish` would run with.

    The file, AUTODOC_* variables and TARGET_REMOTE/DOC_CMD style
    variables are already applied; only command line flags are missing.
    """
    from autodoc.config import get_config_path

    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config()
    print(json.dumps(config, indent=2 if pretty else None, ensure_ascii=False))
