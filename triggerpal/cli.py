"""triggerpal command line entry point"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from github import Auth, Github

from triggerpal.actions import ActionOutputs
from triggerpal.config import Config
from triggerpal.core.exceptions import ConfigurationError
from triggerpal.core.types.events import GitHubContext
from triggerpal.core.types.modes import ModeResult
from triggerpal.github.context import load_event_payload, parse_github_context
from triggerpal.log import configure_logging
from triggerpal.modes.collaborators import ActionCollaborators, ModeOptions
from triggerpal.modes.registry import ModeRegistry, default_registry
from triggerpal.services.github import GitHubCollaborators

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="triggerpal: decides whether an agent acts on a GitHub event")


def build_collaborators(config: Config) -> ActionCollaborators:
    if not config.GITHUB_TOKEN:
        raise ConfigurationError("GITHUB_TOKEN is required to prepare a run")
    return GitHubCollaborators(Github(auth=Auth.Token(config.GITHUB_TOKEN)), config)


async def run_prepare(
    context: GitHubContext,
    config: Config,
    outputs: ActionOutputs,
    registry: ModeRegistry = default_registry,
) -> Optional[ModeResult]:
    """Select the mode, check the trigger and prepare the run"""
    mode = registry.get(context.inputs.mode)
    contains_trigger = mode.should_trigger(context)
    outputs.set_output("contains_trigger", str(contains_trigger).lower())

    if not contains_trigger:
        logger.info(
            "No trigger found, skipping remaining steps",
            extra={'mode': mode.name, 'event_name': context.event_name.value}
        )
        return None

    options = ModeOptions(
        context=context,
        collaborators=build_collaborators(config),
        outputs=outputs,
        additional_mcp_config=config.MCP_CONFIG,
    )
    return await mode.prepare(options)


@app.command()
def prepare(
    event_path: Optional[Path] = typer.Option(None, "--event-path", help="Event JSON; defaults to GITHUB_EVENT_PATH"),
):
    """Parse the triggering event and prepare the agent run."""
    load_dotenv()
    config = Config.from_env()
    configure_logging(config.LOG_LEVEL)

    outputs = ActionOutputs(output_path=config.GITHUB_OUTPUT, env_path=config.GITHUB_ENV)
    try:
        payload = load_event_payload(str(event_path) if event_path else config.GITHUB_EVENT_PATH)
        context = parse_github_context(payload=payload)
        result = asyncio.run(run_prepare(context, config, outputs))
    except Exception as e:
        logger.error(
            "Prepare step failed",
            extra={'error': str(e), 'error_type': type(e).__name__},
            exc_info=True,
        )
        typer.echo(f"Prepare step failed with error: {e}", err=True)
        raise typer.Exit(code=1)

    if result is None:
        typer.echo("No trigger found, skipping remaining steps")
        return
    typer.echo(f"Prepared run with tracking comment {result.comment_id}")


@app.command()
def modes():
    """List registered modes."""
    for name in default_registry.names():
        typer.echo(f"{name}: {default_registry.get(name).description}")


def main():
    app()


if __name__ == "__main__":
    main()
