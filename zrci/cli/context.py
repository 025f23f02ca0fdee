from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from zrci.core.config import Config, load_config_or_default
from zrci.core.errors import ErrorCode
from zrci.core.project import Project, detect_project
from zrci.core.result import Err
from zrci.output.console import ConsoleProtocol, RichConsole
from zrci.pipeline.backend import CargoBackend


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: Config
    console: ConsoleProtocol

    def backend(self) -> CargoBackend:
        return CargoBackend(project_root=self.project.root, env=self.config.env.as_env())

    def token(self) -> str | None:
        """Release credential, read from the environment variable named in config."""
        return os.environ.get(self.config.publish.token_env) or None


def build_context() -> CLIContext:
    project_result = detect_project()
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    project = project_result.value
    config_result = load_config_or_default(project.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    return CLIContext(
        project=project,
        config=config,
        console=RichConsole(color=config.env.color),
    )
