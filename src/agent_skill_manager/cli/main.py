"""
Main CLI entry point for Agent Skill Manager.

Provides the command-line interface using Click.
"""

import functools as _functools
import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import agent_skill_manager
import agent_skill_manager.agents as agents
import agent_skill_manager.config as config
import agent_skill_manager.constants as constants
import agent_skill_manager.errors as errors
import agent_skill_manager.repo as repo
import agent_skill_manager.skills as skills

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


class AliasedGroup(_click.Group):
    """Click group that also resolves short command aliases (ls, rm)."""

    ALIASES: _typing.ClassVar[dict[str, str]] = {
        "ls": "list",
        "rm": "remove",
    }

    def get_command(self, ctx: _click.Context, cmd_name: str) -> _click.Command | None:
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: _click.Context, args: list[str]
    ) -> tuple[str | None, _click.Command | None, list[str]]:
        # Report the canonical name (e.g. "list" rather than "ls")
        _, cmd, remaining = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, remaining


def _fail(message: str) -> _typing.NoReturn:
    """Print an error to stderr and exit with status 1."""
    _click.secho(f"Error: {message}", fg="red", err=True)
    raise SystemExit(1)


_F = _typing.TypeVar("_F", bound=_typing.Callable[..., _typing.Any])


def _reports_errors(func: _F) -> _F:
    """Map store/engine errors and filesystem failures to exit status 1."""

    @_functools.wraps(func)
    def wrapper(*args: _typing.Any, **kwargs: _typing.Any) -> _typing.Any:
        try:
            return func(*args, **kwargs)
        except (errors.SkillManagerError, OSError) as e:
            _fail(str(e))

    return _typing.cast(_F, wrapper)


def _configure_logging(verbose: bool) -> None:
    """Send debug logs to stderr when verbose output is requested."""
    if verbose:
        _logging.basicConfig(
            level=_logging.DEBUG,
            stream=_sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


# =============================================================================
# Context helpers
# =============================================================================


def _settings(ctx: _click.Context) -> config.Settings:
    return _typing.cast(config.Settings, ctx.obj["settings"])


def _registry(ctx: _click.Context) -> agents.AgentRegistry:
    if "registry" not in ctx.obj:
        ctx.obj["registry"] = agents.AgentRegistry(_settings(ctx).agents)
    return _typing.cast(agents.AgentRegistry, ctx.obj["registry"])


def _store(ctx: _click.Context) -> skills.SkillStore:
    if "store" not in ctx.obj:
        settings = _settings(ctx)
        ctx.obj["store"] = skills.SkillStore(
            settings.user_skills_dir, settings.builtin_skills_path
        )
    return _typing.cast(skills.SkillStore, ctx.obj["store"])


def _distributor(ctx: _click.Context) -> skills.SkillDistributor:
    if "distributor" not in ctx.obj:
        registry = _registry(ctx)
        strategy = skills.create_strategy(
            _settings(ctx).distribution, registry, _store(ctx)
        )
        ctx.obj["distributor"] = skills.SkillDistributor(registry, strategy)
    return _typing.cast(skills.SkillDistributor, ctx.obj["distributor"])


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _default_repo_path() -> _pathlib.Path:
    """Repository root of the working directory, or the working directory."""
    return repo.find_repo_root() or _pathlib.Path.cwd()


def _resolve_scope(repo_path: str | None, global_: bool) -> skills.Scope:
    if repo_path and global_:
        raise _click.UsageError("Use either --repo or --global, not both.")
    if global_:
        return skills.Scope.global_scope()
    if repo_path:
        return skills.Scope.repository(repo_path)
    return skills.Scope.repository(_default_repo_path())


def _should_use_color(cli_flag: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. NO_COLOR env var (if set, disable color) - standard convention
    3. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _rich_console(force_color: bool) -> _typing.Any:
    import rich.console as _rich_console

    # When forcing color (explicit --color flag):
    # - force_terminal=True: output color even when piped
    # - no_color=False: override NO_COLOR env var
    return _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
    )


# =============================================================================
# Root group
# =============================================================================


@_click.group(cls=AliasedGroup, context_settings=CONTEXT_SETTINGS)
@_click.version_option(agent_skill_manager.__version__, "-v", "--version", prog_name="asm")
@_click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    asm - manage AI agent skills across repositories.

    Author a skill once and apply it to Claude Code, Codex CLI, Gemini CLI,
    OpenCode or any agent listed in your configuration.

    \b
    Examples:
        asm add review-checklist -d "PR review steps" -f checklist.md
        asm list --tag review
        asm apply review-checklist --agent claude-code
        asm apply review-checklist --global
        asm status review-checklist
        asm init --agent gemini-cli
    """
    try:
        settings = config.Settings()
    except (config.ConfigFileError, _pydantic.ValidationError) as e:
        _fail(str(e))

    if verbose:
        settings.verbose = True
    _configure_logging(settings.verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Skill Commands
# =============================================================================


@cli.command(name="add")
@_click.argument("name")
@_click.option("-d", "--description", default="", help="Skill description")
@_click.option("-t", "--tags", default=None, help="Comma-separated tags")
@_click.option(
    "-a",
    "--agents",
    "agents_csv",
    default=None,
    help="Comma-separated agent types (default: all configured agents)",
)
@_click.option(
    "-f",
    "--file",
    "file_path",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Read skill content from file",
)
@_click.pass_context
@_reports_errors
def skill_add(
    ctx: _click.Context,
    name: str,
    description: str,
    tags: str | None,
    agents_csv: str | None,
    file_path: _pathlib.Path | None,
) -> None:
    """Add a new skill."""
    store = _store(ctx)
    skills.validate_skill_name(name)

    if store.exists(name):
        _click.secho(str(errors.SkillExistsError(name)), fg="yellow")
        return

    if file_path is not None:
        if not file_path.is_file():
            _fail(f"File not found: {file_path}")
        content = file_path.read_text(encoding="utf-8")
    else:
        content = constants.DEFAULT_SKILL_CONTENT.format(name=name)

    agent_ids = _split_csv(agents_csv) or _settings(ctx).get_default_agents()
    _registry(ctx).validate(agent_ids)

    skill = store.create(
        skills.Skill.create(
            name,
            description=description,
            content=content,
            tags=_split_csv(tags),
            agents=agent_ids,
        )
    )

    _click.secho(f"✓ Skill '{name}' created successfully!", fg="green")
    _click.echo(f"  Location: {store.user_skill_file(name)}")
    _click.echo(f"  Tags: {', '.join(skill.tags) if skill.tags else 'none'}")
    _click.echo(f"  Agents: {', '.join(skill.agents)}")


@cli.command(name="list")
@_click.option("-t", "--tag", default=None, help="Filter by tag")
@_click.option("-a", "--agent", default=None, help="Filter by agent type")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
@_reports_errors
def skill_list(
    ctx: _click.Context, tag: str | None, agent: str | None, json_output: bool
) -> None:
    """List all skills (alias: ls)."""
    store = _store(ctx)
    if agent is not None:
        _registry(ctx).get(agent)

    skill_list = store.list(tag=tag, agent=agent)

    if json_output:
        data = []
        for s in skill_list:
            entry = s.to_dict()
            entry["source"] = store.source_of(s.name)
            data.append(entry)
        _click.echo(_json.dumps(data, indent=2))
        return

    if not skill_list:
        _click.secho("No skills found.", fg="yellow")
        if tag or agent:
            _click.echo("Try removing filters to see all skills.")
        else:
            _click.echo('Use "asm add <name>" to create your first skill.')
        return

    _click.secho(f"\nFound {len(skill_list)} skill(s):\n", bold=True)
    for s in skill_list:
        builtin = " (built-in)" if store.source_of(s.name) == "builtin" else ""
        _click.secho(f"  {s.name}{builtin}", fg="cyan")
        if s.description:
            _click.echo(f"    Description: {s.description}")
        if s.tags:
            _click.echo(f"    Tags: {', '.join(s.tags)}")
        _click.echo(f"    Agents: {', '.join(s.agents) if s.agents else 'none'}")
        _click.echo(f"    Updated: {s.updated_at[:10]}")
        _click.echo()


@cli.command(name="show")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.option("--body", is_flag=True, help="Show full skill body")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable markdown rendering of the body (default: auto-detect TTY)",
)
@_click.pass_context
@_reports_errors
def skill_show(
    ctx: _click.Context,
    name: str,
    json_output: bool,
    body: bool,
    use_color: bool | None,
) -> None:
    """Show details for a specific skill."""
    store = _store(ctx)
    skill = store.get(name)
    source = store.source_of(name)

    if json_output:
        data = skill.to_dict()
        data["source"] = source
        data["path"] = str(store.skill_file(name))
        if not body:
            del data["content"]
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo(f"Skill: {skill.name}")
    _click.echo(f"  Description: {skill.description or '(none)'}")
    _click.echo(f"  Source: {source}")
    _click.echo(f"  Path: {store.skill_file(name)}")
    _click.echo(f"  Tags: {', '.join(skill.tags) if skill.tags else 'none'}")
    _click.echo(f"  Agents: {', '.join(skill.agents) if skill.agents else 'none'}")
    _click.echo(f"  Created: {skill.created_at}")
    _click.echo(f"  Updated: {skill.updated_at}")

    if body:
        _click.echo()
        color_enabled, force_color = _should_use_color(use_color)
        if color_enabled:
            import rich.markdown as _rich_markdown

            _rich_console(force_color).print(_rich_markdown.Markdown(skill.content))
        else:
            _click.echo("--- Body ---")
            _click.echo(skill.content)


@cli.command(name="remove")
@_click.argument("name")
@_click.pass_context
@_reports_errors
def skill_remove(ctx: _click.Context, name: str) -> None:
    """Remove a skill from the user store (alias: rm)."""
    store = _store(ctx)

    if not store.exists(name):
        _click.secho(str(errors.SkillNotFoundError(name)), fg="yellow")
        return

    skill = store.load(name)
    store.delete(name)

    _click.secho(f"✓ Skill '{name}' removed successfully!", fg="green")
    if skill is not None and skill.agents:
        _click.echo(f"  Was intended for: {', '.join(skill.agents)}")

    if store.exists(name):
        _click.echo("  The built-in skill of the same name is visible again.")
        return

    still_applied = sorted(_distributor(ctx).status(name, skills.Scope.global_scope()))
    if still_applied:
        _click.echo(f"  Still applied globally for: {', '.join(still_applied)}")
        _click.echo(f"  Run 'asm unapply {name} --global' to clean up.")


# =============================================================================
# Distribution Commands
# =============================================================================


def _resolve_agent(
    ctx: _click.Context,
    agent: str | None,
    global_: bool,
    scope: skills.Scope,
) -> str:
    """Pick the agent for apply: explicit, global default, or detected."""
    registry = _registry(ctx)
    if agent:
        registry.get(agent)
        return agent
    if global_:
        return registry.validate([_settings(ctx).global_agent])[0]

    assert scope.repo_path is not None
    detected = registry.detect(scope.repo_path)
    if detected is None:
        raise errors.SkillManagerError(
            f"No agent configuration found in {scope.repo_path}. "
            "Use --agent to specify or run 'asm init' first."
        )
    return detected


@cli.command(name="apply")
@_click.argument("name")
@_click.option("-r", "--repo", "repo_path", default=None, help="Repository path (defaults to current)")
@_click.option("-g", "--global", "global_", is_flag=True, help="Apply globally")
@_click.option("-a", "--agent", default=None, help="Agent type (auto-detected if not specified)")
@_click.pass_context
@_reports_errors
def skill_apply(
    ctx: _click.Context,
    name: str,
    repo_path: str | None,
    global_: bool,
    agent: str | None,
) -> None:
    """Apply a skill to a repository or globally."""
    skill = _store(ctx).get(name)
    if agent:
        _registry(ctx).get(agent)
    scope = _resolve_scope(repo_path, global_)
    agent_id = _resolve_agent(ctx, agent, global_, scope)
    agent_config = _registry(ctx).get(agent_id)

    destination = _distributor(ctx).apply(skill, agent_id, scope)

    if scope.is_global:
        _click.secho(
            f"✓ Skill '{name}' applied globally for {agent_config.display_name}!",
            fg="green",
        )
    else:
        _click.secho(f"✓ Skill '{name}' applied to repository!", fg="green")
        _click.echo(f"  Repository: {scope.repo_path}")
        _click.echo(f"  Agent: {agent_config.display_name}")
    _click.echo(f"  Location: {destination}")


@cli.command(name="unapply")
@_click.argument("name")
@_click.option("-r", "--repo", "repo_path", default=None, help="Repository path (defaults to current)")
@_click.option("-g", "--global", "global_", is_flag=True, help="Remove the global projection")
@_click.option("-a", "--agent", default=None, help="Agent type (default: every agent that has it)")
@_click.pass_context
@_reports_errors
def skill_unapply(
    ctx: _click.Context,
    name: str,
    repo_path: str | None,
    global_: bool,
    agent: str | None,
) -> None:
    """Remove an applied skill from a repository or the global config.

    The skill itself stays in the store; only its projection is removed.
    """
    distributor = _distributor(ctx)
    if agent:
        _registry(ctx).get(agent)
    scope = _resolve_scope(repo_path, global_)

    if agent:
        removed = [agent] if distributor.remove(name, agent, scope) else []
    else:
        removed = distributor.remove_all(name, scope)

    if not removed:
        _click.secho(f"Skill '{name}' is not applied at {scope} scope.", fg="yellow")
        return

    _click.secho(f"✓ Skill '{name}' removed from {scope} scope!", fg="green")
    _click.echo(f"  Agents: {', '.join(removed)}")


@cli.command(name="status")
@_click.argument("name")
@_click.option("-r", "--repo", "repo_path", default=None, help="Repository path (defaults to current)")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
@_reports_errors
def skill_status(
    ctx: _click.Context, name: str, repo_path: str | None, json_output: bool
) -> None:
    """Show which agents have a skill applied, globally and in a repository."""
    distributor = _distributor(ctx)
    repo_scope = skills.Scope.repository(repo_path or _default_repo_path())
    global_agents = sorted(distributor.status(name, skills.Scope.global_scope()))
    repo_agents = sorted(distributor.status(name, repo_scope))

    if json_output:
        _click.echo(
            _json.dumps(
                {
                    "name": name,
                    "exists": _store(ctx).exists(name),
                    "global": global_agents,
                    "repository": {"path": str(repo_scope), "agents": repo_agents},
                },
                indent=2,
            )
        )
        return

    _click.echo(f"Skill: {name}")
    if not _store(ctx).exists(name):
        _click.secho("  (not in any store - projections below are dangling)", fg="yellow")
    _click.echo(f"  Global: {', '.join(global_agents) if global_agents else 'not applied'}")
    _click.echo(
        f"  Repository ({repo_scope}): {', '.join(repo_agents) if repo_agents else 'not applied'}"
    )


# =============================================================================
# Agent Commands
# =============================================================================


@cli.command(name="init")
@_click.argument("path", required=False)
@_click.option(
    "-a",
    "--agent",
    default=constants.DEFAULT_INIT_AGENT,
    show_default=True,
    help="Agent type",
)
@_click.pass_context
@_reports_errors
def repo_init(ctx: _click.Context, path: str | None, agent: str) -> None:
    """Initialize agent configuration in a repository."""
    registry = _registry(ctx)
    agent_config = registry.get(agent)
    config_file, created = repo.init_agent_config(
        path or _pathlib.Path.cwd(), agent, registry
    )

    if not created:
        _click.secho(
            f"{agent_config.display_name} configuration already exists in this repository.",
            fg="yellow",
        )
        return

    _click.secho(f"✓ Initialized {agent_config.display_name} configuration!", fg="green")
    _click.echo(f"  Location: {config_file}")
    _click.echo("\nYou can now apply skills using:")
    _click.echo("  asm apply <skill-name>")


@cli.command(name="agents")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def agents_list(ctx: _click.Context, json_output: bool) -> None:
    """List supported agents and their config locations."""
    registry = _registry(ctx)

    if json_output:
        _click.echo(_json.dumps(registry.to_dict(), indent=2))
        return

    if not len(registry):
        _click.echo("No agents configured.")
        return

    _click.echo(f"Agents ({len(registry)}):")
    _click.echo(f"{'Name':<16} {'Display Name':<16} {'Repository Config'}")
    _click.echo("-" * 70)
    for agent_id, agent in registry.list_agents():
        _click.echo(f"{agent_id:<16} {agent.display_name:<16} {agent.local_config_path}")


# =============================================================================
# Config Commands
# =============================================================================


@cli.group(name="config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool, use_color: bool | None) -> None:
    """Show effective configuration from all sources.

    Displays the merged configuration from built-in defaults, user config,
    project config and ASM_* environment variables.
    """
    import yaml as _yaml

    settings = _settings(ctx)
    full_config = settings.model_dump(mode="json")
    full_config["skills_dir"] = str(settings.user_skills_dir)
    full_config["builtin_skills_dir"] = str(settings.builtin_skills_path)

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
        return

    yaml_text = _yaml.safe_dump(full_config, default_flow_style=False, sort_keys=False)
    color_enabled, force_color = _should_use_color(use_color)
    if color_enabled:
        import rich.syntax as _rich_syntax

        syntax = _rich_syntax.Syntax(
            yaml_text, "yaml", theme="monokai", background_color="default"
        )
        _rich_console(force_color).print(syntax)
    else:
        _click.echo(yaml_text)


@config_group.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file paths and their status."""
    import agent_skill_manager.config.sources as config_sources

    paths = [
        ("Built-in defaults", config_sources.get_builtin_defaults_path()),
        ("User config", config_sources.get_user_config_path()),
    ]

    project_root = repo.find_repo_root()
    if project_root:
        paths.append(
            ("Project config", config_sources.get_project_config_path(project_root))
        )

    for name, path in paths:
        exists = path.exists()
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="asm")


if __name__ == "__main__":
    main()
