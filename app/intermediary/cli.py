"""Command-line interface -- inspect prompts, plugins, and assembled instructions."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from . import __version__
from .config.settings import cfg
from .realtime.instructions import build_backend_instructions, skills_for_outcome
from .realtime.prompt import REALTIME_BACKEND_PROMPT_NAME, check_prompt
from .registries.plugins import get_plugins_manager
from .registries.prompts import get_prompt_library
from .state.plugin_config import PluginConfigStore

console = Console()


def _cmd_show(args: argparse.Namespace) -> int:
    library = get_prompt_library()
    doc = library.get(args.name)
    if doc is None:
        console.print(f"[red]Unknown prompt:[/red] {args.name}")
        console.print(f"Available: {', '.join(library.names()) or '(none)'}")
        return 1
    if args.raw:
        sys.stdout.write(doc.text)
        return 0
    console.print(f"[dim]{doc.source} ({doc.origin}, sha256 {doc.sha256[:12]})[/dim]\n")
    console.print(Markdown(doc.text))
    return 0


def _cmd_list(_args: argparse.Namespace) -> int:
    table = Table(title="Prompts")
    table.add_column("Name", style="bold")
    table.add_column("Origin")
    table.add_column("Chars", justify="right")
    table.add_column("sha256")
    for entry in get_prompt_library().list_prompts():
        table.add_row(entry["name"], entry["origin"], str(entry["chars"]), entry["sha256"][:12])
    console.print(table)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    paths = [Path(p) for p in args.paths]
    if not paths:
        paths = [path for _name, path, _origin in get_prompt_library().sources()]
    failed = 0
    for path in paths:
        result = check_prompt(path)
        if result:
            console.print(f"[green]ok[/green]    {result.message}")
        else:
            failed += 1
            console.print(f"[red]fail[/red]  {result.message}")
    return 1 if failed else 0


def _cmd_plugins(_args: argparse.Namespace) -> int:
    store = PluginConfigStore()
    if not store.plugins_enabled:
        console.print(f"[yellow]Plugins feature is disabled[/yellow] ({store.path})")
        return 0
    outcome = get_plugins_manager().plugins_for_config(store)
    table = Table(title="Plugins")
    table.add_column("Config name", style="bold")
    table.add_column("Manifest name")
    table.add_column("State")
    table.add_column("Skill roots", justify="right")
    table.add_column("MCP servers")
    for plugin in outcome.plugins:
        if plugin.error:
            state = f"[red]error: {plugin.error}[/red]"
        elif plugin.enabled:
            state = "[green]active[/green]"
        else:
            state = "[dim]disabled[/dim]"
        table.add_row(
            plugin.config_name,
            plugin.manifest_name or "-",
            state,
            str(len(plugin.skill_roots)),
            ", ".join(sorted(plugin.mcp_servers)) or "-",
        )
    console.print(table)
    return 1 if any(p.error for p in outcome.plugins) else 0


def _cmd_instructions(_args: argparse.Namespace) -> int:
    library = get_prompt_library()
    base = library.require(REALTIME_BACKEND_PROMPT_NAME)
    outcome = get_plugins_manager().plugins_for_config(PluginConfigStore())
    sys.stdout.write(build_backend_instructions(base.text, skills_for_outcome(outcome)))
    return 0


def _cmd_serve(_args: argparse.Namespace) -> int:
    from .server.app import main as serve_main

    serve_main()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intermediary", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print a prompt")
    show.add_argument("name", nargs="?", default=REALTIME_BACKEND_PROMPT_NAME)
    show.add_argument("--raw", action="store_true", help="Write the exact file text to stdout")
    show.set_defaults(func=_cmd_show)

    sub.add_parser("list", help="List known prompts").set_defaults(func=_cmd_list)

    check = sub.add_parser("check", help="Validate prompt files (default: every known prompt)")
    check.add_argument("paths", nargs="*")
    check.set_defaults(func=_cmd_check)

    sub.add_parser("plugins", help="Show plugin load status").set_defaults(func=_cmd_plugins)
    sub.add_parser("instructions", help="Print the assembled backend instructions").set_defaults(
        func=_cmd_instructions
    )
    sub.add_parser("serve", help="Run the admin HTTP server").set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg.configure_logging()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
