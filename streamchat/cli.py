"""streamchat CLI - terminal chat client for a local model server."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from .chat import ChatSession
from .config import ConfigManager
from .history import HistoryLog, list_sessions
from .repl import ChatREPL
from .transport import SSETransport
from .ui.output import render_error, render_notice, render_user_line
from .ui.stream import TerminalRenderer
from .ui.theme import DEFAULT_THEME, console


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _open_session(ctx: click.Context, session_id: str | None) -> ChatSession:
    manager: ConfigManager = ctx.obj["config"]
    config = manager.get_chat_config(session_id)
    return ChatSession(config, SSETransport(config), console)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
@click.pass_context
def cli(ctx, config_path, verbose):
    """STREAMCHAT - chat with a local model server from the terminal."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = ConfigManager(config_path)


@cli.command()
@click.option("--session", "-s", "session_id", help="Resume a session id")
@click.pass_context
def chat(ctx, session_id):
    """Start an interactive chat."""
    session = _open_session(ctx, session_id)
    ChatREPL(session, ctx.obj["config"]).run()


@cli.command()
@click.argument("message", nargs=-1, required=True)
@click.option("--session", "-s", "session_id", help="Session id to log under")
@click.pass_context
def ask(ctx, message, session_id):
    """Send a single message."""
    session = _open_session(ctx, session_id)
    try:
        result = session.run_turn(" ".join(message))
    finally:
        session.close()
    if not result.ok:
        sys.exit(1)


@cli.command()
@click.option("--session", "-s", "session_id", help="Session to replay (default: most recent)")
@click.option("--last", "-n", default=0, help="Only the last N turns")
@click.pass_context
def replay(ctx, session_id, last):
    """Redraw logged responses with full formatting."""
    manager: ConfigManager = ctx.obj["config"]
    if session_id is None:
        sessions = list_sessions(manager.get_history_dir())
        if not sessions:
            raise click.ClickException("No sessions logged yet.")
        session_id = sessions[0][0]

    path = manager.history_path_for(session_id)
    if not path.exists():
        raise click.ClickException(f"Session '{session_id}' not found.")

    log = HistoryLog(path, manager.get_newline_token())
    turns = log.turns()
    if last:
        turns = turns[-last:]
    renderer = TerminalRenderer(console, newline_token=manager.get_newline_token())
    for turn in turns:
        render_user_line(turn.user.text, console)
        if turn.ai is None:
            render_error("turn failed, no response logged")
        else:
            renderer.draw(turn.ai.text)
        console.print()


@cli.command()
@click.option("--limit", "-n", default=20, help="Number of sessions to show")
@click.pass_context
def history(ctx, limit):
    """List logged sessions."""
    manager: ConfigManager = ctx.obj["config"]
    sessions = list_sessions(manager.get_history_dir())[:limit]
    if not sessions:
        render_notice("No sessions found.")
        return

    accent = DEFAULT_THEME.palette.inline_code
    console.print(f"\nSessions ({len(sessions)}):\n", style=f"bold {accent}")
    for session_id, path in sessions:
        turns = HistoryLog(path, manager.get_newline_token()).turns()
        first = turns[0].user.text[:60] if turns else "(empty)"
        console.print(f"  {session_id}  {len(turns):>3} turns  {first}", style="dim", markup=False)
    console.print()


@cli.command()
@click.pass_context
def config(ctx):
    """Show configuration."""
    manager: ConfigManager = ctx.obj["config"]
    chat_config = manager.get_chat_config()
    console.print(f"Config file: {manager.config_path}", markup=False)
    console.print(f"Stream URL: {chat_config.stream_url}", markup=False)
    console.print(f"Model: {chat_config.model or '(server default)'}", markup=False)
    console.print(f"History dir: {manager.get_history_dir()}", markup=False)
    console.print(f"Newline token: {chat_config.newline_token}", markup=False)


if __name__ == "__main__":
    cli()
