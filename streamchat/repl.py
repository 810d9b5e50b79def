"""Interactive REPL for streamchat."""

import time

from rich.panel import Panel

from .chat import ChatSession
from .config import ConfigManager
from .history import list_sessions
from .ui.output import render_notice, render_user_line
from .ui.theme import DEFAULT_THEME, console, render_header


class ChatREPL:
    """Read user lines, run chat turns, handle slash commands."""

    def __init__(self, session: ChatSession, config_manager: ConfigManager):
        self.session = session
        self.config_manager = config_manager
        self._start_time = time.monotonic()

    @property
    def console(self):
        return self.session.console

    def welcome(self) -> None:
        cfg = self.session.config
        render_header("STREAMCHAT", f"Server: {cfg.stream_url}  Session: {cfg.session_id}", self.console)
        render_notice("Type /help for commands.\n", self.console)

    def show_help(self) -> None:
        accent = DEFAULT_THEME.palette.inline_code
        self.console.print("\nCommands:", style=f"bold {accent}")
        self.console.print("  /history [n]     - Show the last n turns of this session")
        self.console.print("  /replay [n]      - Redraw the n-th most recent response")
        self.console.print("  /sessions        - List logged sessions")
        self.console.print("  /session         - Show the current session id and log file")
        self.console.print("  /help            - Show this help")
        self.console.print("  /exit, /quit     - Leave")
        render_notice("\nAnything else is sent to the model.\n", self.console)

    def show_history(self, limit: int = 10) -> None:
        if limit < 1:
            render_notice("Usage: /history [n] with n >= 1", self.console)
            return
        turns = self.session.history.turns()[-limit:]
        if not turns:
            render_notice("No turns logged yet.", self.console)
            return
        for turn in turns:
            render_user_line(turn.user.text, self.console)
            if turn.ai is None:
                render_notice("    (no response)", self.console)
            else:
                preview = turn.ai.text[:100] + ("..." if len(turn.ai.text) > 100 else "")
                render_notice(f"    {preview}", self.console)

    def replay(self, arg: str = "") -> None:
        responses = self.session.history.responses()
        try:
            index = int(arg) if arg else 1
        except ValueError:
            render_notice("Usage: /replay [n]", self.console)
            return
        if not 1 <= index <= len(responses):
            render_notice(f"No response #{index} in this session.", self.console)
            return
        self.session.replay(responses[-index])

    def show_sessions(self) -> None:
        sessions = list_sessions(self.config_manager.get_history_dir())
        if not sessions:
            render_notice("No sessions found.", self.console)
            return
        for session_id, path in sessions:
            marker = "*" if session_id == self.session.config.session_id else " "
            self.console.print(f"  {marker} {session_id}  {path}", style="dim", markup=False)

    def _print_exit_summary(self) -> None:
        stats = self.session.stats
        elapsed = int(time.monotonic() - self._start_time)
        minutes, seconds = divmod(elapsed, 60)
        wall = f"{minutes}m {seconds:02d}s" if minutes else f"{seconds}s"
        lines = [
            f"  Session ID:    {self.session.config.session_id}",
            f"  Turns:         {stats.turns} ({stats.failed} failed)",
            f"  Fragments:     {stats.fragments}",
            f"  Wall Time:     {wall}",
            f"  Log:           {self.session.config.history_path}",
        ]
        self.console.print()
        self.console.print(
            Panel("\n".join(lines), border_style=DEFAULT_THEME.palette.border, padding=(0, 1), expand=False)
        )

    def handle_command(self, line: str) -> bool:
        """Handle special commands. Returns True to continue, False to exit."""
        if not line.startswith("/"):
            return True

        parts = line.strip().split(None, 1)
        cmd = parts[0].lstrip("/").lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd in ("exit", "quit"):
            self._print_exit_summary()
            return False
        elif cmd == "history":
            self.show_history(int(arg) if arg.isdigit() else 10)
        elif cmd == "replay":
            self.replay(arg)
        elif cmd == "sessions":
            self.show_sessions()
        elif cmd == "session":
            cfg = self.session.config
            self.console.print(f"Session {cfg.session_id}: {cfg.history_path}", style="dim", markup=False)
        elif cmd == "help":
            self.show_help()
        else:
            self.console.print(f"Unknown command: /{cmd}", style="dim red")
        return True

    def run(self) -> None:
        """Start the REPL loop."""
        self.welcome()
        try:
            while True:
                try:
                    line = self.console.input("> ")
                    if not line.strip():
                        continue
                    if line.startswith("/"):
                        if not self.handle_command(line):
                            break
                        continue
                    self.session.run_turn(line)
                    self.console.print()
                except KeyboardInterrupt:
                    self.console.print("\n")
                    continue
        except EOFError:
            self._print_exit_summary()
        finally:
            self.session.close()
