"""streamchat theme: palette and the shared console."""

from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


@dataclass(frozen=True)
class ColorPalette:
    """Core UI color palette."""

    surface: str = "#121218"
    border: str = "#30363d"
    text_bright: str = "#e8e8f0"
    text: str = "#b8b8cc"
    text_dim: str = "#6e7681"
    text_muted: str = "#363648"
    inline_code: str = "#00d4e5"
    thinking: str = "#8b8ba7"
    code_label: str = "#5a9cf0"
    user: str = "#34d399"
    error: str = "#e55a6e"
    spinner: str = "#e5c747"


@dataclass(frozen=True)
class StreamChatTheme:
    """Palette plus the per-region styles derived from it."""

    palette: ColorPalette
    syntax_theme: str = "monokai"

    @property
    def plain_style(self) -> str:
        return self.palette.text

    @property
    def thinking_style(self) -> str:
        return f"dim italic {self.palette.thinking}"

    @property
    def code_style(self) -> str:
        return self.palette.text_bright

    @property
    def frame_style(self) -> str:
        return f"dim {self.palette.border}"

    @property
    def label_style(self) -> str:
        return f"dim {self.palette.code_label}"


DEFAULT_THEME = StreamChatTheme(palette=ColorPalette())

console = Console()


def render_header(title: str, subtitle: str = "", con: Console | None = None) -> None:
    """Render a header panel."""
    palette = DEFAULT_THEME.palette
    header_text = Text(title, style=f"bold {palette.inline_code}")
    if subtitle:
        header_text.append(f"\n{subtitle}", style=f"dim {palette.text_bright}")
    panel = Panel(
        header_text,
        border_style=palette.border,
        padding=(0, 2),
        expand=False,
    )
    (con or console).print(panel)
