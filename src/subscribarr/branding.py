from __future__ import annotations

import shutil
from typing import Literal

# --------------------------------------------------
# Layout constants
# --------------------------------------------------

DEFAULT_WIDTH = 72
MOTIF = "•⊱✦⊰•"

# RichHandler's level column ("INFO     ") eats into the terminal width.
LOG_GUTTER_WIDTH = 10

Width = int | Literal["auto"]


def _resolve_width(width: Width) -> int:
    if width == "auto":
        cols = shutil.get_terminal_size(fallback=(DEFAULT_WIDTH, 24)).columns
        return max(DEFAULT_WIDTH, cols - LOG_GUTTER_WIDTH)
    return max(DEFAULT_WIDTH, int(width))


def _motif_line(inner: int, fill: str, motif: str = MOTIF) -> str:
    """``fill`` repeated to ``inner`` columns with ``motif`` centered."""
    side = max(0, (inner - len(motif)) // 2)
    return f"{fill * side}{motif}{fill * max(0, inner - side - len(motif))}"


# --------------------------------------------------
# Run banner / section end (logged by the sync command)
# --------------------------------------------------


def SUBSCRIBARR_HEADER(title: str, *, width: Width = DEFAULT_WIDTH, pad: int = 8) -> str:
    title = title.strip()
    inner = max(_resolve_width(width) - 2, len(title) + pad * 2)
    rule = _motif_line(inner, "═")

    return "\n".join(
        [
            "",
            f"╔{rule}╗",
            f"│{title.center(inner)}│",
            f"╚{rule}╝",
        ]
    )


def SUBSCRIBARR_SECTION_END(*, width: Width = DEFAULT_WIDTH) -> str:
    return _motif_line(_resolve_width(width), "━")


SUBSCRIBARR_BANNER = SUBSCRIBARR_HEADER("S U B S C R I B A R R")
