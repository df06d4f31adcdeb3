"""Terminal palette and prompt_toolkit style."""

from prompt_toolkit.styles import Style


class Palette:
    """Dark terminal palette."""

    BACKGROUND = "#1e1e2e"
    TEXT = "#e0e0e0"
    TEXT_MUTED = "#78909c"

    PRIMARY = "#4fb3bf"
    CORRECT = "#69f0ae"
    INCORRECT = "#ff5252"
    SKIPPED = "#ffb74d"

    CURSOR_FG = "#000000"
    CURSOR_BG = "#ffd54f"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"


def build_style() -> Style:
    pending = blend_hex(Palette.TEXT, Palette.BACKGROUND, 0.5)
    return Style.from_dict({
        "header": f"bold {Palette.PRIMARY}",
        "stats": "reverse",
        "hint": Palette.TEXT_MUTED,
        "target.pending": pending,
        "target.correct": Palette.CORRECT,
        "target.incorrect": f"{Palette.TEXT} bg:{Palette.INCORRECT}",
        "target.skipped": f"underline {Palette.SKIPPED}",
        "target.cursor": f"{Palette.CURSOR_FG} bg:{Palette.CURSOR_BG}",
        "results.title": f"bold {Palette.PRIMARY}",
        "results.value": f"bold {Palette.TEXT}",
    })
