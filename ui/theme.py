"""
Curses theme for Forget It.

Turns the config's app_colors block into curses attributes. Each of the
five styles gets its own colour pair.
"""
import curses
from typing import Dict

from core.config import AppStyle, Color, STYLE_NAMES

# Named colours -> curses colour numbers (16-colour palette, -1 = terminal default)
COLOR_NUMBERS = {
    "Reset": -1,
    "Black": 0,
    "Red": 1,
    "Green": 2,
    "Yellow": 3,
    "Blue": 4,
    "Magenta": 5,
    "Cyan": 6,
    "Gray": 7,
    "DarkGray": 8,
    "LightRed": 9,
    "LightGreen": 10,
    "LightYellow": 11,
    "LightBlue": 12,
    "LightMagenta": 13,
    "LightCyan": 14,
    "White": 15,
}

# Bright colours fall back to their base colour on 8-colour terminals
BASIC_COLORS = 8

# CROSSED_OUT has no curses attribute; the todo widget marks done items instead
MODIFIER_ATTRS = {
    "BOLD": curses.A_BOLD,
    "DIM": curses.A_DIM,
    "ITALIC": getattr(curses, "A_ITALIC", 0),
    "UNDERLINED": curses.A_UNDERLINE,
    "SLOW_BLINK": curses.A_BLINK,
    "RAPID_BLINK": curses.A_BLINK,
    "REVERSED": curses.A_REVERSE,
    "HIDDEN": curses.A_INVIS,
    "CROSSED_OUT": 0,
    "RESET": curses.A_NORMAL,
}


def rgb_to_xterm(r: int, g: int, b: int) -> int:
    """Nearest entry of the xterm 6x6x6 colour cube (palette 16-231)."""
    def level(c: int) -> int:
        return int(round(c / 255 * 5))
    return 16 + 36 * level(r) + 6 * level(g) + level(b)


def color_number(color: Color, available: int) -> int:
    """
    Resolve a theme colour to a curses colour number.

    Args:
        color: Theme colour
        available: curses.COLORS of the running terminal

    Returns:
        Colour number usable with init_pair (-1 = default)
    """
    if color.index is not None:
        number = color.index
    elif color.rgb is not None:
        number = rgb_to_xterm(*color.rgb) if available >= 256 else 7
    else:
        number = COLOR_NUMBERS.get(color.name, -1)

    if number >= available:
        number = number % BASIC_COLORS if number < 16 else -1
    return number


class Theme:
    """
    Curses attributes per style name.

    Falls back to plain attributes (modifiers only) when the terminal has
    no colour support.
    """

    def __init__(self, styles: Dict[str, AppStyle]):
        self.styles = styles
        self._attrs: Dict[str, int] = {}

    def apply(self):
        """Allocate colour pairs. Call once after curses is initialised."""
        use_color = curses.has_colors()
        if use_color:
            curses.start_color()
            curses.use_default_colors()

        for pair_number, name in enumerate(STYLE_NAMES, start=1):
            style = self.styles[name]
            attr = MODIFIER_ATTRS.get(style.modifier, 0)
            if use_color:
                fg = color_number(style.fg, curses.COLORS)
                bg = color_number(style.bg, curses.COLORS)
                curses.init_pair(pair_number, fg, bg)
                attr |= curses.color_pair(pair_number)
            self._attrs[name] = attr

    def attr(self, name: str) -> int:
        """Get curses attribute for a style name (A_NORMAL before apply())."""
        return self._attrs.get(name, curses.A_NORMAL)
