"""
User configuration (config.json).

Key bindings are single letters pressed together with Ctrl, except the two
browsing keys (mark_done, remove_todo), which can be any key. The colour
theme has five styles (normal, highlight, tabs, titles, text), each made of
a foreground colour, a background colour and one text modifier.

The file is created with defaults on first run. Loaded values are merged
over the defaults, so a config written by an older version picks up new
keys (and is written back with them).
"""
import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from core.constants import APP_NAME
from events import keys
from events.keys import Key

# Colour names accepted in the theme block
COLOR_NAMES = (
    "Reset", "Black", "Red", "Green", "Yellow", "Blue", "Magenta", "Cyan",
    "Gray", "DarkGray", "LightRed", "LightGreen", "LightYellow", "LightBlue",
    "LightMagenta", "LightCyan", "White",
)

MODIFIER_NAMES = (
    "BOLD", "DIM", "ITALIC", "UNDERLINED", "SLOW_BLINK", "RAPID_BLINK",
    "REVERSED", "HIDDEN", "CROSSED_OUT", "RESET",
)

STYLE_NAMES = ("normal", "highlight", "tabs", "titles", "text")

# Binding config key -> action name used by the App
BINDING_KEYS = {
    "new_sticky_note_char_ctrl": "new_sticky_note",
    "new_note_char_ctrl": "new_note",
    "new_todo_char_ctrl": "new_todo",
    "edit_todo_char_ctrl": "edit_todo",
    "remove_sticky_note_char_ctrl": "remove_sticky_note",
    "save_state_to_db_char_ctrl": "save",
    "exit_key_char_ctrl": "exit",
}

# Browsing-only keys: config key -> action name. Values are "Backspace",
# "Delete", {"Char": c} or {"Ctrl": c}.
BROWSE_KEYS = {
    "mark_done": "mark_done",
    "remove_todo": "remove_todo",
}

KEY_NAMES = {
    "Backspace": keys.KEY_BACKSPACE,
    "Delete": keys.KEY_DELETE,
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "title": APP_NAME,
    "new_sticky_note_char_ctrl": "h",
    "new_note_char_ctrl": "k",
    "new_todo_char_ctrl": "n",
    "edit_todo_char_ctrl": "e",
    "remove_sticky_note_char_ctrl": "u",
    "save_state_to_db_char_ctrl": "s",
    "exit_key_char_ctrl": "q",
    "mark_done": "Backspace",
    "remove_todo": "Delete",
    "highlight_string": "✔",
    "app_colors": {
        "normal": {"fg": "White", "bg": "Reset", "modifier": "RESET"},
        "highlight": {"fg": "Yellow", "bg": "Reset", "modifier": "BOLD"},
        "tabs": {"fg": "Cyan", "bg": "Reset", "modifier": "BOLD"},
        "titles": {"fg": "Red", "bg": "Reset", "modifier": "BOLD"},
        "text": {"fg": "Green", "bg": "Reset", "modifier": "ITALIC"},
    },
}

# Ctrl+letter combinations the terminal reserves or reports as other keys
# (ctrl-i is Tab, ctrl-j/ctrl-m are Enter, ctrl-c/ctrl-z are signals)
RESERVED_CTRL_CHARS = frozenset("ijmcz")


class ConfigError(ValueError):
    """Raised for an invalid value in config.json."""


def key_from_json(value: Any) -> Key:
    """
    Parse a browsing key: "Backspace", "Delete", {"Char": c} or {"Ctrl": c}.

    Raises:
        ConfigError: If value is not a usable key
    """
    if isinstance(value, str):
        if value not in KEY_NAMES:
            raise ConfigError(f"Unknown key name: {value!r}")
        return KEY_NAMES[value]

    if isinstance(value, dict) and len(value) == 1:
        if "Char" in value:
            c = value["Char"]
            # Enter runs commands and space-like keys are invisible in help
            if isinstance(c, str) and len(c) == 1 and c.isprintable() and not c.isspace():
                return Key.of(c)
            raise ConfigError(f"Char needs one printable character, got {c!r}")
        if "Ctrl" in value:
            c = value["Ctrl"]
            if isinstance(c, str) and len(c) == 1 and "a" <= c <= "z":
                if c in RESERVED_CTRL_CHARS:
                    raise ConfigError(f"ctrl-{c} is reserved by the terminal")
                return Key.ctrl(c)
            raise ConfigError(f"Ctrl needs a lowercase letter, got {c!r}")

    raise ConfigError(f"Invalid key: {value!r}")


def key_to_json(key: Key) -> Union[str, Dict[str, str]]:
    for name, named in KEY_NAMES.items():
        if key == named:
            return name
    if key.kind == keys.CTRL:
        return {"Ctrl": key.char}
    return {"Char": key.char}


@dataclass(frozen=True)
class Color:
    """
    Theme colour.

    Exactly one of: a named colour, an RGB triple, or a 256-palette index.
    """
    name: Optional[str] = None
    rgb: Optional[Tuple[int, int, int]] = None
    index: Optional[int] = None

    def to_json(self) -> Union[str, Dict[str, Any]]:
        if self.rgb is not None:
            return {"Rgb": list(self.rgb)}
        if self.index is not None:
            return {"Indexed": self.index}
        return self.name

    @classmethod
    def from_json(cls, value: Any) -> "Color":
        """
        Parse "Red", {"Rgb": [r, g, b]} or {"Indexed": n}.

        Raises:
            ConfigError: If value is not a valid colour
        """
        if isinstance(value, str):
            if value not in COLOR_NAMES:
                raise ConfigError(f"Unknown colour: {value!r}")
            return cls(name=value)

        if isinstance(value, dict) and len(value) == 1:
            if "Rgb" in value:
                rgb = value["Rgb"]
                if (not isinstance(rgb, list) or len(rgb) != 3
                        or not all(_is_byte(c) for c in rgb)):
                    raise ConfigError(f"Rgb needs three values 0-255, got {rgb!r}")
                return cls(rgb=(rgb[0], rgb[1], rgb[2]))
            if "Indexed" in value:
                index = value["Indexed"]
                if not _is_byte(index):
                    raise ConfigError(f"Indexed needs a value 0-255, got {index!r}")
                return cls(index=index)

        raise ConfigError(f"Invalid colour: {value!r}")


def _is_byte(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255


@dataclass(frozen=True)
class AppStyle:
    """
    Style for one UI element.

    Attributes:
        fg: Foreground colour
        bg: Background colour
        modifier: One of MODIFIER_NAMES
    """
    fg: Color
    bg: Color
    modifier: str = "RESET"

    def to_json(self) -> Dict[str, Any]:
        return {
            "fg": self.fg.to_json(),
            "bg": self.bg.to_json(),
            "modifier": self.modifier,
        }

    @classmethod
    def from_json(cls, data: Any) -> "AppStyle":
        """
        Raises:
            ConfigError: If any part of the style is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Style must be an object, got {data!r}")
        modifier = data.get("modifier", "RESET")
        if modifier not in MODIFIER_NAMES:
            raise ConfigError(f"Unknown modifier: {modifier!r}")
        return cls(
            fg=Color.from_json(data.get("fg", "Reset")),
            bg=Color.from_json(data.get("bg", "Reset")),
            modifier=modifier,
        )


@dataclass
class AppConfig:
    """
    Parsed configuration.

    Attributes:
        title: Title shown on the tab bar border
        bindings: Action name -> ctrl letter (see BINDING_KEYS)
        highlight_string: Symbol drawn before the selected todo
        colors: Style name -> AppStyle (see STYLE_NAMES)
        browse_keys: Browsing action -> Key (see BROWSE_KEYS)
        warnings: Problems found while loading (bad values were replaced)
    """
    title: str
    bindings: Dict[str, str]
    highlight_string: str
    colors: Dict[str, AppStyle]
    browse_keys: Dict[str, Key] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def key_for(self, action: str) -> str:
        """Get the ctrl letter bound to an action."""
        return self.bindings[action]

    def action_for(self, c: str) -> Optional[str]:
        """Get the action bound to ctrl+c, or None."""
        for action, key in self.bindings.items():
            if key == c:
                return action
        return None

    def browse_action_for(self, key: Key) -> Optional[str]:
        """Get the browsing action (mark_done, remove_todo) bound to key, or None."""
        for action, bound in self.browse_keys.items():
            if bound == key:
                return action
        return None

    def to_json(self) -> Dict[str, Any]:
        """Convert to the config.json layout."""
        data: Dict[str, Any] = {"title": self.title}
        for config_key, action in BINDING_KEYS.items():
            data[config_key] = self.bindings[action]
        for config_key, action in BROWSE_KEYS.items():
            data[config_key] = key_to_json(self.browse_keys[action])
        data["highlight_string"] = self.highlight_string
        data["app_colors"] = {name: self.colors[name].to_json() for name in STYLE_NAMES}
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "AppConfig":
        """
        Build config from (already merged) JSON data.

        Invalid values never abort: each one is replaced by its default
        and recorded in ``warnings``.
        """
        warnings: List[str] = []

        title = data.get("title")
        if not isinstance(title, str):
            warnings.append(f"title must be a string, got {title!r}")
            title = DEFAULT_CONFIG["title"]

        bindings: Dict[str, str] = {}
        for config_key, action in BINDING_KEYS.items():
            value = data.get(config_key)
            problem = _binding_problem(value, bindings)
            if problem:
                default = DEFAULT_CONFIG[config_key]
                warnings.append(f"{config_key}: {problem}, using '{default}'")
                value = default
            bindings[action] = value

        # A fallback default can itself collide with a user binding
        if len(set(bindings.values())) != len(bindings):
            warnings.append("duplicate key bindings after fallback, using all defaults")
            bindings = {action: DEFAULT_CONFIG[key] for key, action in BINDING_KEYS.items()}

        browse_keys: Dict[str, Key] = {}
        for config_key, action in BROWSE_KEYS.items():
            try:
                key = key_from_json(data.get(config_key))
                if key.kind == keys.CTRL and key.char in bindings.values():
                    raise ConfigError(f"ctrl-{key.char} is already bound")
                if key in browse_keys.values():
                    raise ConfigError(f"{key} is already bound")
            except ConfigError as e:
                default = DEFAULT_CONFIG[config_key]
                warnings.append(f"{config_key}: {e}, using {default!r}")
                key = key_from_json(default)
            browse_keys[action] = key

        if len(set(browse_keys.values())) != len(browse_keys):
            warnings.append("duplicate browsing keys after fallback, using defaults")
            browse_keys = {action: key_from_json(DEFAULT_CONFIG[key])
                           for key, action in BROWSE_KEYS.items()}

        highlight = data.get("highlight_string")
        if not isinstance(highlight, str):
            warnings.append(f"highlight_string must be a string, got {highlight!r}")
            highlight = DEFAULT_CONFIG["highlight_string"]

        raw_colors = data.get("app_colors")
        if not isinstance(raw_colors, dict):
            warnings.append("app_colors must be an object, using default theme")
            raw_colors = DEFAULT_CONFIG["app_colors"]

        colors: Dict[str, AppStyle] = {}
        for name in STYLE_NAMES:
            try:
                colors[name] = AppStyle.from_json(raw_colors.get(name))
            except ConfigError as e:
                warnings.append(f"app_colors.{name}: {e}, using default")
                colors[name] = AppStyle.from_json(DEFAULT_CONFIG["app_colors"][name])

        return cls(
            title=title,
            bindings=bindings,
            highlight_string=highlight,
            colors=colors,
            browse_keys=browse_keys,
            warnings=warnings,
        )

    @classmethod
    def default(cls) -> "AppConfig":
        return cls.from_json(copy.deepcopy(DEFAULT_CONFIG))


def _binding_problem(value: Any, taken: Dict[str, str]) -> Optional[str]:
    """Describe why value is not a usable ctrl binding (None if it is)."""
    if not isinstance(value, str) or len(value) != 1:
        return f"expected a single character, got {value!r}"
    if not ("a" <= value <= "z"):
        return f"expected a lowercase letter, got {value!r}"
    if value in RESERVED_CTRL_CHARS:
        return f"ctrl-{value} is reserved by the terminal"
    if value in taken.values():
        return f"ctrl-{value} is already bound"
    return None


def merge_with_defaults(loaded: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """
    Merge loaded config over the defaults.

    Returns:
        (merged config, whether any default key had to be added)
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)
    added = False

    for key, default in DEFAULT_CONFIG.items():
        if key not in loaded:
            added = True
            continue
        if key == "app_colors" and isinstance(loaded[key], dict):
            for style in STYLE_NAMES:
                if style in loaded[key]:
                    merged[key][style] = loaded[key][style]
                else:
                    added = True
        else:
            merged[key] = loaded[key]

    return merged, added


def load_config(path: Path) -> AppConfig:
    """
    Load config.json, creating it with defaults if absent.

    A file that cannot be parsed is left untouched and the defaults are
    used for this session.

    Args:
        path: Path to config.json

    Returns:
        Parsed config (check ``warnings`` for replaced values)

    Raises:
        OSError: If a missing config cannot be created
    """
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        write_config(path, DEFAULT_CONFIG)
        print(f"[CONFIG] Created default config: {path}")
        return AppConfig.default()

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError("config root must be an object")
    except (OSError, ValueError) as e:
        config = AppConfig.default()
        config.warnings.append(f"Failed to load {path}: {e}; using defaults")
        return config

    merged, added = merge_with_defaults(loaded)
    config = AppConfig.from_json(merged)

    if added:
        try:
            write_config(path, merged)
            print(f"[CONFIG] Added new settings to {path}")
        except OSError as e:
            config.warnings.append(f"Failed to save migrated config: {e}")

    return config


def write_config(path: Path, data: Dict[str, Any]):
    """Write config data as pretty-printed JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
