"""
Forget It Test Suite: Configuration
====================================
config.json creation, merging, validation fallbacks and colour parsing.

Usage:
    python -m pytest tests/test_config.py -v
    python tests/test_config.py
"""
import sys
import os
import copy
import json
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import (DEFAULT_CONFIG, AppConfig, AppStyle, Color, ConfigError,
                         load_config, merge_with_defaults)
from events.keys import KEY_BACKSPACE, KEY_DELETE, Key


def default_data():
    return copy.deepcopy(DEFAULT_CONFIG)


# ─────────────────────────────────────────────
#  Colour / Style Tests
# ─────────────────────────────────────────────

class TestColor(unittest.TestCase):

    def test_named(self):
        self.assertEqual(Color.from_json("Red"), Color(name="Red"))

    def test_rgb(self):
        self.assertEqual(Color.from_json({"Rgb": [1, 2, 3]}).rgb, (1, 2, 3))

    def test_indexed(self):
        self.assertEqual(Color.from_json({"Indexed": 208}).index, 208)

    def test_json_roundtrip(self):
        for value in ("Cyan", {"Rgb": [10, 20, 30]}, {"Indexed": 7}):
            self.assertEqual(Color.from_json(value).to_json(), value)

    def test_invalid_values(self):
        for value in ("Purple", {"Rgb": [1, 2]}, {"Rgb": [1, 2, 300]},
                      {"Indexed": -1}, {"Indexed": True}, 5, None, {}):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    Color.from_json(value)


class TestAppStyle(unittest.TestCase):

    def test_parse(self):
        style = AppStyle.from_json({"fg": "Yellow", "bg": "Reset", "modifier": "BOLD"})
        self.assertEqual(style.fg, Color(name="Yellow"))
        self.assertEqual(style.modifier, "BOLD")

    def test_unknown_modifier(self):
        with self.assertRaises(ConfigError):
            AppStyle.from_json({"fg": "Red", "bg": "Reset", "modifier": "SPARKLY"})


# ─────────────────────────────────────────────
#  AppConfig Tests
# ─────────────────────────────────────────────

class TestAppConfig(unittest.TestCase):

    def test_defaults(self):
        config = AppConfig.default()
        self.assertEqual(config.warnings, [])
        self.assertEqual(config.title, "Forget It")
        self.assertEqual(config.highlight_string, "✔")
        self.assertEqual(config.bindings, {
            "new_sticky_note": "h",
            "new_note": "k",
            "new_todo": "n",
            "edit_todo": "e",
            "remove_sticky_note": "u",
            "save": "s",
            "exit": "q",
        })

    def test_action_lookup(self):
        config = AppConfig.default()
        self.assertEqual(config.action_for("s"), "save")
        self.assertEqual(config.key_for("exit"), "q")
        self.assertIsNone(config.action_for("x"))

    def test_to_json_matches_defaults(self):
        self.assertEqual(AppConfig.default().to_json(), DEFAULT_CONFIG)

    def test_custom_binding(self):
        data = default_data()
        data["save_state_to_db_char_ctrl"] = "w"
        config = AppConfig.from_json(data)
        self.assertEqual(config.action_for("w"), "save")
        self.assertIsNone(config.action_for("s"))
        self.assertEqual(config.warnings, [])

    def test_invalid_binding_falls_back(self):
        for bad in ("", "ab", "Q", "1", 7, None):
            with self.subTest(bad=bad):
                data = default_data()
                data["exit_key_char_ctrl"] = bad
                config = AppConfig.from_json(data)
                self.assertEqual(config.key_for("exit"), "q")
                self.assertEqual(len(config.warnings), 1)

    def test_reserved_binding_falls_back(self):
        data = default_data()
        data["new_todo_char_ctrl"] = "m"
        config = AppConfig.from_json(data)
        self.assertEqual(config.key_for("new_todo"), "n")
        self.assertIn("reserved", config.warnings[0])

    def test_duplicate_binding_falls_back(self):
        data = default_data()
        data["new_note_char_ctrl"] = "h"
        config = AppConfig.from_json(data)
        self.assertEqual(config.key_for("new_sticky_note"), "h")
        self.assertEqual(config.key_for("new_note"), "k")
        self.assertIn("already bound", config.warnings[0])

    def test_fallback_collision_resets_all_bindings(self):
        data = default_data()
        # new_sticky_note takes 's', so save falls back to its own default 's'
        data["exit_key_char_ctrl"] = "x"
        data["new_sticky_note_char_ctrl"] = "s"
        data["save_state_to_db_char_ctrl"] = "s"
        config = AppConfig.from_json(data)
        self.assertEqual(len(set(config.bindings.values())), len(config.bindings))
        self.assertEqual(config.bindings, AppConfig.default().bindings)

    def test_default_browse_keys(self):
        config = AppConfig.default()
        self.assertEqual(config.browse_keys, {"mark_done": KEY_BACKSPACE,
                                              "remove_todo": KEY_DELETE})
        self.assertEqual(config.browse_action_for(KEY_BACKSPACE), "mark_done")
        self.assertEqual(config.browse_action_for(KEY_DELETE), "remove_todo")
        self.assertIsNone(config.browse_action_for(Key.of("x")))

    def test_browse_key_forms(self):
        for value, expected in (("Delete", KEY_DELETE),
                                ({"Char": "d"}, Key.of("d")),
                                ({"Ctrl": "d"}, Key.ctrl("d"))):
            with self.subTest(value=value):
                data = default_data()
                data["mark_done"] = value
                data["remove_todo"] = "Backspace"
                config = AppConfig.from_json(data)
                self.assertEqual(config.warnings, [])
                self.assertEqual(config.browse_keys["mark_done"], expected)
                self.assertEqual(config.to_json()["mark_done"], value)

    def test_invalid_browse_key_falls_back(self):
        for bad in ("Tab", {"Char": "ab"}, {"Char": " "}, {"Char": "\n"},
                    {"Ctrl": "D"}, {"Ctrl": "m"}, {"Char": "x", "Ctrl": "x"}, 3, None):
            with self.subTest(bad=bad):
                data = default_data()
                data["remove_todo"] = bad
                config = AppConfig.from_json(data)
                self.assertEqual(config.browse_keys["remove_todo"], KEY_DELETE)
                self.assertEqual(len(config.warnings), 1)

    def test_browse_key_clashing_with_ctrl_binding(self):
        data = default_data()
        data["mark_done"] = {"Ctrl": "s"}
        config = AppConfig.from_json(data)
        self.assertEqual(config.browse_keys["mark_done"], KEY_BACKSPACE)
        self.assertIn("already bound", config.warnings[0])

    def test_duplicate_browse_keys(self):
        data = default_data()
        data["remove_todo"] = "Backspace"
        config = AppConfig.from_json(data)
        self.assertEqual(config.browse_keys["remove_todo"], KEY_DELETE)
        self.assertEqual(len(config.warnings), 1)

    def test_browse_fallback_collision_resets_both(self):
        data = default_data()
        data["mark_done"] = "Delete"
        data["remove_todo"] = "Nope"
        config = AppConfig.from_json(data)
        self.assertEqual(config.browse_keys, AppConfig.default().browse_keys)
        self.assertEqual(len(config.warnings), 2)

    def test_bad_style_falls_back(self):
        data = default_data()
        data["app_colors"]["tabs"] = {"fg": "Nope", "bg": "Reset", "modifier": "BOLD"}
        config = AppConfig.from_json(data)
        self.assertEqual(config.colors["tabs"].fg, Color(name="Cyan"))
        self.assertEqual(len(config.warnings), 1)

    def test_bad_title_and_highlight_fall_back(self):
        data = default_data()
        data["title"] = 3
        data["highlight_string"] = ["x"]
        config = AppConfig.from_json(data)
        self.assertEqual(config.title, "Forget It")
        self.assertEqual(config.highlight_string, "✔")
        self.assertEqual(len(config.warnings), 2)


# ─────────────────────────────────────────────
#  File Loading Tests
# ─────────────────────────────────────────────

class TestMerge(unittest.TestCase):

    def test_complete_config_adds_nothing(self):
        merged, added = merge_with_defaults(default_data())
        self.assertEqual(merged, DEFAULT_CONFIG)
        self.assertFalse(added)

    def test_missing_keys_are_added(self):
        data = default_data()
        del data["highlight_string"]
        del data["app_colors"]["text"]
        data["title"] = "Mine"
        merged, added = merge_with_defaults(data)
        self.assertTrue(added)
        self.assertEqual(merged["title"], "Mine")
        self.assertEqual(merged["highlight_string"], "✔")
        self.assertEqual(merged["app_colors"]["text"], DEFAULT_CONFIG["app_colors"]["text"])

    def test_unknown_keys_are_dropped(self):
        data = default_data()
        data["something_else"] = 1
        merged, _ = merge_with_defaults(data)
        self.assertNotIn("something_else", merged)


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "sub" / "config.json"

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def read(self):
        return json.loads(self.path.read_text(encoding="utf-8"))

    def test_creates_default_file(self):
        config = load_config(self.path)
        self.assertTrue(self.path.exists())
        self.assertEqual(self.read(), DEFAULT_CONFIG)
        self.assertEqual(config.bindings, AppConfig.default().bindings)

    def test_reads_existing_file(self):
        data = default_data()
        data["title"] = "My Notes"
        self.write(data)
        self.assertEqual(load_config(self.path).title, "My Notes")

    def test_writes_back_missing_keys(self):
        self.write({"title": "Old"})
        config = load_config(self.path)
        self.assertEqual(config.title, "Old")
        saved = self.read()
        self.assertEqual(saved["title"], "Old")
        self.assertEqual(saved["exit_key_char_ctrl"], "q")
        self.assertIn("app_colors", saved)

    def test_invalid_json_uses_defaults_and_keeps_file(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{ not json", encoding="utf-8")
        config = load_config(self.path)
        self.assertEqual(config.title, "Forget It")
        self.assertEqual(len(config.warnings), 1)
        self.assertEqual(self.path.read_text(encoding="utf-8"), "{ not json")

    def test_non_object_root_uses_defaults(self):
        self.write([1, 2])
        config = load_config(self.path)
        self.assertEqual(config.bindings, AppConfig.default().bindings)
        self.assertEqual(len(config.warnings), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
