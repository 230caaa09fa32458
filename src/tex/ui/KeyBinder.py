# tex/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Turns the raw byte stream coming from the terminal into logical keys, and
logical keys into editor actions.

Key Features:
- `decode_key` reads one key from a byte source: plain bytes pass through,
  CSI (``ESC [``) and SS3 (``ESC O``) sequences for the navigation keys are
  mapped to key codes of 1000 and above, and anything incomplete or
  unrecognised degrades to a literal ESC.
- `KeyBinder` loads the user-configurable bindings (quit, save, find,
  refresh), merges them with the fixed editing keys and dispatches keys to
  the editor.
- Every decoded key is written to the ``tex.keyevents`` trace logger.

Intended Usage:
---------------
Instantiate KeyBinder with a reference to the main Tex instance. Use
get_key_input to read a key from the terminal and handle_input to dispatch it.
"""

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from tex.ui.TerminalAppMode import TerminalError
from tex.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from tex.core.Tex import Tex


# ==================== Key codes ====================
CTRL_H = 8
TAB = 9
ENTER = 13
ESC = 27
BACKSPACE = 127

# Navigation keys live above every byte value so they never collide with input.
ARROW_LEFT = 1000
ARROW_RIGHT = 1001
ARROW_UP = 1002
ARROW_DOWN = 1003
DEL_KEY = 1004
HOME_KEY = 1005
END_KEY = 1006
PAGE_UP = 1007
PAGE_DOWN = 1008

ARROW_KEYS = (ARROW_LEFT, ARROW_RIGHT, ARROW_UP, ARROW_DOWN)

# Byte after ``ESC [``.
CSI_SIMPLE_MAP: dict[int, int] = {
    ord("A"): ARROW_UP,
    ord("B"): ARROW_DOWN,
    ord("C"): ARROW_RIGHT,
    ord("D"): ARROW_LEFT,
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}

# Digit in ``ESC [ <digit> ~``.
CSI_TILDE_MAP: dict[int, int] = {
    ord("1"): HOME_KEY,
    ord("3"): DEL_KEY,
    ord("4"): END_KEY,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
    ord("7"): HOME_KEY,
    ord("8"): END_KEY,
}

# Byte after ``ESC O``.
SS3_SIMPLE_MAP: dict[int, int] = {
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}

KEY_NAMES: dict[int, str] = {
    ARROW_LEFT: "left",
    ARROW_RIGHT: "right",
    ARROW_UP: "up",
    ARROW_DOWN: "down",
    DEL_KEY: "del",
    HOME_KEY: "home",
    END_KEY: "end",
    PAGE_UP: "pageup",
    PAGE_DOWN: "pagedown",
    BACKSPACE: "backspace",
    ENTER: "enter",
    ESC: "esc",
    TAB: "tab",
}

NAMED_KEYS: dict[str, int] = {
    **{name: code for code, name in KEY_NAMES.items()},
    "delete": DEL_KEY,
    "pgup": PAGE_UP,
    "pgdn": PAGE_DOWN,
    "escape": ESC,
    "return": ENTER,
}


def ctrl_key(ch: str) -> int:
    """Returns the byte a terminal sends for Ctrl+`ch`."""
    return ord(ch) & 0x1F


def key_name(key: int) -> str:
    """Human-readable name of a key code, for logs and help text."""
    if key in KEY_NAMES:
        return KEY_NAMES[key]
    if 0 < key < 32:
        return f"ctrl+{chr(key + 64).lower()}"
    if 32 <= key < 127:
        return repr(chr(key))
    return str(key)


def decode_key(read_byte: Callable[[], Optional[int]]) -> int:
    """
    Reads exactly one logical key from `read_byte`.

    `read_byte` returns the next input byte, or None when no byte is
    available. A missing first byte means the input is gone and raises
    `TerminalError`; a missing continuation byte turns the sequence into a
    plain ESC.
    """
    ch = read_byte()
    if ch is None:
        raise TerminalError("end of input while waiting for a key")
    if ch != ESC:
        return ch

    seq0 = read_byte()
    seq1 = read_byte()
    if seq0 is None or seq1 is None:
        return ESC

    if seq0 == ord("["):
        simple = CSI_SIMPLE_MAP.get(seq1)
        if simple is not None:
            return simple
        if ord("0") <= seq1 <= ord("9"):
            seq2 = read_byte()
            if seq2 == ord("~"):
                mapped = CSI_TILDE_MAP.get(seq1)
                if mapped is not None:
                    return mapped
            logging.warning(
                "decode_key: unknown escape sequence: ESC [ %r %r", chr(seq1), seq2
            )
            return ESC
    elif seq0 == ord("O"):
        mapped = SS3_SIMPLE_MAP.get(seq1)
        if mapped is not None:
            return mapped

    logging.warning("decode_key: unknown escape sequence: ESC %r %r", chr(seq0), chr(seq1))
    return ESC


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps logical keys to editor actions.

    The configurable actions (quit, save_file, find, refresh) come from the
    ``[keybindings]`` table of the configuration; the editing keys (arrows,
    Home/End, Page Up/Down, Backspace, Delete, Enter, ESC) are fixed. A
    configured binding that collides with a fixed key takes precedence.

    Attributes:
        editor (Tex): The editor whose actions are dispatched.
        config: Editor configuration.
        keybindings (dict): Action name to list of key codes, for the configurable actions.
        action_map (dict): Key code to callable.
        handle_input(key): Dispatches one key.
        get_key_input(): Reads one key from the editor's terminal.
    """

    DEFAULT_KEYBINDINGS: dict[str, str] = {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "refresh": "ctrl+l",
    }

    def __init__(self, editor: "Tex"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: int) -> None:
        """Processes a single key event and triggers the corresponding editor action.

        Quit keys go to `Tex.exit_editor`, which owns the confirmation
        countdown. Every other key, handled or not, re-arms that countdown.
        """
        if key in self.keybindings.get("quit", []):
            self.editor.exit_editor()
            return

        action = self.action_map.get(key)
        if action is not None:
            logging.debug("handle_input: key %s -> %s", key_name(key), getattr(action, "__name__", action))
            action()
        elif key == TAB or 32 <= key < 127:
            self.editor.insert_char(key)
        else:
            logging.debug("handle_input: ignored key %s", key_name(key))

        self.editor.reset_quit_counter()

    def _load_keybindings(self) -> dict[str, list[int]]:
        """Loads the configurable bindings, keeping the default for every invalid entry.

        Returns:
            dict[str, list[int]]: Action name to the key codes that trigger it.
        """
        user_keybindings_config: dict[str, Any] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int]] = {}

        for action, default_spec in self.DEFAULT_KEYBINDINGS.items():
            spec = user_keybindings_config.get(action, default_spec)
            specs_to_process = self._split_spec(spec)

            key_codes_for_action: list[int] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.warning(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This binding will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if not key_codes_for_action:
                logging.warning(
                    "No valid key codes for action %r; using default %r.", action, default_spec
                )
                key_codes_for_action = [self._decode_keystring(default_spec)]

            parsed_keybindings[action] = key_codes_for_action

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    @staticmethod
    def _split_spec(spec: Any) -> list[Any]:
        if isinstance(spec, list):
            return spec
        if isinstance(spec, str) and "|" in spec:
            return [s.strip() for s in spec.split("|")]
        return [spec]

    def _decode_keystring(self, key_input: str | int) -> int:
        """Decodes a key specification into a key code.

        Accepts ``ctrl+<letter>``, a named key (``esc``, ``del``, ``pageup``,
        ...) or an integer code. Bindings must be control bytes or navigation
        keys, so that no printable character is ever swallowed.

        Raises:
            ValueError: If the specification is empty, unknown or printable.
        """
        if isinstance(key_input, bool):
            raise ValueError(f"Invalid key specification: {key_input!r}")

        if isinstance(key_input, int):
            code = key_input
        elif isinstance(key_input, str):
            s = key_input.strip().lower()
            if not s:
                raise ValueError("Key string cannot be empty.")
            if s in NAMED_KEYS:
                code = NAMED_KEYS[s]
            elif s.startswith(("ctrl+", "ctrl-", "^")):
                base = s[1:] if s.startswith("^") else s[5:]
                if len(base) != 1 or not ("a" <= base <= "z" or base in "[\\]^_"):
                    raise ValueError(f"Unknown ctrl key: {key_input!r}")
                code = ctrl_key(base)
            else:
                raise ValueError(f"Unknown key: {key_input!r}")
        else:
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        if not (0 <= code < 32 or code == BACKSPACE or code in KEY_NAMES):
            raise ValueError(f"Key {key_input!r} is not a control or navigation key.")
        return code

    def _setup_action_map(self) -> dict[int, Callable[..., Any]]:
        """Builds the key code to action mapping from the fixed keys and the bindings."""
        logging.debug("Setting up action map for KeyBinder.")

        action_map: dict[int, Callable[..., Any]] = {
            key: functools.partial(self.editor.move_cursor, key) for key in ARROW_KEYS
        }
        action_map.update(
            {
                HOME_KEY: self.editor.handle_home,
                END_KEY: self.editor.handle_end,
                PAGE_UP: functools.partial(self.editor.handle_page, PAGE_UP),
                PAGE_DOWN: functools.partial(self.editor.handle_page, PAGE_DOWN),
                BACKSPACE: self.editor.handle_backspace,
                CTRL_H: self.editor.handle_backspace,
                DEL_KEY: self.editor.handle_delete,
                ENTER: self.editor.insert_newline,
                ESC: self.editor.noop,
            }
        )

        action_to_method_map: dict[str, Callable[..., Any]] = {
            "save_file": self.editor.save_file,
            "find": self.editor.find,
            "refresh": self.editor.noop,
        }
        for action, method in action_to_method_map.items():
            for key_code in self.keybindings.get(action, []):
                if key_code in action_map and action_map[key_code] is not method:
                    logging.warning(
                        "Binding %s to %r overrides a built-in key.", key_name(key_code), action
                    )
                action_map[key_code] = method
        return action_map

    def get_key_input(self) -> int:
        """Reads a single key from the editor's terminal."""
        key = decode_key(self.editor.terminal.read_byte)
        KEY_LOGGER.debug("key %d (%s)", key, key_name(key))
        return key

    def label(self, action: str) -> str:
        """Display label of the first key bound to `action`, e.g. ``Ctrl-S``."""
        codes = self.keybindings.get(action)
        if not codes:
            return "?"
        name = key_name(codes[0])
        if name.startswith("ctrl+"):
            return "Ctrl-" + name[5:].upper()
        return name.capitalize()
