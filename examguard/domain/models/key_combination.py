"""Keyboard combination classification.

Maps a pressed key combination to the violation category it represents, if
any. Developer-tool shortcuts are separated from ordinary restricted
shortcuts (copy/paste, save, print, select-all, Alt+Tab).
"""

from __future__ import annotations

from dataclasses import dataclass

from examguard.domain.models.violation import ViolationCategory

_DEV_TOOLS_KEYS_CTRL_SHIFT = frozenset({"i", "j", "c"})
_RESTRICTED_KEYS_CTRL = frozenset({"s", "p", "a", "c", "v", "x"})


@dataclass(frozen=True)
class KeyCombination:
    """A key press with its modifier state, as reported by the client.

    ``key`` is the printable key or the key name ("F12", "Tab").
    """

    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    @classmethod
    def parse(cls, text: str) -> KeyCombination:
        """Parse a combination such as ``"Ctrl+Shift+I"`` or ``"F12"``.

        Raises:
            ValueError: If the text names no key.
        """
        parts = [part.strip() for part in text.split("+") if part.strip()]
        if not parts:
            raise ValueError(f"Empty key combination: {text!r}")
        modifiers = {part.lower() for part in parts[:-1]}
        return cls(
            key=parts[-1],
            ctrl="ctrl" in modifiers or "control" in modifiers,
            shift="shift" in modifiers,
            alt="alt" in modifiers,
            meta="meta" in modifiers or "cmd" in modifiers,
        )


def classify_key_combination(combo: KeyCombination) -> ViolationCategory | None:
    """Return the violation category for a key combination.

    Args:
        combo: The pressed combination.

    Returns:
        DEV_TOOLS for developer-tool shortcuts, KEYBOARD_SHORTCUT for other
        restricted shortcuts, None when the combination is allowed.
    """
    key = combo.key.lower()
    # Cmd is Ctrl on macOS.
    primary = combo.ctrl or combo.meta

    if key == "f12":
        return ViolationCategory.DEV_TOOLS
    if primary and combo.shift and key in _DEV_TOOLS_KEYS_CTRL_SHIFT:
        return ViolationCategory.DEV_TOOLS
    if primary and not combo.shift and key == "u":
        return ViolationCategory.DEV_TOOLS
    if combo.alt and key == "tab":
        return ViolationCategory.KEYBOARD_SHORTCUT
    if primary and not combo.shift and key in _RESTRICTED_KEYS_CTRL:
        return ViolationCategory.KEYBOARD_SHORTCUT
    return None
