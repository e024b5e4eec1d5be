from __future__ import annotations

import logging
from typing import Any, Dict

from textual.theme import Theme

logger = logging.getLogger("spaceflight")

# --- Theme Configuration ---
DEFAULT_THEMES: Dict[str, Theme] = {
    "spaceflight-dark": Theme(
        name="spaceflight-dark",
        primary="#4F8EF7",
        secondary="#7B61FF",
        accent="#FFB347",
        foreground="#E6E9F2",
        background="#0B0D17",
        surface="#151A2D",
        panel="#1F2640",
        success="#4CD964",
        warning="#FFCC00",
        error="#FF3B30",
        dark=True,
    ),
    "spaceflight-light": Theme(
        name="spaceflight-light",
        primary="#1F5FD1",
        secondary="#5B3FD9",
        accent="#D9822B",
        foreground="#1C1C1E",
        background="#F4F6FB",
        surface="#FFFFFF",
        panel="#E3E8F4",
        success="#248A3D",
        warning="#B25000",
        error="#D70015",
        dark=False,
    ),
}


def load_themes(config: Dict[str, Any]) -> Dict[str, Theme]:
    """Return the built-in themes merged with theme definitions from config."""
    themes = DEFAULT_THEMES.copy()

    for name, definition in config.get("themes", {}).items():
        try:
            themes[name] = Theme(name=name, **definition)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid theme definition for '%s': %s", name, e)

    return themes
