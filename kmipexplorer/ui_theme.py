"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the chrome (banner, tabs, table, modals) and the
per-state row styles. JSON highlighting in the material viewer uses a
separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass

from .directory_model.rows import (
    STYLE_ACTIVE,
    STYLE_COMPROMISED,
    STYLE_DEACTIVATED,
    STYLE_DESTROYED,
    STYLE_DESTROYED_COMPROMISED,
)


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    border: str
    title: str
    banner_label: str
    banner_key: str
    logo: str
    notice: str
    tab_active: str
    tab_inactive: str
    header: str
    attribute_name: str
    attribute_field: str
    error_box: str
    button_focused: str
    button_disabled: str
    state_active: str
    state_deactivated: str
    state_compromised: str
    state_destroyed: str
    state_destroyed_compromised: str

    def state_color(self, style: str) -> str:
        """Return the row color for a state style tag (empty for untagged rows)."""
        return {
            STYLE_ACTIVE: self.state_active,
            STYLE_DEACTIVATED: self.state_deactivated,
            STYLE_COMPROMISED: self.state_compromised,
            STYLE_DESTROYED: self.state_destroyed,
            STYLE_DESTROYED_COMPROMISED: self.state_destroyed_compromised,
        }.get(style, "")


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    border="\033[38;5;45m",
    title="\033[1;38;5;45m",
    banner_label="\033[1;38;5;214m",
    banner_key="\033[1;38;5;39m",
    logo="\033[38;5;214m",
    notice="\033[1;38;5;42m",
    tab_active="\033[1;7;38;5;45m",
    tab_inactive="\033[38;5;250m",
    header="\033[1;38;5;229m",
    attribute_name="\033[38;5;42m",
    attribute_field="\033[38;5;227m",
    error_box="\033[1;97;41m",
    button_focused="\033[1;7m",
    button_disabled="\033[2;38;5;244m",
    state_active="\033[38;5;42m",
    state_deactivated="\033[38;5;244m",
    state_compromised="\033[38;5;208m",
    state_destroyed="\033[38;5;160m",
    state_destroyed_compromised="\033[38;5;124m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2;38;5;110m",
    border="\033[38;5;39m",
    title="\033[1;38;5;39m",
    banner_label="\033[1;38;5;45m",
    banner_key="\033[1;38;5;153m",
    logo="\033[38;5;45m",
    notice="\033[1;38;5;84m",
    tab_active="\033[1;7;38;5;39m",
    tab_inactive="\033[38;5;153m",
    header="\033[1;38;5;117m",
    attribute_name="\033[38;5;84m",
    attribute_field="\033[38;5;153m",
    error_box="\033[1;97;48;5;88m",
    button_focused="\033[1;7m",
    button_disabled="\033[2;38;5;110m",
    state_active="\033[38;5;84m",
    state_deactivated="\033[38;5;110m",
    state_compromised="\033[38;5;215m",
    state_destroyed="\033[38;5;203m",
    state_destroyed_compromised="\033[38;5;167m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    dim="",
    border="",
    title="",
    banner_label="",
    banner_key="",
    logo="",
    notice="",
    tab_active="",
    tab_inactive="",
    header="",
    attribute_name="",
    attribute_field="",
    error_box="",
    button_focused="",
    button_disabled="",
    state_active="",
    state_deactivated="",
    state_compromised="",
    state_destroyed="",
    state_destroyed_compromised="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "UITheme",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
