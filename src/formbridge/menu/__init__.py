from formbridge.menu.menu import (
    Menu,
    MenuItem,
    MenuSeparator,
    default_environment,
    menu_from_config,
)

__all__ = [
    "Menu",
    "MenuItem",
    "MenuSeparator",
    "default_environment",
    "menu_from_config",
]
