"""
Navigation menu.

Items are appended in order and never mutated afterwards. Each item renders
through a macro of the menu's own template file, so overriding the menu
template restyles its items too.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple, Union

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from formbridge.config import get_settings
from formbridge.context import PAGE_MARKER, PageContext, get_page_context

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


@lru_cache(maxsize=1)
def default_environment() -> Environment:
    return Environment(
        loader=PackageLoader("formbridge.menu", "templates"),
        autoescape=select_autoescape(["html"]),
    )


class MenuView:
    """A named piece of a menu rendered by one template macro."""

    def __init__(self, owner: "Menu", name: str, template: Optional[str] = None):
        self.owner = owner
        self.name = name
        self.template = template

    def default_template(self) -> Tuple[str, str]:
        raise NotImplementedError

    def template_source(self) -> Tuple[str, str]:
        file_name, macro = self.default_template()
        return file_name, self.template or macro

    def render(self) -> Markup:
        file_name, macro = self.template_source()
        return self.owner.call_macro(file_name, macro, **self.context())

    def context(self) -> Dict[str, Any]:
        return {}


class MenuItem(MenuView):
    def __init__(self, owner: "Menu", name: str, template: Optional[str] = None):
        super().__init__(owner, name, template)
        self.properties: Dict[str, Any] = {}

    def set_property(
        self, key: Union[str, Dict[str, Any]], value: Any = None
    ) -> "MenuItem":
        if value is None and isinstance(key, dict):
            for k, v in key.items():
                self.set_property(k, v)
            return self
        self.properties[key] = value
        return self

    def default_template(self) -> Tuple[str, str]:
        return self.owner.template_branch(), "MenuItem"

    def context(self) -> Dict[str, Any]:
        return dict(self.properties)


class MenuSeparator(MenuView):
    def default_template(self) -> Tuple[str, str]:
        return self.owner.template_branch(), "MenuSeparator"


class Menu:
    template_file = "menu.html"

    def __init__(
        self,
        name: str = "menu",
        *,
        page_context: Optional[PageContext] = None,
        environment: Optional[Environment] = None,
        app_info: Optional[Dict[str, Any]] = None,
    ):
        settings = get_settings()
        self.name = name
        self.page_context = page_context or get_page_context()
        self.environment = environment or default_environment()
        self.app_info: Dict[str, Any] = dict(app_info or {})
        self.current_menu_class = settings.MENU_ACTIVE_CLASS
        self.inactive_menu_class = settings.MENU_INACTIVE_CLASS
        self.controller: Any = None
        self._items: List[MenuView] = []
        self.last_item: Optional[MenuItem] = None

    @property
    def items(self) -> List[MenuView]:
        return list(self._items)

    def set_controller(self, controller: Any) -> "Menu":
        """Attach a controller that populates the menu via ``init_menu``."""
        self.controller = controller
        controller.init_menu(self)
        return self

    def default_template(self) -> Tuple[str, str]:
        return self.template_file, "Menu"

    def template_branch(self) -> str:
        return self.default_template()[0]

    def add_menu_item(self, label: str, href: Optional[str] = None) -> "Menu":
        if not href:
            href = self.default_href(label)
        item = MenuItem(self, f"{self.name}_{href}")
        item.set_property(
            {
                "page": href,
                "href": self.page_context.destination_url(href),
                "label": label,
                "css_class": (
                    self.current_menu_class
                    if self.is_current(href)
                    else self.inactive_menu_class
                ),
            }
        )
        self._items.append(item)
        self.last_item = item
        return self

    def default_href(self, label: str) -> str:
        href = _NON_ALNUM.sub("", label)
        if label.startswith(PAGE_MARKER):
            href = PAGE_MARKER + href
        return href

    def is_current(self, href: str) -> bool:
        page = self.page_context.page
        return (
            href == page
            or href == PAGE_MARKER + page
            or href + self.page_context.url_postfix == page
        )

    def add_separator(self, template: Optional[str] = None) -> "Menu":
        self._items.append(
            MenuSeparator(self, f"{self.name}_separator{len(self._items)}", template)
        )
        return self

    def call_macro(self, file_name: str, macro: str, **context: Any) -> Markup:
        module = self.environment.get_template(file_name).module
        return Markup(getattr(module, macro)(**context))

    def render(self) -> Markup:
        rendered = Markup("").join(item.render() for item in self._items)
        file_name, macro = self.default_template()
        logger.debug("Rendering menu %s with %d items", self.name, len(self._items))
        return self.call_macro(file_name, macro, items=rendered, app=self.app_info)


def menu_from_config(
    items: str,
    *,
    name: str = "menu",
    page_context: Optional[PageContext] = None,
    app_info: Optional[Dict[str, Any]] = None,
) -> Menu:
    """
    Build a menu from a comma-separated item list.

    Each entry is a label, ``label=target`` for an explicit target, or ``|``
    for a separator: ``"Home, Parts=part_list, |, ;Admin"``.
    """
    menu = Menu(name, page_context=page_context, app_info=app_info)
    for entry in items.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if entry == "|":
            menu.add_separator()
            continue
        label, _, href = entry.partition("=")
        menu.add_menu_item(label.strip(), href.strip() or None)
    return menu
