"""Menu model for the status bar app, kept free of rumps so it can be tested anywhere."""
from dataclasses import dataclass, field
from typing import Callable

from clipstash.config import ICON_OPTIONS, LONG_CONTENT_THRESHOLD, MAX_ITEMS_LIMIT, MIN_ITEMS
from clipstash.models import ClipboardItem

ENTRY_KEY_PREFIX = "clipstash_entry_"
PINNED_KEY_PREFIX = "clipstash_pinned_"
MAX_ITEMS_CHOICES = tuple(range(MIN_ITEMS, MAX_ITEMS_LIMIT + 1, 5))


@dataclass
class MenuItemSpec:
    """Specification for a menu item, separating logic from rumps rendering."""

    title: str
    callback: Callable | None = None
    key: str | None = None
    payload: object = None
    state: bool | None = None
    is_submenu: bool = False
    children: list["MenuItemSpec | None"] = field(default_factory=list)


@dataclass
class MenuActions:
    on_entry_click: Callable
    on_pinned_click: Callable
    on_clear_pinned: Callable
    on_set_max_items: Callable
    on_set_icon: Callable
    on_toggle_timestamps: Callable
    on_reset_settings: Callable
    on_clear: Callable
    on_quit: Callable


def entry_title(item: ClipboardItem, show_timestamps: bool, pinned: bool = False) -> str:
    parts = [f"{item.item_type.glyph} {item.display_content}"]
    if show_timestamps:
        parts.append(item.created_at.strftime("%H:%M"))
    if len(item.content) > LONG_CONTENT_THRESHOLD:
        parts.append(f"{len(item.content)} chars")
    title = " · ".join(parts)
    return f"📌 {title}" if pinned else title


def compute_menu_specs(
    history: list[ClipboardItem],
    pinned: list[ClipboardItem],
    max_items: int,
    menu_bar_icon: str,
    show_timestamps: bool,
    actions: MenuActions,
) -> list[MenuItemSpec | None]:
    specs: list[MenuItemSpec | None] = [
        MenuItemSpec("Clipboard Manager"),
        None,  # separator
    ]

    if pinned:
        pinned_children: list[MenuItemSpec | None] = [
            MenuItemSpec(
                entry_title(item, show_timestamps),
                callback=actions.on_pinned_click,
                key=f"{PINNED_KEY_PREFIX}{item.id}",
            )
            for item in pinned
        ]
        pinned_children.append(None)
        pinned_children.append(MenuItemSpec("Clear Pinned", callback=actions.on_clear_pinned))
        specs.append(MenuItemSpec("📌 Pinned", is_submenu=True, children=pinned_children))
        specs.append(None)

    if not history:
        specs.append(MenuItemSpec("No clipboard items yet"))
    else:
        pinned_contents = {item.content for item in pinned}
        for item in history:
            specs.append(
                MenuItemSpec(
                    entry_title(item, show_timestamps, pinned=item.content in pinned_contents),
                    callback=actions.on_entry_click,
                    key=f"{ENTRY_KEY_PREFIX}{item.id}",
                )
            )

    specs.extend([
        None,
        MenuItemSpec(f"Items: {len(history)}/{max_items}"),
        compute_settings_spec(max_items, menu_bar_icon, show_timestamps, actions),
        None,
        MenuItemSpec("Clear All", callback=actions.on_clear if history else None),
        MenuItemSpec("Quit", callback=actions.on_quit),
    ])
    return specs


def compute_settings_spec(
    max_items: int, menu_bar_icon: str, show_timestamps: bool, actions: MenuActions
) -> MenuItemSpec:
    max_children: list[MenuItemSpec | None] = [
        MenuItemSpec(f"{n} items", callback=actions.on_set_max_items, payload=n, state=n == max_items)
        for n in MAX_ITEMS_CHOICES
    ]
    icon_children: list[MenuItemSpec | None] = [
        MenuItemSpec(icon, callback=actions.on_set_icon, payload=icon, state=icon == menu_bar_icon)
        for icon in ICON_OPTIONS
    ]
    return MenuItemSpec(
        "Settings",
        is_submenu=True,
        children=[
            MenuItemSpec("Max Items", is_submenu=True, children=max_children),
            MenuItemSpec("Menu Bar Icon", is_submenu=True, children=icon_children),
            MenuItemSpec("Show Timestamps", callback=actions.on_toggle_timestamps, state=show_timestamps),
            None,
            MenuItemSpec("Reset to Defaults", callback=actions.on_reset_settings),
        ],
    )
