from typing import Protocol


class Pasteboard(Protocol):
    def change_count(self) -> int: ...

    def read_text(self) -> str | None: ...

    def write_text(self, text: str) -> None: ...


class MacPasteboard:
    """The general system pasteboard, accessed through pyobjc."""

    def __init__(self):
        from AppKit import NSPasteboard, NSPasteboardTypeString

        self._pasteboard = NSPasteboard.generalPasteboard()
        self._string_type = NSPasteboardTypeString

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def read_text(self) -> str | None:
        text = self._pasteboard.stringForType_(self._string_type)
        return str(text) if text is not None else None

    def write_text(self, text: str) -> None:
        self._pasteboard.clearContents()
        if not self._pasteboard.setString_forType_(text, self._string_type):
            raise OSError("pasteboard rejected string write")
