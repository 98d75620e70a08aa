"""XML escaping and an indenting element writer.

The writer is a small line-oriented sink: callers open elements, write
text and close elements; indentation follows nesting depth. An element
that only holds text is written on a single line.
"""

from typing import Optional, TextIO

_ENTITIES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
})


def escape(text: str) -> str:
    """Replace XML reserved characters with their entities.

    Done in a single pass, so entities produced for one character are never
    escaped again (``&`` in ``&lt;`` stays as is).

    Args:
        text: Raw text.

    Returns:
        Text safe for element content and attribute values.
    """
    return text.translate(_ENTITIES)


class IndentingXmlWriter:
    """Write XML elements to a text stream, indenting by nesting depth.

    The writer emits raw text: callers are responsible for escaping
    model-derived values with :func:`escape`.

    Args:
        out: Stream to write to.
        indent: Indentation unit for each nesting level.
    """

    def __init__(self, out: TextIO, indent: str = "    "):
        self.out = out
        self.indent = indent
        self._stack = []
        # Most recently opened element whose start tag is not written yet.
        self._pending = None
        self._pending_text = None
        self._break = False

    @property
    def depth(self) -> int:
        return len(self._stack)

    def declaration(self, version: str = "1.0", encoding: str = "UTF-8"):
        if self._stack:
            raise ValueError("XML declaration must precede the root element")
        self.out.write(f'<?xml version="{version}" encoding="{encoding}"?>\n')

    def open_element(self, name: str, attributes: Optional[dict] = None):
        self._flush_pending()
        if self._break:
            self.out.write("\n")
            self._break = False
        tag = name
        for key, value in (attributes or {}).items():
            tag += f' {key}="{value}"'
        self._pending = tag
        self._stack.append(name)

    def write_text(self, text: str):
        if self._pending is None:
            raise ValueError("Text must directly follow an opened element")
        self._pending_text = (self._pending_text or "") + text

    def close_element(self, name: str):
        if not self._stack or self._stack[-1] != name:
            current = self._stack[-1] if self._stack else None
            raise ValueError(f"Cannot close <{name}>, current element is <{current}>")
        self._stack.pop()
        self._break = False
        if self._pending is not None:
            if self._pending_text is None:
                self._line(f"<{self._pending}/>")
            else:
                self._line(f"<{self._pending}>{self._pending_text}</{name}>")
            self._pending = None
            self._pending_text = None
        else:
            self._line(f"</{name}>")

    def empty_element(self, name: str):
        self.open_element(name)
        self.close_element(name)

    def section_break(self):
        """Write a blank line before the next element opened at this depth.

        Dropped if the enclosing element closes first, so a break never
        trails the last child.
        """
        self._flush_pending()
        self._break = True

    def flush(self):
        self.out.flush()

    def _flush_pending(self):
        if self._pending is None:
            return
        if self._pending_text is not None:
            raise ValueError(f"Element <{self._stack[-1]}> cannot mix text and child elements")
        # The pending element is already on the stack, one level deeper.
        self.out.write(f"{self.indent * (len(self._stack) - 1)}<{self._pending}>\n")
        self._pending = None

    def _line(self, content: str):
        self.out.write(f"{self.indent * len(self._stack)}{content}\n")
