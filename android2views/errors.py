# android2views/errors.py
from typing import Optional


class LayoutError(Exception):
    """
    One layout file could not be converted.
    file / variant / path (element path inside the file) / line are folded into the message.
    """

    def __init__(self, message: str, file: Optional[str] = None,
                 variant: Optional[str] = None, path: Optional[str] = None,
                 line: Optional[int] = None):
        self.message = message
        self.file = file
        self.variant = variant
        self.path = path
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.file:
            where.append(f"file={self.file}")
        if self.variant is not None:
            where.append(f"variant={self.variant or '<default>'}")
        if self.path:
            where.append(f"element={self.path}")
        if self.line:
            where.append(f"line={self.line}")
        return f"{self.message} ({', '.join(where)})" if where else self.message

    def with_context(self, file: Optional[str] = None, variant: Optional[str] = None):
        """Fill in file/variant if the raiser did not know them."""
        if file is not None and self.file is None:
            self.file = file
        if variant is not None and self.variant is None:
            self.variant = variant
        self.args = (self._format(),)
        return self


class MalformedLayoutError(LayoutError):
    """XML syntax error, missing structural attribute, or ambiguous identifier."""


class UnresolvedReferenceError(LayoutError):
    """Style or sublayout reference that names nothing."""
