from __future__ import annotations


class ParseError:
    """Represents a parse error reported by the HTML parser, with location information."""

    __slots__ = ("code", "column", "line", "message")

    def __init__(self, code: str, line: int | None = None, column: int | None = None, message: str | None = None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code

    def __repr__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # type: ignore[assignment]


class StrictModeError(SyntaxError):
    """Raised in strict mode when the input fragment has parse errors."""

    def __init__(self, error: ParseError):
        self.error = error
        super().__init__(str(error))
        if error.line is not None:
            self.lineno = error.line
        if error.column is not None:
            self.offset = error.column
