"""Tokens, source spans and the cursor the parsers walk a token stream with."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Span:
    """A half-open byte range ``[start, end)`` in the source text."""

    start: int
    end: int

    def merge(self, other: Span) -> Span:
        """Return the smallest span covering both ``self`` and ``other``."""
        return Span(min(self.start, other.start), max(self.end, other.end))


DUMMY_SPAN = Span(0, 0)


class TokenKind(Enum):
    """Every kind of token; the value is how the kind reads in messages."""

    # Literals and names
    NUMBER = "number literal"
    STRING = "string literal"
    IDENT = "identifier"
    TEMPLATE_HEAD = "template head"
    TEMPLATE_MIDDLE = "template middle"
    TEMPLATE_TAIL = "template tail"
    NO_SUBST_TEMPLATE = "template literal"

    # Punctuation
    L_BRACE = "{"
    R_BRACE = "}"
    L_PAREN = "("
    R_PAREN = ")"
    L_BRACKET = "["
    R_BRACKET = "]"
    SEMICOLON = ";"
    COLON = ":"
    COMMA = ","
    DOT = "."
    DOT_DOT_DOT = "..."
    QUESTION_DOT = "?."
    QUESTION = "?"
    ARROW = "=>"

    # Assignment operators
    EQ = "="
    PLUS_EQ = "+="
    MINUS_EQ = "-="
    STAR_EQ = "*="
    SLASH_EQ = "/="
    PERCENT_EQ = "%="
    STAR_STAR_EQ = "**="
    AMP_AMP_EQ = "&&="
    PIPE_PIPE_EQ = "||="
    QUESTION_QUESTION_EQ = "??="
    AMP_EQ = "&="
    PIPE_EQ = "|="
    CARET_EQ = "^="
    LT_LT_EQ = "<<="
    GT_GT_EQ = ">>="
    GT_GT_GT_EQ = ">>>="

    # Binary and unary operators
    STAR_STAR = "**"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    PLUS = "+"
    MINUS = "-"
    LT_LT = "<<"
    GT_GT = ">>"
    GT_GT_GT = ">>>"
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="
    EQ_EQ = "=="
    BANG_EQ = "!="
    EQ_EQ_EQ = "==="
    BANG_EQ_EQ = "!=="
    AMP = "&"
    CARET = "^"
    PIPE = "|"
    AMP_AMP = "&&"
    PIPE_PIPE = "||"
    QUESTION_QUESTION = "??"
    BANG = "!"
    TILDE = "~"
    PLUS_PLUS = "++"
    MINUS_MINUS = "--"

    # Statement keywords
    KW_CONST = "const"
    KW_LET = "let"
    KW_VAR = "var"
    KW_IF = "if"
    KW_ELSE = "else"
    KW_WHILE = "while"
    KW_DO = "do"
    KW_FOR = "for"
    KW_AWAIT = "await"
    KW_IN = "in"
    KW_OF = "of"
    KW_RETURN = "return"
    KW_THROW = "throw"
    KW_BREAK = "break"
    KW_CONTINUE = "continue"
    KW_TRY = "try"
    KW_CATCH = "catch"
    KW_FINALLY = "finally"
    KW_SWITCH = "switch"
    KW_CASE = "case"
    KW_DEFAULT = "default"
    KW_FUNCTION = "function"
    KW_CLASS = "class"
    KW_EXTENDS = "extends"
    KW_IMPORT = "import"
    KW_EXPORT = "export"
    KW_FROM = "from"
    KW_AS = "as"
    KW_NATIVE = "native"
    KW_DECLARE = "declare"
    KW_ASYNC = "async"
    KW_STATIC = "static"
    KW_PUBLIC = "public"
    KW_PRIVATE = "private"
    KW_PROTECTED = "protected"

    # Expression keywords
    KW_TRUE = "true"
    KW_FALSE = "false"
    KW_NULL = "null"
    KW_UNDEFINED = "undefined"
    KW_THIS = "this"
    KW_NEW = "new"
    KW_TYPEOF = "typeof"
    KW_VOID = "void"
    KW_DELETE = "delete"
    KW_INSTANCEOF = "instanceof"

    # Type keywords
    KW_NUMBER = "number"
    KW_STRING = "string"
    KW_BOOLEAN = "boolean"
    KW_BIGINT = "bigint"
    KW_SYMBOL = "symbol"
    KW_NEVER = "never"
    KW_UNKNOWN = "unknown"
    KW_ANY = "any"
    KW_OBJECT = "object"

    EOF = "end of file"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """One token; ``value`` holds the text of names, literals and templates."""

    kind: TokenKind
    span: Span
    value: str = ""
    has_preceding_newline: bool = False


class ParseError(Exception):
    """A syntax error at a location in the source."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        return self.message


class TokenCursor:
    """A position in a token stream that ends with an ``EOF`` token."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: Sequence[Token] = tuple(tokens)
        if not self.tokens or self.tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token stream must end with an EOF token")
        self.pos = 0

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self.tokens[self.pos]

    def peek_ahead(self, n: int) -> Token:
        """Return the token ``n`` places ahead, stopping at the last one."""
        return self.tokens[min(self.pos + n, len(self.tokens) - 1)]

    def advance(self) -> Token:
        """Consume the current token unless at the end; return the consumed one."""
        if not self.is_at_end():
            self.pos += 1
        return self.tokens[max(self.pos - 1, 0)]

    def expect(self, kind: TokenKind) -> Token:
        """Consume a token of ``kind`` or raise ``ParseError``."""
        tok = self.peek()
        if tok.kind is kind:
            return self.advance()
        raise ParseError(f"Expected {kind}, found {tok.kind}", tok.span)

    def match_kind(self, kind: TokenKind) -> bool:
        """Consume the current token if it is of ``kind``; report whether it was."""
        if self.peek().kind is kind:
            self.advance()
            return True
        return False

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF