"""Parsing of type annotations from a token stream."""

from __future__ import annotations

from typing import Callable

from .ast import (
    ArrayType,
    Expr,
    FunctionTypeNode,
    IntersectionType,
    KeywordType,
    KeywordTypeKind,
    LiteralBoolType,
    LiteralNumberType,
    LiteralStringType,
    Param,
    ParenType,
    TupleType,
    TypeNode,
    TypeRef,
    UnionType,
)
from .tokens import ParseError, TokenCursor, TokenKind

_KEYWORD_TYPES = {
    TokenKind.KW_NUMBER: KeywordTypeKind.NUMBER,
    TokenKind.KW_STRING: KeywordTypeKind.STRING,
    TokenKind.KW_BOOLEAN: KeywordTypeKind.BOOLEAN,
    TokenKind.KW_BIGINT: KeywordTypeKind.BIGINT,
    TokenKind.KW_SYMBOL: KeywordTypeKind.SYMBOL,
    TokenKind.KW_NULL: KeywordTypeKind.NULL,
    TokenKind.KW_UNDEFINED: KeywordTypeKind.UNDEFINED,
    TokenKind.KW_VOID: KeywordTypeKind.VOID,
    TokenKind.KW_NEVER: KeywordTypeKind.NEVER,
    TokenKind.KW_UNKNOWN: KeywordTypeKind.UNKNOWN,
    TokenKind.KW_ANY: KeywordTypeKind.ANY,
    TokenKind.KW_OBJECT: KeywordTypeKind.OBJECT,
}


def _number_literal_value(text: str) -> float:
    """Decimal float text as a number; anything unreadable counts as 0."""
    if "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


class TypeParser(TokenCursor):
    """Parses type annotations: keywords, literals, references, arrays,
    tuples, function types, unions and intersections."""

    def parse_type_node(self) -> TypeNode:
        """Parse a full type, including ``|`` and ``&`` combinations."""
        left = self._parse_primary_type()
        while True:
            kind = self.peek().kind
            if kind is TokenKind.PIPE:
                left = self._parse_combined(left, kind, UnionType)
            elif kind is TokenKind.AMP:
                left = self._parse_combined(left, kind, IntersectionType)
            else:
                return left

    def _parse_combined(
        self,
        first: TypeNode,
        separator: TokenKind,
        build: Callable[..., TypeNode],
    ) -> TypeNode:
        self.advance()
        types = [first, self._parse_primary_type()]
        while self.match_kind(separator):
            types.append(self._parse_primary_type())
        return build(tuple(types), first.span.merge(types[-1].span))

    def _parse_primary_type(self) -> TypeNode:
        ty = self._parse_base_type()
        while self.match_kind(TokenKind.L_BRACKET):
            self.expect(TokenKind.R_BRACKET)
            ty = ArrayType(ty)
        return ty

    def _parse_base_type(self) -> TypeNode:
        tok = self.peek()
        kind = tok.kind

        keyword = _KEYWORD_TYPES.get(kind)
        if keyword is not None:
            return KeywordType(keyword, self.advance().span)

        if kind is TokenKind.NUMBER:
            self.advance()
            return LiteralNumberType(_number_literal_value(tok.value), tok.span)
        if kind is TokenKind.STRING:
            self.advance()
            return LiteralStringType(tok.value, tok.span)
        if kind is TokenKind.KW_TRUE:
            return LiteralBoolType(True, self.advance().span)
        if kind is TokenKind.KW_FALSE:
            return LiteralBoolType(False, self.advance().span)
        if kind is TokenKind.IDENT:
            return self._parse_type_ref()
        if kind is TokenKind.L_PAREN:
            if self._function_type_ahead():
                return self._parse_function_type()
            start = self.advance().span
            inner = self.parse_type_node()
            end = self.expect(TokenKind.R_PAREN).span
            return ParenType(inner, start.merge(end))
        if kind is TokenKind.L_BRACKET:
            return self._parse_tuple_type()

        raise ParseError(f"Expected type node, found {kind}", tok.span)

    def _parse_type_ref(self) -> TypeRef:
        name = self.advance()
        if not self.match_kind(TokenKind.LT):
            return TypeRef(name.value, None, name.span)
        args: list[TypeNode] = []
        while self.peek().kind is not TokenKind.GT and not self.is_at_end():
            args.append(self.parse_type_node())
            if not self.match_kind(TokenKind.COMMA):
                break
        close = self.expect(TokenKind.GT)
        if not args:
            raise ParseError("Expected at least one type argument", close.span)
        return TypeRef(name.value, tuple(args), name.span.merge(args[-1].span))

    def _parse_tuple_type(self) -> TupleType:
        start = self.advance().span
        elements: list[TypeNode] = []
        while self.peek().kind is not TokenKind.R_BRACKET and not self.is_at_end():
            elements.append(self.parse_type_node())
            if not self.match_kind(TokenKind.COMMA):
                break
        end = self.expect(TokenKind.R_BRACKET).span
        return TupleType(tuple(elements), start.merge(end))

    def _function_type_ahead(self) -> bool:
        """Whether the ``(`` at the cursor opens a ``(params) => T`` type."""
        saved = self.pos
        try:
            self.advance()
            depth = 1
            while depth > 0 and not self.is_at_end():
                kind = self.advance().kind
                if kind is TokenKind.L_PAREN:
                    depth += 1
                elif kind is TokenKind.R_PAREN:
                    depth -= 1
            return self.peek().kind is TokenKind.ARROW
        finally:
            self.pos = saved

    def _parse_function_type(self) -> FunctionTypeNode:
        start = self.peek().span
        self.expect(TokenKind.L_PAREN)
        params: list[Param] = []
        while self.peek().kind is not TokenKind.R_PAREN and not self.is_at_end():
            params.append(self._parse_param())
            if not self.match_kind(TokenKind.COMMA):
                break
        self.expect(TokenKind.R_PAREN)
        self.expect(TokenKind.ARROW)
        return_ty = self.parse_type_node()
        return FunctionTypeNode(tuple(params), return_ty, start.merge(return_ty.span))

    def _parse_param(self) -> Param:
        start = self.peek().span
        is_rest = self.match_kind(TokenKind.DOT_DOT_DOT)
        name_tok = self.expect(TokenKind.IDENT)
        span = name_tok.span

        ty = None
        if self.match_kind(TokenKind.COLON):
            ty = self.parse_type_node()
            span = span.merge(ty.span)

        init = None
        if self.match_kind(TokenKind.EQ):
            init = self._parse_param_initializer()
            span = span.merge(init.span)

        return Param(name_tok.value, ty, init, is_rest, start.merge(span))

    def _parse_param_initializer(self) -> Expr:
        raise ParseError(
            "Parameter initializers are not allowed in type annotations",
            self.peek().span,
        )