"""Expression parsing by precedence climbing."""

from __future__ import annotations

from .ast import (
    ArrayExpr,
    ArrowExpr,
    AsExpr,
    AssignExpr,
    AssignOp,
    BinaryExpr,
    BinaryOp,
    BlockStmt,
    BoolLit,
    CallExpr,
    ConditionalExpr,
    Expr,
    FunctionDecl,
    Ident,
    IndexExpr,
    MemberExpr,
    NewExpr,
    NullLit,
    NumberLit,
    ObjectExpr,
    ObjProp,
    OptChainExpr,
    Param,
    ParenExpr,
    SpreadExpr,
    StringLit,
    TemplateExpr,
    ThisExpr,
    UnaryExpr,
    UnaryOp,
    UndefinedLit,
)
from .parse_types import TypeParser
from .tokens import ParseError, Span, TokenKind

_ASSIGN_OPS = {
    TokenKind.EQ: AssignOp.EQ,
    TokenKind.PLUS_EQ: AssignOp.ADD_EQ,
    TokenKind.MINUS_EQ: AssignOp.SUB_EQ,
    TokenKind.STAR_EQ: AssignOp.MUL_EQ,
    TokenKind.SLASH_EQ: AssignOp.DIV_EQ,
    TokenKind.PERCENT_EQ: AssignOp.MOD_EQ,
    TokenKind.STAR_STAR_EQ: AssignOp.EXP_EQ,
    TokenKind.AMP_AMP_EQ: AssignOp.AND_EQ,
    TokenKind.PIPE_PIPE_EQ: AssignOp.OR_EQ,
    TokenKind.QUESTION_QUESTION_EQ: AssignOp.NULLISH_EQ,
    TokenKind.AMP_EQ: AssignOp.BIT_AND_EQ,
    TokenKind.PIPE_EQ: AssignOp.BIT_OR_EQ,
    TokenKind.CARET_EQ: AssignOp.BIT_XOR_EQ,
    TokenKind.LT_LT_EQ: AssignOp.SHL_EQ,
    TokenKind.GT_GT_EQ: AssignOp.SHR_EQ,
    TokenKind.GT_GT_GT_EQ: AssignOp.USHR_EQ,
}

# token kind -> (operator, precedence, right associative)
_BINARY_OPS = {
    TokenKind.STAR_STAR: (BinaryOp.EXP, 17, True),
    TokenKind.STAR: (BinaryOp.MUL, 16, False),
    TokenKind.SLASH: (BinaryOp.DIV, 16, False),
    TokenKind.PERCENT: (BinaryOp.MOD, 16, False),
    TokenKind.PLUS: (BinaryOp.ADD, 15, False),
    TokenKind.MINUS: (BinaryOp.SUB, 15, False),
    TokenKind.LT_LT: (BinaryOp.SHL, 14, False),
    TokenKind.GT_GT: (BinaryOp.SHR, 14, False),
    TokenKind.GT_GT_GT: (BinaryOp.USHR, 14, False),
    TokenKind.LT: (BinaryOp.LT, 13, False),
    TokenKind.GT: (BinaryOp.GT, 13, False),
    TokenKind.LT_EQ: (BinaryOp.LT_EQ, 13, False),
    TokenKind.GT_EQ: (BinaryOp.GT_EQ, 13, False),
    TokenKind.KW_INSTANCEOF: (BinaryOp.INSTANCEOF, 13, False),
    TokenKind.KW_IN: (BinaryOp.IN, 13, False),
    TokenKind.EQ_EQ: (BinaryOp.EQ_EQ, 12, False),
    TokenKind.BANG_EQ: (BinaryOp.BANG_EQ, 12, False),
    TokenKind.EQ_EQ_EQ: (BinaryOp.EQ_EQ_EQ, 12, False),
    TokenKind.BANG_EQ_EQ: (BinaryOp.BANG_EQ_EQ, 12, False),
    TokenKind.AMP: (BinaryOp.BIT_AND, 11, False),
    TokenKind.CARET: (BinaryOp.BIT_XOR, 10, False),
    TokenKind.PIPE: (BinaryOp.BIT_OR, 9, False),
    TokenKind.AMP_AMP: (BinaryOp.AND, 8, False),
    TokenKind.PIPE_PIPE: (BinaryOp.OR, 7, False),
    TokenKind.QUESTION_QUESTION: (BinaryOp.NULLISH_COALESCE, 7, False),
}

_PREFIX_OPS = {
    TokenKind.MINUS: UnaryOp.NEG,
    TokenKind.PLUS: UnaryOp.PLUS,
    TokenKind.BANG: UnaryOp.NOT,
    TokenKind.TILDE: UnaryOp.BIT_NOT,
    TokenKind.KW_TYPEOF: UnaryOp.TYPEOF,
    TokenKind.KW_VOID: UnaryOp.VOID,
    TokenKind.KW_DELETE: UnaryOp.DELETE,
    TokenKind.PLUS_PLUS: UnaryOp.PRE_INC,
    TokenKind.MINUS_MINUS: UnaryOp.PRE_DEC,
}

_RADIX_PREFIXES = {"0x": 16, "0X": 16, "0b": 2, "0B": 2, "0o": 8, "0O": 8}
_DIGITS = "0123456789abcdefABCDEF"
_I64_MAX = 2**63 - 1


def _parse_radix(digits: str, radix: int) -> float:
    allowed = _DIGITS[:radix] if radix <= 10 else _DIGITS[: 10 + (radix - 10)] + _DIGITS[16 : 16 + radix - 10]
    if not digits or any(c not in allowed for c in digits):
        return 0.0
    value = int(digits, radix)
    return float(value) if value <= _I64_MAX else 0.0


def number_value(text: str) -> float:
    """The numeric value of a number literal's text; unreadable text is 0."""
    cleaned = text.replace("_", "")
    radix = _RADIX_PREFIXES.get(cleaned[:2])
    if radix is not None:
        return _parse_radix(cleaned[2:], radix)
    if cleaned != cleaned.strip():
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


class ExpressionParser(TypeParser):
    """Parses expressions, parameters and the types they mention."""

    def parse_expr(self) -> Expr:
        """Parse a full expression."""
        return self.parse_assignment_expr()

    def parse_assignment_expr(self) -> Expr:
        """Parse an assignment, arrow function or anything tighter."""
        left = self._parse_conditional_expr()

        op = _ASSIGN_OPS.get(self.peek().kind)
        if op is not None:
            self.advance()
            right = self.parse_assignment_expr()
            return AssignExpr(op, left, right, left.span.merge(right.span))

        if self.peek().kind is TokenKind.ARROW:
            return self._parse_arrow_tail(left)

        return left

    def parse_param(self) -> Param:
        """Parse one parameter: ``...name: type = init``."""
        return self._parse_param()

    def _parse_param_initializer(self) -> Expr:
        return self.parse_assignment_expr()

    def _parse_conditional_expr(self) -> Expr:
        test = self._parse_binary_expr(0)
        if not self.match_kind(TokenKind.QUESTION):
            return test
        consequent = self.parse_assignment_expr()
        self.expect(TokenKind.COLON)
        alternate = self.parse_assignment_expr()
        return ConditionalExpr(test, consequent, alternate, test.span.merge(alternate.span))

    def _parse_binary_expr(self, min_prec: int) -> Expr:
        left = self._parse_unary_expr()
        while True:
            info = _BINARY_OPS.get(self.peek().kind)
            if info is None:
                break
            op, prec, right_assoc = info
            if prec < min_prec:
                break
            self.advance()
            right = self._parse_binary_expr(prec if right_assoc else prec + 1)
            left = BinaryExpr(op, left, right, left.span.merge(right.span))

        if self.match_kind(TokenKind.KW_AS):
            ty = self.parse_type_node()
            return AsExpr(left, ty, left.span.merge(ty.span))
        return left

    def _parse_unary_expr(self) -> Expr:
        tok = self.peek()
        start = tok.span

        op = _PREFIX_OPS.get(tok.kind)
        if op is not None:
            self.advance()
            operand = self._parse_unary_expr()
            return UnaryExpr(op, operand, start.merge(operand.span))

        if tok.kind is TokenKind.DOT_DOT_DOT:
            self.advance()
            argument = self.parse_assignment_expr()
            return SpreadExpr(argument, start.merge(argument.span))

        if tok.kind is TokenKind.KW_NEW:
            self.advance()
            callee = self._parse_member_expr()
            if self.peek().kind is TokenKind.L_PAREN:
                args, end = self._parse_arguments()
            else:
                args, end = (), callee.span
            return NewExpr(callee, args, start.merge(end))

        return self._parse_postfix_expr()

    def _parse_postfix_expr(self) -> Expr:
        expr = self._parse_primary_expr()
        while True:
            tok = self.peek()
            kind = tok.kind
            if kind is TokenKind.DOT:
                self.advance()
                prop = self.expect(TokenKind.IDENT)
                expr = MemberExpr(expr, prop.value, expr.span.merge(prop.span))
            elif kind is TokenKind.QUESTION_DOT:
                self.advance()
                prop = self.expect(TokenKind.IDENT)
                expr = OptChainExpr(expr, prop.value, expr.span.merge(prop.span))
            elif kind is TokenKind.L_BRACKET:
                expr = self._parse_index_tail(expr)
            elif kind is TokenKind.L_PAREN:
                args, end = self._parse_arguments()
                expr = CallExpr(expr, args, expr.span.merge(end))
            elif kind is TokenKind.PLUS_PLUS and not tok.has_preceding_newline:
                end = self.advance().span
                expr = UnaryExpr(UnaryOp.POST_INC, expr, expr.span.merge(end))
            elif kind is TokenKind.MINUS_MINUS and not tok.has_preceding_newline:
                end = self.advance().span
                expr = UnaryExpr(UnaryOp.POST_DEC, expr, expr.span.merge(end))
            else:
                return expr

    def _parse_member_expr(self) -> Expr:
        """A member chain without calls, as used after ``new``."""
        expr = self._parse_primary_expr()
        while True:
            kind = self.peek().kind
            if kind is TokenKind.DOT:
                self.advance()
                prop = self.expect(TokenKind.IDENT)
                expr = MemberExpr(expr, prop.value, expr.span.merge(prop.span))
            elif kind is TokenKind.L_BRACKET:
                expr = self._parse_index_tail(expr)
            else:
                return expr

    def _parse_index_tail(self, obj: Expr) -> Expr:
        self.advance()
        index = self.parse_expr()
        end = self.expect(TokenKind.R_BRACKET).span
        return IndexExpr(obj, index, obj.span.merge(end))

    def _parse_primary_expr(self) -> Expr:
        tok = self.peek()
        kind = tok.kind

        if kind is TokenKind.NUMBER:
            self.advance()
            return NumberLit(number_value(tok.value), tok.span)
        if kind is TokenKind.STRING:
            self.advance()
            return StringLit(tok.value, tok.span)
        if kind is TokenKind.KW_TRUE:
            return BoolLit(True, self.advance().span)
        if kind is TokenKind.KW_FALSE:
            return BoolLit(False, self.advance().span)
        if kind is TokenKind.KW_NULL:
            return NullLit(self.advance().span)
        if kind is TokenKind.KW_UNDEFINED:
            return UndefinedLit(self.advance().span)
        if kind is TokenKind.KW_THIS:
            return ThisExpr(self.advance().span)
        if kind is TokenKind.IDENT:
            self.advance()
            return Ident(tok.value, tok.span)
        if kind is TokenKind.L_PAREN:
            start = self.advance().span
            inner = self.parse_expr()
            end = self.expect(TokenKind.R_PAREN).span
            return ParenExpr(inner, start.merge(end))
        if kind is TokenKind.L_BRACKET:
            return self._parse_array_literal()
        if kind is TokenKind.L_BRACE:
            return self._parse_object_literal()
        if kind is TokenKind.TEMPLATE_HEAD:
            return self._parse_template_expr()
        if kind is TokenKind.NO_SUBST_TEMPLATE:
            self.advance()
            return TemplateExpr((tok.value,), (), tok.span)
        if kind is TokenKind.KW_FUNCTION:
            return self._parse_function_decl(False)

        raise ParseError(f"Unexpected token: {kind}", tok.span)

    def _parse_array_literal(self) -> Expr:
        start = self.advance().span
        elements: list[Expr] = []
        while self.peek().kind is not TokenKind.R_BRACKET and not self.is_at_end():
            elements.append(self.parse_assignment_expr())
            if not self.match_kind(TokenKind.COMMA):
                break
        end = self.expect(TokenKind.R_BRACKET).span
        return ArrayExpr(tuple(elements), start.merge(end))

    def _parse_object_literal(self) -> Expr:
        start = self.advance().span
        props: list[ObjProp] = []
        while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
            key_tok = self.expect(TokenKind.IDENT)
            if self.match_kind(TokenKind.COLON):
                value = self.parse_assignment_expr()
            else:
                # Shorthand `{ x }` stands for `{ x: x }`.
                value = Ident(key_tok.value, key_tok.span)
            props.append(ObjProp(key_tok.value, value, key_tok.span.merge(value.span)))
            if not self.match_kind(TokenKind.COMMA):
                break
        end = self.expect(TokenKind.R_BRACE).span
        return ObjectExpr(tuple(props), start.merge(end))

    def _parse_template_expr(self) -> Expr:
        head = self.advance()
        quasis = [head.value]
        exprs: list[Expr] = []
        while True:
            exprs.append(self.parse_expr())
            tok = self.peek()
            if tok.kind is TokenKind.TEMPLATE_TAIL:
                quasis.append(tok.value)
                self.advance()
                return TemplateExpr(tuple(quasis), tuple(exprs), head.span.merge(tok.span))
            if tok.kind is TokenKind.TEMPLATE_MIDDLE:
                quasis.append(tok.value)
                self.advance()
                continue
            raise ParseError("Expected template continuation", tok.span)

    def _parse_arguments(self) -> tuple[tuple[Expr, ...], Span]:
        self.expect(TokenKind.L_PAREN)
        args: list[Expr] = []
        while self.peek().kind is not TokenKind.R_PAREN and not self.is_at_end():
            args.append(self.parse_assignment_expr())
            if not self.match_kind(TokenKind.COMMA):
                break
        end = self.expect(TokenKind.R_PAREN).span
        return tuple(args), end

    def _parse_arrow_tail(self, params_expr: Expr) -> Expr:
        start = params_expr.span
        self.expect(TokenKind.ARROW)
        params = self._arrow_params(params_expr)
        body = self.parse_assignment_expr()
        return ArrowExpr(tuple(params), body, False, start.merge(body.span))

    def _arrow_params(self, expr: Expr) -> list[Param]:
        if isinstance(expr, Ident):
            return [Param(expr.name, None, None, False, expr.span)]
        if isinstance(expr, ParenExpr):
            return self._arrow_params(expr.expr)
        raise ParseError("Invalid arrow function parameters", expr.span)

    def _parse_function_decl(self, is_stmt: bool) -> FunctionDecl:
        start = self.peek().span
        is_async = self.match_kind(TokenKind.KW_ASYNC)
        self.expect(TokenKind.KW_FUNCTION)
        is_generator = self.match_kind(TokenKind.STAR)

        if self.peek().kind is TokenKind.IDENT:
            name = self.advance().value
        elif is_stmt:
            raise ParseError("Function name required in declaration", start)
        else:
            name = None

        self.expect(TokenKind.L_PAREN)
        params: list[Param] = []
        while self.peek().kind is not TokenKind.R_PAREN and not self.is_at_end():
            params.append(self.parse_param())
            if not self.match_kind(TokenKind.COMMA):
                break
        self.expect(TokenKind.R_PAREN)

        return_ty = self.parse_type_node() if self.match_kind(TokenKind.COLON) else None

        body = None
        if self.peek().kind is TokenKind.L_BRACE or is_stmt:
            body = self._parse_block_stmt()

        if body is not None:
            end = body.span
        elif return_ty is not None:
            end = return_ty.span
        else:
            end = start
        return FunctionDecl(
            name, tuple(params), body, return_ty, is_async, is_generator, start.merge(end)
        )

    def _parse_block_stmt(self) -> BlockStmt:
        raise ParseError(
            "Statement blocks need a statement parser", self.peek().span
        )