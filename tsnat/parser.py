"""Statement and program parsing on top of the expression parser."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from .ast import (
    AccessModifier,
    BlockStmt,
    BreakStmt,
    CatchHandler,
    ClassDecl,
    ClassMember,
    ContinueStmt,
    DefaultImport,
    DoWhileStmt,
    ExportDecl,
    ExportSpecifier,
    ExprStmt,
    ForInit,
    ForInStmt,
    ForOfStmt,
    ForStmt,
    IfStmt,
    ImportDecl,
    ImportSpecifier,
    LabeledStmt,
    MethodDecl,
    NamedImport,
    NamespaceImport,
    NativeFunctionDecl,
    NativeImportDecl,
    Param,
    Program,
    PropertyDecl,
    ReturnStmt,
    SourceType,
    Stmt,
    SwitchCase,
    SwitchStmt,
    ThrowStmt,
    TryStmt,
    VarDecl,
    VarDeclarator,
    VarKind,
    WhileStmt,
)
from .parse_expr import ExpressionParser
from .tokens import DUMMY_SPAN, ParseError, Span, Token, TokenKind

_VAR_KINDS = {
    TokenKind.KW_CONST: VarKind.CONST,
    TokenKind.KW_LET: VarKind.LET,
    TokenKind.KW_VAR: VarKind.VAR,
}

_ACCESS_MODIFIERS = {
    TokenKind.KW_PUBLIC: AccessModifier.PUBLIC,
    TokenKind.KW_PRIVATE: AccessModifier.PRIVATE,
    TokenKind.KW_PROTECTED: AccessModifier.PROTECTED,
}

_EXPORTABLE = frozenset(
    {
        TokenKind.KW_CONST,
        TokenKind.KW_LET,
        TokenKind.KW_VAR,
        TokenKind.KW_FUNCTION,
        TokenKind.KW_CLASS,
    }
)


class Parser(ExpressionParser):
    """Parses a whole token stream into a ``Program``."""

    def parse_program(self) -> Program:
        """Parse statements until the end of the token stream."""
        stmts: list[Stmt] = []
        while not self.is_at_end():
            stmts.append(self.parse_stmt())
        span = self.tokens[0].span if self.tokens else DUMMY_SPAN
        return Program(tuple(stmts), span, SourceType.SCRIPT)

    def parse_stmt(self) -> Stmt:
        """Parse one statement."""
        kind = self.peek().kind

        handler = _STATEMENT_HANDLERS.get(kind)
        if handler is not None:
            return handler(self)

        if kind is TokenKind.KW_FOR:
            if self.peek_ahead(1).kind is TokenKind.KW_AWAIT:
                return self._parse_for_of_stmt(True)
            return self._parse_for_any_stmt()
        if kind is TokenKind.KW_FUNCTION:
            return self._parse_function_decl(True)
        if kind is TokenKind.KW_CLASS:
            return self._parse_class_decl(True)
        if kind is TokenKind.KW_IMPORT:
            if self.peek_ahead(1).kind is TokenKind.KW_NATIVE:
                return self._parse_native_import_decl()
            return self._parse_import_decl()
        if kind is TokenKind.KW_DECLARE:
            if (
                self.peek_ahead(1).kind is TokenKind.KW_NATIVE
                and self.peek_ahead(2).kind is TokenKind.KW_FUNCTION
            ):
                return self._parse_native_function_decl()
            raise ParseError("Expected 'native function'", self.peek().span)
        if kind is TokenKind.IDENT and self.peek_ahead(1).kind is TokenKind.COLON:
            return self._parse_labeled_stmt()

        expr = self.parse_expr()
        self.match_kind(TokenKind.SEMICOLON)
        return ExprStmt(expr, expr.span)

    # ── Blocks and control flow ───────────────────────────────

    def _parse_block_stmt(self) -> BlockStmt:
        start = self.expect(TokenKind.L_BRACE).span
        stmts: list[Stmt] = []
        while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
            stmts.append(self.parse_stmt())
        end = self.expect(TokenKind.R_BRACE).span
        return BlockStmt(tuple(stmts), start.merge(end))

    def _parse_if_stmt(self) -> IfStmt:
        start = self.expect(TokenKind.KW_IF).span
        self.expect(TokenKind.L_PAREN)
        test = self.parse_expr()
        self.expect(TokenKind.R_PAREN)
        consequent = self.parse_stmt()
        span = start.merge(consequent.span)
        alternate = None
        if self.match_kind(TokenKind.KW_ELSE):
            alternate = self.parse_stmt()
            span = span.merge(alternate.span)
        return IfStmt(test, consequent, alternate, span)

    def _parse_while_stmt(self) -> WhileStmt:
        start = self.expect(TokenKind.KW_WHILE).span
        self.expect(TokenKind.L_PAREN)
        test = self.parse_expr()
        self.expect(TokenKind.R_PAREN)
        body = self.parse_stmt()
        return WhileStmt(test, body, start.merge(body.span))

    def _parse_do_while_stmt(self) -> DoWhileStmt:
        start = self.expect(TokenKind.KW_DO).span
        body = self.parse_stmt()
        self.expect(TokenKind.KW_WHILE)
        self.expect(TokenKind.L_PAREN)
        test = self.parse_expr()
        end = self.expect(TokenKind.R_PAREN).span
        self.match_kind(TokenKind.SEMICOLON)
        return DoWhileStmt(body, test, start.merge(end))

    def _parse_for_init(self) -> ForInit:
        if self.peek().kind in _VAR_KINDS:
            return self._parse_var_decl_no_semi()
        return self.parse_expr()

    def _parse_for_any_stmt(self) -> Stmt:
        start = self.expect(TokenKind.KW_FOR).span
        self.expect(TokenKind.L_PAREN)

        if self.peek().kind is TokenKind.SEMICOLON:
            return self._parse_for_triplet_tail(start, None)

        init = self._parse_for_init()

        if self.match_kind(TokenKind.KW_IN):
            right = self.parse_expr()
            self.expect(TokenKind.R_PAREN)
            body = self.parse_stmt()
            return ForInStmt(init, right, body, start.merge(body.span))
        if self.match_kind(TokenKind.KW_OF):
            right = self.parse_expr()
            self.expect(TokenKind.R_PAREN)
            body = self.parse_stmt()
            return ForOfStmt(False, init, right, body, start.merge(body.span))
        return self._parse_for_triplet_tail(start, init)

    def _parse_for_of_stmt(self, is_await: bool) -> ForOfStmt:
        start = self.expect(TokenKind.KW_FOR).span
        if is_await:
            self.expect(TokenKind.KW_AWAIT)
        self.expect(TokenKind.L_PAREN)
        init = self._parse_for_init()
        self.expect(TokenKind.KW_OF)
        right = self.parse_expr()
        self.expect(TokenKind.R_PAREN)
        body = self.parse_stmt()
        return ForOfStmt(is_await, init, right, body, start.merge(body.span))

    def _parse_for_triplet_tail(self, start: Span, init: Optional[ForInit]) -> ForStmt:
        self.expect(TokenKind.SEMICOLON)
        test = None if self.peek().kind is TokenKind.SEMICOLON else self.parse_expr()
        self.expect(TokenKind.SEMICOLON)
        update = None if self.peek().kind is TokenKind.R_PAREN else self.parse_expr()
        self.expect(TokenKind.R_PAREN)
        body = self.parse_stmt()
        return ForStmt(init, test, update, body, start.merge(body.span))

    # ── Declarations of variables ─────────────────────────────

    def _parse_var_decl_no_semi(self) -> VarDecl:
        tok = self.advance()
        kind = _VAR_KINDS.get(tok.kind)
        if kind is None:
            raise ParseError(f"Expected variable declaration, found {tok.kind}", tok.span)

        decls: list[VarDeclarator] = []
        while True:
            name_tok = self.expect(TokenKind.IDENT)
            ty = self.parse_type_node() if self.match_kind(TokenKind.COLON) else None
            init = self.parse_assignment_expr() if self.match_kind(TokenKind.EQ) else None
            span = name_tok.span
            if ty is not None:
                span = span.merge(ty.span)
            if init is not None:
                span = span.merge(init.span)
            decls.append(VarDeclarator(name_tok.value, ty, init, span))
            if not self.match_kind(TokenKind.COMMA):
                break

        return VarDecl(kind, tuple(decls), tok.span.merge(decls[-1].span))

    def _parse_var_decl(self) -> VarDecl:
        decl = self._parse_var_decl_no_semi()
        self.expect(TokenKind.SEMICOLON)
        return decl

    # ── Jumps ─────────────────────────────────────────────────

    def _parse_return_stmt(self) -> ReturnStmt:
        start = self.expect(TokenKind.KW_RETURN).span
        tok = self.peek()
        value = None
        if not tok.has_preceding_newline and tok.kind not in (
            TokenKind.SEMICOLON,
            TokenKind.R_BRACE,
            TokenKind.EOF,
        ):
            value = self.parse_expr()
        end = value.span if value is not None else start
        self.match_kind(TokenKind.SEMICOLON)
        return ReturnStmt(value, start.merge(end))

    def _parse_throw_stmt(self) -> ThrowStmt:
        start = self.expect(TokenKind.KW_THROW).span
        if self.peek().has_preceding_newline:
            raise ParseError("Line break not allowed after throw", start)
        argument = self.parse_expr()
        self.match_kind(TokenKind.SEMICOLON)
        return ThrowStmt(argument, start.merge(argument.span))

    def _parse_jump_label(self, keyword: TokenKind) -> tuple[Optional[str], Span]:
        span = self.expect(keyword).span
        label = None
        tok = self.peek()
        if not tok.has_preceding_newline and tok.kind is TokenKind.IDENT:
            self.advance()
            span = span.merge(tok.span)
            label = tok.value
        self.match_kind(TokenKind.SEMICOLON)
        return label, span

    def _parse_break_stmt(self) -> BreakStmt:
        return BreakStmt(*self._parse_jump_label(TokenKind.KW_BREAK))

    def _parse_continue_stmt(self) -> ContinueStmt:
        return ContinueStmt(*self._parse_jump_label(TokenKind.KW_CONTINUE))

    def _parse_try_stmt(self) -> TryStmt:
        start = self.expect(TokenKind.KW_TRY).span
        block = self._parse_block_stmt()

        handler = None
        if self.match_kind(TokenKind.KW_CATCH):
            catch_start = self.peek().span
            param = None
            if self.match_kind(TokenKind.L_PAREN):
                param = self.expect(TokenKind.IDENT).value
                self.expect(TokenKind.R_PAREN)
            body = self._parse_block_stmt()
            handler = CatchHandler(param, body, catch_start.merge(body.span))

        finalizer = None
        if self.match_kind(TokenKind.KW_FINALLY):
            finalizer = self._parse_block_stmt()

        if finalizer is not None:
            end = finalizer.span
        elif handler is not None:
            end = handler.span
        else:
            raise ParseError("Missing catch or finally after try", block.span)
        return TryStmt(block, handler, finalizer, start.merge(end))

    def _parse_switch_stmt(self) -> SwitchStmt:
        start = self.expect(TokenKind.KW_SWITCH).span
        self.expect(TokenKind.L_PAREN)
        discriminant = self.parse_expr()
        self.expect(TokenKind.R_PAREN)
        self.expect(TokenKind.L_BRACE)
        cases: list[SwitchCase] = []
        while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
            cases.append(self._parse_switch_case())
        end = self.expect(TokenKind.R_BRACE).span
        return SwitchStmt(discriminant, tuple(cases), start.merge(end))

    def _parse_switch_case(self) -> SwitchCase:
        start = self.peek().span
        test = None
        if self.match_kind(TokenKind.KW_CASE):
            test = self.parse_expr()
        else:
            self.expect(TokenKind.KW_DEFAULT)
        self.expect(TokenKind.COLON)

        body: list[Stmt] = []
        while (
            self.peek().kind
            not in (TokenKind.KW_CASE, TokenKind.KW_DEFAULT, TokenKind.R_BRACE)
            and not self.is_at_end()
        ):
            body.append(self.parse_stmt())
        end = body[-1].span if body else start
        return SwitchCase(test, tuple(body), start.merge(end))

    def _parse_labeled_stmt(self) -> LabeledStmt:
        label = self.expect(TokenKind.IDENT).value
        self.expect(TokenKind.COLON)
        body = self.parse_stmt()
        return LabeledStmt(label, body, body.span)

    # ── Classes ───────────────────────────────────────────────

    def _parse_class_decl(self, is_stmt: bool) -> ClassDecl:
        start = self.expect(TokenKind.KW_CLASS).span
        if self.peek().kind is TokenKind.IDENT:
            name: Optional[str] = self.advance().value
        elif is_stmt:
            raise ParseError("Class name required in declaration", start)
        else:
            name = None

        super_class = self.parse_expr() if self.match_kind(TokenKind.KW_EXTENDS) else None

        self.expect(TokenKind.L_BRACE)
        members: list[ClassMember] = []
        while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
            members.append(self._parse_class_member())
        end = self.expect(TokenKind.R_BRACE).span
        return ClassDecl(name, super_class, tuple(members), start.merge(end))

    def _parse_class_member(self) -> ClassMember:
        start = self.peek().span
        access = _ACCESS_MODIFIERS.get(self.peek().kind)
        if access is not None:
            self.advance()
        is_static = self.match_kind(TokenKind.KW_STATIC)

        id_tok = self.expect(TokenKind.IDENT)
        key = id_tok.value

        if self.peek().kind is TokenKind.L_PAREN:
            func = self._parse_function_decl(False)
            if key == "constructor":
                return func
            return MethodDecl(key, func, is_static, access, start.merge(func.span))

        ty = self.parse_type_node() if self.match_kind(TokenKind.COLON) else None
        init = self.parse_expr() if self.match_kind(TokenKind.EQ) else None
        if init is not None:
            end = init.span
        elif ty is not None:
            end = ty.span
        else:
            end = id_tok.span
        self.match_kind(TokenKind.SEMICOLON)
        return PropertyDecl(key, ty, init, is_static, access, start.merge(end))

    # ── Native bindings ───────────────────────────────────────

    def _previous_span(self) -> Span:
        return self.tokens[self.pos - 1].span

    def _parse_native_import_decl(self) -> NativeImportDecl:
        start = self.expect(TokenKind.KW_IMPORT).span
        self.expect(TokenKind.KW_NATIVE)
        name = self.expect(TokenKind.IDENT).value
        self.expect(TokenKind.KW_FROM)
        source = self.expect(TokenKind.STRING).value
        self.match_kind(TokenKind.SEMICOLON)
        return NativeImportDecl(name, source, start.merge(self._previous_span()))

    def _parse_native_function_decl(self) -> NativeFunctionDecl:
        start = self.expect(TokenKind.KW_DECLARE).span
        self.expect(TokenKind.KW_NATIVE)
        self.expect(TokenKind.KW_FUNCTION)
        name = self.expect(TokenKind.IDENT).value
        self.expect(TokenKind.L_PAREN)

        params: list[Param] = []
        while self.peek().kind is not TokenKind.R_PAREN and not self.is_at_end():
            params.append(self.parse_param())
            self.match_kind(TokenKind.COMMA)
        self.expect(TokenKind.R_PAREN)

        return_type = self.parse_type_node() if self.match_kind(TokenKind.COLON) else None
        self.match_kind(TokenKind.SEMICOLON)
        return NativeFunctionDecl(
            name, tuple(params), return_type, start.merge(self._previous_span())
        )

    # ── Imports & exports ─────────────────────────────────────

    def _parse_import_decl(self) -> ImportDecl:
        start = self.expect(TokenKind.KW_IMPORT).span
        specifiers: list[ImportSpecifier] = []

        kind = self.peek().kind
        if kind is TokenKind.IDENT:
            specifiers.append(DefaultImport(self.advance().value))
            if self.match_kind(TokenKind.COMMA):
                specifiers.extend(self._parse_import_specifiers())
        elif kind in (TokenKind.L_BRACE, TokenKind.STAR):
            specifiers.extend(self._parse_import_specifiers())

        self.expect(TokenKind.KW_FROM)
        source = self.expect(TokenKind.STRING).value
        end = self.expect(TokenKind.SEMICOLON).span
        return ImportDecl(tuple(specifiers), source, start.merge(end))

    def _parse_import_specifiers(self) -> list[ImportSpecifier]:
        kind = self.peek().kind
        if kind is TokenKind.STAR:
            self.advance()
            self.expect(TokenKind.KW_AS)
            return [NamespaceImport(self.expect(TokenKind.IDENT).value)]
        if kind is TokenKind.L_BRACE:
            self.advance()
            specs: list[ImportSpecifier] = []
            while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
                imported = self.expect(TokenKind.IDENT).value
                if self.match_kind(TokenKind.KW_AS):
                    specs.append(NamedImport(self.expect(TokenKind.IDENT).value, imported))
                else:
                    specs.append(NamedImport(imported, None))
                if not self.match_kind(TokenKind.COMMA):
                    break
            self.expect(TokenKind.R_BRACE)
            return specs
        raise ParseError("Expected import specifiers", self.peek().span)

    def _parse_export_decl(self) -> ExportDecl:
        start = self.expect(TokenKind.KW_EXPORT).span
        is_default = self.match_kind(TokenKind.KW_DEFAULT)

        decl: Optional[Stmt] = None
        specifiers: list[ExportSpecifier] = []
        source: Optional[str] = None

        kind = self.peek().kind
        if kind in _EXPORTABLE:
            decl = self.parse_stmt()
        elif kind is TokenKind.L_BRACE:
            self.advance()
            while self.peek().kind is not TokenKind.R_BRACE and not self.is_at_end():
                local = self.expect(TokenKind.IDENT).value
                exported = None
                if self.match_kind(TokenKind.KW_AS):
                    exported = self.expect(TokenKind.IDENT).value
                specifiers.append(ExportSpecifier(local, exported))
                if not self.match_kind(TokenKind.COMMA):
                    break
            self.expect(TokenKind.R_BRACE)
            if self.match_kind(TokenKind.KW_FROM):
                source = self.expect(TokenKind.STRING).value
            self.match_kind(TokenKind.SEMICOLON)
        elif is_default:
            decl = self.parse_stmt()
        else:
            raise ParseError("Expected export declaration", start)

        end = decl.span if decl is not None else start
        return ExportDecl(decl, tuple(specifiers), source, is_default, start.merge(end))


_STATEMENT_HANDLERS: dict[TokenKind, Callable[[Parser], Stmt]] = {
    TokenKind.L_BRACE: Parser._parse_block_stmt,
    TokenKind.KW_CONST: Parser._parse_var_decl,
    TokenKind.KW_LET: Parser._parse_var_decl,
    TokenKind.KW_VAR: Parser._parse_var_decl,
    TokenKind.KW_IF: Parser._parse_if_stmt,
    TokenKind.KW_WHILE: Parser._parse_while_stmt,
    TokenKind.KW_DO: Parser._parse_do_while_stmt,
    TokenKind.KW_RETURN: Parser._parse_return_stmt,
    TokenKind.KW_THROW: Parser._parse_throw_stmt,
    TokenKind.KW_BREAK: Parser._parse_break_stmt,
    TokenKind.KW_CONTINUE: Parser._parse_continue_stmt,
    TokenKind.KW_TRY: Parser._parse_try_stmt,
    TokenKind.KW_SWITCH: Parser._parse_switch_stmt,
    TokenKind.KW_EXPORT: Parser._parse_export_decl,
}


def parse(tokens: Iterable[Token]) -> Program:
    """Parse a token stream ending in ``EOF`` into a ``Program``."""
    return Parser(tokens).parse_program()