import pytest

from tsnat.ast import (
    AccessModifier,
    AssignExpr,
    BinaryExpr,
    BlockStmt,
    BreakStmt,
    ClassDecl,
    ContinueStmt,
    DefaultImport,
    DoWhileStmt,
    ExportDecl,
    ExportSpecifier,
    ExprStmt,
    ForInStmt,
    ForOfStmt,
    ForStmt,
    FunctionDecl,
    Ident,
    IfStmt,
    ImportDecl,
    KeywordType,
    KeywordTypeKind,
    LabeledStmt,
    NamedImport,
    NamespaceImport,
    NativeFunctionDecl,
    NativeImportDecl,
    NumberLit,
    PropertyDecl,
    ReturnStmt,
    SourceType,
    SwitchStmt,
    TryStmt,
    UnaryExpr,
    UnaryOp,
    VarDecl,
    VarKind,
    WhileStmt,
)
from tsnat.parser import Parser, parse
from tsnat.tokens import ParseError, Span, Token, TokenKind

K = TokenKind


def make(*items):
    tokens = []
    for pos, item in enumerate(items):
        if isinstance(item, TokenKind):
            kind, value, newline = item, "", False
        else:
            kind, value, *rest = item
            newline = bool(rest and rest[0])
        tokens.append(Token(kind, Span(pos, pos + 1), value, newline))
    tokens.append(Token(K.EOF, Span(len(items), len(items))))
    return tokens


def only_stmt(tokens):
    program = parse(tokens)
    assert len(program.stmts) == 1
    return program.stmts[0]


def test_empty_program():
    program = parse([Token(K.EOF, Span(0, 0))])
    assert program.stmts == ()
    assert program.source_type is SourceType.SCRIPT


def test_program_span_is_first_token():
    tokens = make((K.IDENT, "a"), K.SEMICOLON, (K.IDENT, "b"))
    program = parse(tokens)
    assert program.span == tokens[0].span
    assert [s.expr.name for s in program.stmts] == ["a", "b"]


def test_var_decl():
    tokens = make(K.KW_CONST, (K.IDENT, "x"), K.EQ, (K.NUMBER, "1"), K.SEMICOLON)
    stmt = only_stmt(tokens)
    assert isinstance(stmt, VarDecl)
    assert stmt.kind is VarKind.CONST
    assert stmt.decls[0].name == "x"
    assert stmt.decls[0].init == NumberLit(1.0, tokens[3].span)
    assert stmt.span == tokens[0].span.merge(tokens[3].span)


def test_var_decl_multiple_with_type():
    tokens = make(
        K.KW_LET, (K.IDENT, "a"), K.COLON, K.KW_NUMBER, K.COMMA,
        (K.IDENT, "b"), K.EQ, (K.NUMBER, "2"), K.SEMICOLON,
    )
    stmt = only_stmt(tokens)
    assert [d.name for d in stmt.decls] == ["a", "b"]
    assert stmt.decls[0].ty == KeywordType(KeywordTypeKind.NUMBER, tokens[3].span)
    assert stmt.decls[0].init is None
    assert stmt.decls[1].ty is None


def test_var_decl_requires_semicolon():
    with pytest.raises(ParseError, match="Expected ;"):
        parse(make(K.KW_VAR, (K.IDENT, "x")))


def test_expression_statement_without_semicolon():
    tokens = make((K.IDENT, "x"), K.EQ, (K.NUMBER, "1"))
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ExprStmt)
    assert isinstance(stmt.expr, AssignExpr)
    assert stmt.span == stmt.expr.span


def test_if_else():
    tokens = make(
        K.KW_IF, K.L_PAREN, (K.IDENT, "a"), K.R_PAREN, (K.IDENT, "b"), K.SEMICOLON,
        K.KW_ELSE, (K.IDENT, "c"), K.SEMICOLON,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, IfStmt)
    assert stmt.test == Ident("a", tokens[2].span)
    assert stmt.consequent.expr.name == "b"
    assert stmt.alternate.expr.name == "c"
    assert stmt.span == tokens[0].span.merge(tokens[7].span)


def test_while_and_do_while():
    tokens = make(
        K.KW_WHILE, K.L_PAREN, (K.IDENT, "a"), K.R_PAREN, K.L_BRACE, K.R_BRACE,
        K.KW_DO, K.L_BRACE, K.R_BRACE, K.KW_WHILE, K.L_PAREN, (K.IDENT, "b"), K.R_PAREN,
        K.SEMICOLON,
    )
    first, second = parse(tokens).stmts
    assert isinstance(first, WhileStmt)
    assert isinstance(first.body, BlockStmt)
    assert isinstance(second, DoWhileStmt)
    assert second.test.name == "b"
    assert second.span == tokens[6].span.merge(tokens[12].span)


def test_for_triplet():
    tokens = make(
        K.KW_FOR, K.L_PAREN, K.KW_LET, (K.IDENT, "i"), K.EQ, (K.NUMBER, "0"), K.SEMICOLON,
        (K.IDENT, "i"), K.LT, (K.NUMBER, "10"), K.SEMICOLON,
        (K.IDENT, "i"), K.PLUS_PLUS, K.R_PAREN, K.L_BRACE, K.R_BRACE,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ForStmt)
    assert isinstance(stmt.init, VarDecl)
    assert isinstance(stmt.test, BinaryExpr)
    assert isinstance(stmt.update, UnaryExpr)
    assert stmt.update.op is UnaryOp.POST_INC
    assert stmt.span == tokens[0].span.merge(tokens[15].span)


def test_for_empty_clauses():
    tokens = make(K.KW_FOR, K.L_PAREN, K.SEMICOLON, K.SEMICOLON, K.R_PAREN, (K.IDENT, "x"))
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ForStmt)
    assert (stmt.init, stmt.test, stmt.update) == (None, None, None)


def test_for_of_and_for_await():
    plain = make(
        K.KW_FOR, K.L_PAREN, K.KW_CONST, (K.IDENT, "x"), K.KW_OF, (K.IDENT, "xs"),
        K.R_PAREN, K.L_BRACE, K.R_BRACE,
    )
    stmt = only_stmt(plain)
    assert isinstance(stmt, ForOfStmt)
    assert stmt.is_await is False
    assert stmt.right.name == "xs"

    awaited = make(
        K.KW_FOR, K.KW_AWAIT, K.L_PAREN, K.KW_CONST, (K.IDENT, "x"), K.KW_OF,
        (K.IDENT, "xs"), K.R_PAREN, K.L_BRACE, K.R_BRACE,
    )
    stmt = only_stmt(awaited)
    assert isinstance(stmt, ForOfStmt)
    assert stmt.is_await is True


def test_for_in():
    tokens = make(
        K.KW_FOR, K.L_PAREN, K.KW_LET, (K.IDENT, "k"), K.KW_IN, (K.IDENT, "o"),
        K.R_PAREN, K.L_BRACE, K.R_BRACE,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ForInStmt)
    assert stmt.left.decls[0].name == "k"
    assert stmt.right.name == "o"


def test_return_before_newline_has_no_value():
    tokens = make(
        K.KW_FUNCTION, (K.IDENT, "f"), K.L_PAREN, K.R_PAREN, K.L_BRACE,
        K.KW_RETURN, (K.IDENT, "x", True), K.R_BRACE,
    )
    func = only_stmt(tokens)
    ret, expr = func.body.stmts
    assert ret == ReturnStmt(None, tokens[5].span)
    assert isinstance(expr, ExprStmt)


def test_throw_newline_error():
    with pytest.raises(ParseError, match="Line break not allowed after throw"):
        parse(make(K.KW_THROW, (K.IDENT, "e", True)))


def test_break_and_continue_labels():
    tokens = make(K.KW_BREAK, (K.IDENT, "outer"), K.SEMICOLON, K.KW_CONTINUE, K.SEMICOLON)
    brk, cont = parse(tokens).stmts
    assert brk == BreakStmt("outer", tokens[0].span.merge(tokens[1].span))
    assert cont == ContinueStmt(None, tokens[3].span)


def test_try_catch_finally():
    tokens = make(
        K.KW_TRY, K.L_BRACE, K.R_BRACE, K.KW_CATCH, K.L_PAREN, (K.IDENT, "e"), K.R_PAREN,
        K.L_BRACE, K.R_BRACE, K.KW_FINALLY, K.L_BRACE, K.R_BRACE,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, TryStmt)
    assert stmt.handler.param == "e"
    assert stmt.finalizer is not None and stmt.finalizer.stmts == ()
    assert stmt.span == tokens[0].span.merge(tokens[11].span)


def test_try_without_handler_fails():
    with pytest.raises(ParseError, match="Missing catch or finally after try"):
        parse(make(K.KW_TRY, K.L_BRACE, K.R_BRACE))


def test_switch():
    tokens = make(
        K.KW_SWITCH, K.L_PAREN, (K.IDENT, "v"), K.R_PAREN, K.L_BRACE,
        K.KW_CASE, (K.NUMBER, "1"), K.COLON, K.KW_BREAK, K.SEMICOLON,
        K.KW_DEFAULT, K.COLON, K.R_BRACE,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, SwitchStmt)
    case, default = stmt.cases
    assert case.test.value == 1.0
    assert isinstance(case.consecutive[0], BreakStmt)
    assert default.test is None
    assert default.consecutive == ()


def test_function_declaration():
    tokens = make(
        K.KW_FUNCTION, (K.IDENT, "f"), K.L_PAREN, (K.IDENT, "a"), K.COLON, K.KW_NUMBER,
        K.COMMA, (K.IDENT, "b"), K.EQ, (K.NUMBER, "1"), K.R_PAREN, K.COLON, K.KW_STRING,
        K.L_BRACE, K.KW_RETURN, (K.IDENT, "a"), K.SEMICOLON, K.R_BRACE,
    )
    func = only_stmt(tokens)
    assert isinstance(func, FunctionDecl)
    assert func.id == "f"
    assert [p.name for p in func.params] == ["a", "b"]
    assert func.params[1].init.value == 1.0
    assert func.return_ty.kind is KeywordTypeKind.STRING
    assert isinstance(func.body.stmts[0], ReturnStmt)


def test_function_name_required():
    with pytest.raises(ParseError, match="Function name required"):
        parse(make(K.KW_FUNCTION, K.L_PAREN, K.R_PAREN, K.L_BRACE, K.R_BRACE))


def test_class_properties():
    tokens = make(
        K.KW_CLASS, (K.IDENT, "A"), K.KW_EXTENDS, (K.IDENT, "B"), K.L_BRACE,
        K.KW_PRIVATE, K.KW_STATIC, (K.IDENT, "x"), K.COLON, K.KW_NUMBER, K.EQ,
        (K.NUMBER, "1"), K.SEMICOLON, (K.IDENT, "y"), K.R_BRACE,
    )
    cls = only_stmt(tokens)
    assert isinstance(cls, ClassDecl)
    assert cls.id == "A"
    assert cls.super_class.name == "B"
    x, y = cls.body
    assert isinstance(x, PropertyDecl)
    assert x.access is AccessModifier.PRIVATE
    assert x.is_static is True
    assert x.span == tokens[5].span.merge(tokens[11].span)
    assert y == PropertyDecl("y", None, None, False, None, tokens[13].span)


def test_class_method_without_function_keyword_fails():
    tokens = make(
        K.KW_CLASS, (K.IDENT, "A"), K.L_BRACE, (K.IDENT, "m"), K.L_PAREN, K.R_PAREN,
        K.L_BRACE, K.R_BRACE, K.R_BRACE,
    )
    with pytest.raises(ParseError, match="Expected function"):
        parse(tokens)


def test_class_name_required():
    with pytest.raises(ParseError, match="Class name required in declaration"):
        parse(make(K.KW_CLASS, K.L_BRACE, K.R_BRACE))


def test_import_default_and_named():
    tokens = make(
        K.KW_IMPORT, (K.IDENT, "d"), K.COMMA, K.L_BRACE, (K.IDENT, "a"), K.KW_AS,
        (K.IDENT, "b"), K.COMMA, (K.IDENT, "c"), K.R_BRACE, K.KW_FROM, (K.STRING, "m"),
        K.SEMICOLON,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ImportDecl)
    assert stmt.specifiers == (
        DefaultImport("d"),
        NamedImport("b", "a"),
        NamedImport("c", None),
    )
    assert stmt.source == "m"
    assert stmt.span == tokens[0].span.merge(tokens[12].span)


def test_import_namespace():
    tokens = make(
        K.KW_IMPORT, K.STAR, K.KW_AS, (K.IDENT, "ns"), K.KW_FROM, (K.STRING, "m"), K.SEMICOLON,
    )
    assert only_stmt(tokens).specifiers == (NamespaceImport("ns"),)


def test_import_requires_semicolon():
    with pytest.raises(ParseError, match="Expected ;"):
        parse(make(K.KW_IMPORT, (K.IDENT, "d"), K.KW_FROM, (K.STRING, "m")))


def test_native_import():
    tokens = make(
        K.KW_IMPORT, K.KW_NATIVE, (K.IDENT, "lib"), K.KW_FROM, (K.STRING, "libc"), K.SEMICOLON,
    )
    stmt = only_stmt(tokens)
    assert stmt == NativeImportDecl("lib", "libc", tokens[0].span.merge(tokens[5].span))


def test_native_function():
    tokens = make(
        K.KW_DECLARE, K.KW_NATIVE, K.KW_FUNCTION, (K.IDENT, "puts"), K.L_PAREN,
        (K.IDENT, "s"), K.COLON, K.KW_STRING, K.R_PAREN, K.COLON, K.KW_NUMBER,
    )
    stmt = only_stmt(tokens)
    assert isinstance(stmt, NativeFunctionDecl)
    assert stmt.name == "puts"
    assert stmt.params[0].ty.kind is KeywordTypeKind.STRING
    assert stmt.return_type.kind is KeywordTypeKind.NUMBER
    assert stmt.span == tokens[0].span.merge(tokens[10].span)


def test_declare_without_native_function_fails():
    with pytest.raises(ParseError, match="Expected 'native function'"):
        parse(make(K.KW_DECLARE, (K.IDENT, "x")))


def test_export_declaration():
    tokens = make(K.KW_EXPORT, K.KW_CONST, (K.IDENT, "x"), K.EQ, (K.NUMBER, "1"), K.SEMICOLON)
    stmt = only_stmt(tokens)
    assert isinstance(stmt, ExportDecl)
    assert isinstance(stmt.decl, VarDecl)
    assert stmt.is_default is False
    assert stmt.span == tokens[0].span.merge(stmt.decl.span)


def test_export_specifiers_from_source():
    tokens = make(
        K.KW_EXPORT, K.L_BRACE, (K.IDENT, "a"), K.KW_AS, (K.IDENT, "b"), K.R_BRACE,
        K.KW_FROM, (K.STRING, "m"), K.SEMICOLON,
    )
    stmt = only_stmt(tokens)
    assert stmt.specifiers == (ExportSpecifier("a", "b"),)
    assert stmt.source == "m"
    assert stmt.decl is None
    assert stmt.span == tokens[0].span


def test_export_default_expression():
    tokens = make(K.KW_EXPORT, K.KW_DEFAULT, (K.IDENT, "x"), K.SEMICOLON)
    stmt = only_stmt(tokens)
    assert stmt.is_default is True
    assert stmt.decl.expr.name == "x"


def test_export_without_declaration_fails():
    with pytest.raises(ParseError, match="Expected export declaration"):
        parse(make(K.KW_EXPORT, (K.IDENT, "x")))


def test_labeled_statement():
    tokens = make((K.IDENT, "outer"), K.COLON, K.KW_WHILE, K.L_PAREN, K.KW_TRUE, K.R_PAREN,
                  K.L_BRACE, K.R_BRACE)
    stmt = only_stmt(tokens)
    assert isinstance(stmt, LabeledStmt)
    assert stmt.label == "outer"
    assert isinstance(stmt.body, WhileStmt)
    assert stmt.span == stmt.body.span


def test_parse_stmt_directly():
    parser = Parser(make(K.L_BRACE, (K.IDENT, "a"), K.R_BRACE, (K.IDENT, "b")))
    block = parser.parse_stmt()
    assert isinstance(block, BlockStmt)
    assert block.stmts[0].expr.name == "a"
    assert parser.parse_stmt().expr.name == "b"
    assert parser.is_at_end()


def test_unclosed_block_fails():
    with pytest.raises(ParseError, match="Expected }"):
        parse(make(K.L_BRACE, (K.IDENT, "a")))