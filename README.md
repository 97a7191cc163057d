# tsnat

A front end for a TypeScript-like language. It has two parts:

- a recursive-descent parser that turns a token stream into an immutable,
  structurally comparable AST;
- a small structural type system that checks assignability, substitutes
  generics and evaluates conditional types.

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

To install the test dependencies and run the suite:

```
pip install ".[test]"
pytest
```

## Tokens

`tsnat.tokens` defines the input to the parser:

- **`Span(start, end)`** is a half-open range. `merge` returns the smallest
  span that covers both spans.
- **`TokenKind`** lists every kind of token. `str(kind)` gives the text used
  in error messages.
- **`Token(kind, span, value="", has_preceding_newline=False)`** is one token.
  `value` holds the text of identifiers, number and string literals, and
  template parts.
- **`TokenCursor`** walks a token stream. It has `peek`, `peek_ahead`,
  `advance`, `expect`, `match_kind` and `is_at_end`. The stream must end with
  a `TokenKind.EOF` token; otherwise `ValueError` is raised.
- **`ParseError`** is raised for syntax errors. It carries a `message` and the
  `span` where the error was found.

## Parsing

Pass a token list to `tsnat.parser.parse`, or create a `Parser(tokens)` and
call `parse_program()` or `parse_stmt()`. The result is a `Program`. Its
`stmts` hold nodes from `tsnat.ast`, and its `source_type` is
`SourceType.SCRIPT`.

```python
from tsnat.parser import parse
from tsnat.tokens import Span, Token, TokenKind

tokens = [
    Token(TokenKind.IDENT, Span(0, 1), "x"),
    Token(TokenKind.EQ, Span(2, 3)),
    Token(TokenKind.NUMBER, Span(4, 5), "1"),
    Token(TokenKind.PLUS, Span(6, 7)),
    Token(TokenKind.NUMBER, Span(8, 9), "2"),
    Token(TokenKind.SEMICOLON, Span(9, 10)),
    Token(TokenKind.EOF, Span(10, 10)),
]
program = parse(tokens)
# program.stmts[0] is an ExprStmt holding an AssignExpr
```

The parser covers the following.

**Statements**

- blocks and `const`/`let`/`var` declarations
- `if`, `while`, `do … while`, `for`, `for … in`, `for … of` and
  `for await … of`
- `return`, `throw`, `break` and `continue`, with labels
- `try`/`catch`/`finally`, `switch` and labelled statements
- function and class declarations; class members may carry access modifiers
  and `static`, and a constructor is kept in the class body as a
  `FunctionDecl`
- `import` with default, named and namespace specifiers
- `export` of declarations, specifier lists and `from` re-exports
- `import native Name from "lib";` and `declare native function f(…): T;`

**Expressions**

- binary operators by precedence climbing; `**` is right-associative
- assignment with all compound operators
- the conditional operator
- prefix and postfix unary operators
- member access, optional chaining, indexing, calls and `new`
- arrow functions whose parameters are a single identifier, possibly
  parenthesised; the body is an expression
- function expressions
- template literals, array literals and object literals (including the
  `{ x }` shorthand)
- spread
- `as` assertions

Number literals may contain `_` separators and `0x`, `0b` or `0o` prefixes.
`tsnat.parse_expr.number_value` converts literal text to a float and gives
`0.0` for text it cannot read.

**Type annotations**

- keyword types and literal types
- type references with type arguments
- `T[]` arrays and tuples
- unions and intersections
- parenthesised types and `(params) => T` function types

There are two smaller parsers:

- `tsnat.parse_types.TypeParser` parses a type annotation alone with
  `parse_type_node()`. It rejects parameter initializers inside function
  types.
- `tsnat.parse_expr.ExpressionParser` parses an expression alone with
  `parse_expr()`, `parse_assignment_expr()` or `parse_param()`. Function
  expressions, which contain statement blocks, need the full `Parser`.

## Types

`tsnat.ty` defines the semantic types, such as `Primitive`, `LiteralNumber`,
`ObjectType`, `FunctionType`, `UnionType`, `TypeParam`, `GenericType` and
`ConditionalType`.

Types live in a `TypeArena`:

- `alloc` stores a type and returns its integer id.
- `get` returns the type stored under an id. An unknown id raises
  `IndexError`.

A new arena already holds the primitives under fixed ids: `TYPE_NEVER`,
`TYPE_UNKNOWN`, `TYPE_ANY`, `TYPE_NULL`, `TYPE_UNDEFINED`, `TYPE_VOID`,
`TYPE_NUMBER`, `TYPE_STRING`, `TYPE_BOOLEAN`, `TYPE_BIGINT` and
`TYPE_SYMBOL`.

```python
from tsnat.assignability import AssignabilityChecker
from tsnat.ty import TYPE_NUMBER, LiteralNumber, TypeArena

arena = TypeArena()
one = arena.alloc(LiteralNumber(1.0))
AssignabilityChecker(arena).is_assignable(one, TYPE_NUMBER)  # True
```

### `tsnat.assignability.AssignabilityChecker`

`is_assignable(source, target)` handles:

- `never`, `any` and `unknown`
- literal types against their primitives
- unions and intersections on either side
- objects, compared structurally; optional properties may be missing
- functions, with covariant return types and contravariant parameters; the
  source may have no more parameters than the target
- type parameters, through their constraint
- generic instantiations of the same target, comparing arguments invariantly

### `tsnat.infer.TypeInferencer`

- `instantiate_generic(target, args)` records a `GenericType`.
- `substitute(ty_id, substitutions)` replaces type parameters by name inside
  unions, objects, functions and generics.
- `evaluate_conditional(check, extends, true_type, false_type)` evaluates a
  conditional type. It distributes over unions and returns a deferred
  `ConditionalType` when the checked type is a type parameter.

### `tsnat.checker.Checker`

`infer_expr(expr)` gives:

- `number`, `string`, `boolean`, `null` and `undefined` for literals
- `number` for `+ - * /` and for unary `-` and `+`
- `boolean` for comparisons and `!`
- `any` for identifiers and every other form

`check_expr(expr, expected)` returns the inferred type. It does not yet
compare that type with `expected`.

## What it does not do

- It has no lexer: source text must be turned into `Token` values by the
  caller.
- It provides no command-line program.
- It does not generate or run code.
- Checking is limited to the expression inference described above. It has no
  scopes or symbol tables, and reports no type errors.