from enum import Enum
from typing import \
    Any, \
    TypeVar, \
    Callable, \
    Optional, \
    Union, \
    overload, \
    Sequence, \
    List, \
    Tuple, \
    Dict, \
    NamedTuple, \
    Iterator, \
    Iterable, \
    TextIO
from abc import ABC, abstractmethod
from anytree import NodeMixin, RenderTree, ContStyle  # type:ignore

import re
import sys
import math
import operator
import argparse
import logging
import typing

T = TypeVar('T')

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

Numeric = Union[int, float]

scope_logger = logging.getLogger("scope")
parser_logger = logging.getLogger("parser")
runtime_logger = logging.getLogger("runtime")


def assert_with(cond: bool, err: Exception) -> None:
    if not cond:
        raise err


def any_of(vals: Iterable[T], pred: Callable[[T], bool]) -> bool:
    for val in vals:
        if pred(val):
            return True
    return False


def keyword(word: str) -> str:
    letters = "".join(f"[{c.lower()}{c.upper()}]" for c in word)
    return rf"{letters}\b"


@overload
def cast(ty: typing.Type[T], val: Any) -> T:
    pass


@overload
def cast(ty: Iterable[typing.Type], val: Any) -> Any:
    pass


@overload
def cast(ty: None, val: Any) -> None:
    pass


def cast(ty, val):
    ty = type(None) if ty is None else ty
    tys = ty if isinstance(ty, Iterable) else [ty]

    assert any_of(tys, lambda ty2: isinstance(val, ty2)), \
        f"val is type {type(val)} which is not a subtype of any of {tys}"
    return val


def setup_logging(verbose: bool) -> None:
    logging.disable(logging.NOTSET)
    logging.basicConfig(format="{message}", style="{")
    if verbose:
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)


def wrap_int32(val: int) -> int:
    """Reduce an arbitrary int to 32-bit two's complement."""
    return (val - INT32_MIN) % 2 ** 32 + INT32_MIN


def to_real(val: Numeric) -> float:
    if isinstance(val, int):
        return float(val)
    return cast(float, val)


def to_int32(val: Numeric) -> int:
    """
    Truncate toward zero. Reals that are not finite or do not fit in 32 bits
    become INT32_MIN, the value a hardware truncating conversion produces.
    """
    if isinstance(val, int):
        return val
    if not math.isfinite(val):
        return INT32_MIN
    truncated = math.trunc(val)
    if INT32_MIN <= truncated <= INT32_MAX:
        return truncated
    return INT32_MIN


def int_pow(base: int, exponent: int) -> int:
    """Binary exponentiation, wrapping to 32 bits after every multiply."""
    assert exponent >= 0
    result = 1
    factor = base
    while exponent > 0:
        if exponent & 1:
            result = wrap_int32(result * factor)
        exponent >>= 1
        if exponent:
            factor = wrap_int32(factor * factor)
    return result


def real_pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = exponent.is_integer() and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        # zero to a negative power, or a negative base with a fractional
        # exponent
        return math.inf if base == 0.0 else math.nan


def format_value(val: Numeric) -> str:
    if isinstance(val, int):
        return str(val)
    return f"{val:.4f}"


def kind_name(val: Numeric) -> str:
    return VarType.INTEGER.value if isinstance(val, int) else VarType.REAL.value


class TokenTypeValue(NamedTuple):
    pat: str
    re: bool = False


class Position(NamedTuple):
    line: int
    col: int


class TokenType(Enum):
    PROGRAM = TokenTypeValue(pat=keyword("PROGRAM"), re=True)
    VAR = TokenTypeValue(pat=keyword("VAR"), re=True)
    BEGIN = TokenTypeValue(pat=keyword("BEGIN"), re=True)
    END = TokenTypeValue(pat=keyword("END"), re=True)
    READ = TokenTypeValue(pat=keyword("READ"), re=True)
    WRITE = TokenTypeValue(pat=keyword("WRITE"), re=True)
    INTEGER = TokenTypeValue(pat=keyword("INTEGER"), re=True)
    REAL = TokenTypeValue(pat=keyword("REAL"), re=True)
    MOD = TokenTypeValue(pat=keyword("MOD"), re=True)

    REAL_CONST = TokenTypeValue(
        pat=r"(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re=True)
    INT_CONST = TokenTypeValue(pat=r"[0-9]+", re=True)
    STRING_CONST = TokenTypeValue(pat=r"'[^'\n]*'", re=True)
    ID = TokenTypeValue(pat=r"[a-zA-Z_][a-zA-Z0-9_]*", re=True)
    POW = TokenTypeValue(pat="^^")
    ASSIGN = TokenTypeValue(pat=":=")
    INC = TokenTypeValue(pat="++")
    DEC = TokenTypeValue(pat="--")
    ADD = TokenTypeValue(pat='+')
    SUB = TokenTypeValue(pat='-')
    MUL = TokenTypeValue(pat='*')
    FLOAT_DIV = TokenTypeValue(pat='/')
    LPAR = TokenTypeValue(pat='(')
    RPAR = TokenTypeValue(pat=')')
    COLON = TokenTypeValue(pat=":")
    SEMI = TokenTypeValue(pat=";")
    COMMENT = TokenTypeValue(pat=r"\{[^}]*\}", re=True)
    NEWLINE = TokenTypeValue(pat=r"\n", re=True)
    SKIP = TokenTypeValue(pat=r"[ \t\r\f]+", re=True)
    EOF = TokenTypeValue(pat=r"\Z", re=True)
    MISMATCH = TokenTypeValue(pat=r".", re=True)

    def __repr__(self) -> str:
        return str(self)

    @staticmethod
    def pattern(ident: 'TokenType') -> str:
        pat = ident.value.pat or ''
        return pat if ident.value.re else re.escape(pat)


class Token:
    def __init__(self, ty: TokenType, value: str, pos: Position) -> None:
        self.type: TokenType = ty
        self.value: str = value
        self.pos: Position = pos

    @property
    def line(self) -> int:
        return self.pos.line

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.type.name}, {self.value})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}" + \
               f"({self.type.name}, {self.value}, {self.pos})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Token) and \
               self.type == other.type and \
               self.value == other.value and \
               self.pos == other.pos

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)


class ErrorCode(Enum):
    ILLEGAL_CHARACTER = 'Illegal character'
    UNEXPECTED_TOKEN = 'Unexpected token'
    EXPECTED_TYPE = 'Expected type'
    TRAILING_INPUT = 'Trailing input after program'
    DUPLICATE_ID = 'Duplicate id found'
    ID_NOT_FOUND = 'Identifier not found'
    DIVISION_BY_ZERO = 'Division by zero'
    OPERAND_TYPE = 'Unexpected operand type'
    INPUT_FORMAT = 'Bad input format'


class Error(Exception):
    def __init__(
            self,
            error_code: ErrorCode,
            token: Optional[Token] = None,
            appended_message: Optional[Union[str, Callable[[], str]]] = None,
            message: Optional[Union[str, Callable[[], str]]] = None
    ):
        self.error_code: ErrorCode = error_code
        self.token: Optional[Token] = token
        self.line: Optional[int] = token.line if token is not None else None

        message2 = message() if callable(message) else message
        appended_message2 = appended_message() if callable(appended_message) \
            else appended_message

        if message2 is None:
            message2 = error_code.value if token is None \
                else f"{error_code.value} -> {token!r}"
        if appended_message2:
            message2 += f". {appended_message2}"

        self.message = f"{type(self).__name__}: {message2}"
        super().__init__(self.message)


class LexerError(Error):
    pass


class ParserError(Error):
    def __init__(
            self,
            error_code: ErrorCode,
            token: Optional[Token] = None,
            appended_message: Optional[Union[str, Callable[[], str]]] = None,
            message: Optional[Union[str, Callable[[], str]]] = None,
            expected: Optional[TokenType] = None,
            context: Optional[str] = None
    ):
        self.expected: Optional[TokenType] = expected
        self.actual: Optional[TokenType] = \
            token.type if token is not None else None
        self.context: Optional[str] = context
        super().__init__(error_code, token, appended_message, message)


class SemanticError(ParserError):
    pass


class InterpreterError(Error):
    pass


class Lexer(Iterable[Token]):
    __TOKEN_PATTERN: Optional[re.Pattern] = None

    @classmethod
    def _token_pattern(cls) -> re.Pattern:
        if cls.__TOKEN_PATTERN is None:
            token_pats = [
                rf"(?P<{tty.name}>{TokenType.pattern(tty)})"
                for tty in TokenType
            ]
            cls.__TOKEN_PATTERN = re.compile("|".join(token_pats))
        return cls.__TOKEN_PATTERN

    def __init__(self, text: str) -> None:
        self._text: str = text
        self.linenum: int = 1
        self.newline_anchor: int = -1

    def _position(self, index: int) -> Position:
        return Position(line=self.linenum, col=index - self.newline_anchor)

    def _iter_tokens(self) -> Iterator[Token]:
        for m in Lexer._token_pattern().finditer(self._text):
            name = m.lastgroup if m.lastgroup else ''
            tty = TokenType[name]
            lexeme = m[name]

            if tty == TokenType.NEWLINE:
                self.linenum += 1
                self.newline_anchor = m.start()
                continue
            if tty == TokenType.COMMENT:
                newlines = lexeme.count("\n")
                if newlines:
                    self.linenum += newlines
                    self.newline_anchor = m.start() + lexeme.rfind("\n")
                continue
            if tty == TokenType.SKIP:
                continue

            tok = Token(tty, lexeme, self._position(m.start()))
            if tty == TokenType.MISMATCH:
                raise LexerError(
                    error_code=ErrorCode.ILLEGAL_CHARACTER,
                    token=tok,
                    appended_message=f"No token starts with {lexeme!r}"
                )

            yield tok

    def __iter__(self) -> Iterator[Token]:
        return self._iter_tokens()


class VarType(Enum):
    INTEGER = 'INTEGER'
    REAL = 'REAL'

    def __repr__(self) -> str:
        return str(self)

    def zero(self) -> Numeric:
        return 0 if self is VarType.INTEGER else 0.0

    def coerce(self, val: Numeric) -> Numeric:
        return to_int32(val) if self is VarType.INTEGER else to_real(val)


class VarSymbol:
    def __init__(
            self,
            name: str,
            ty: VarType,
            value: Optional[Numeric] = None
    ) -> None:
        self.name: str = name
        self.type: VarType = ty
        self.value: Numeric = ty.zero() if value is None else value

    def __str__(self) -> str:
        return f"<{self.name}:{self.type.value}>"

    def __repr__(self) -> str:
        return f"{type(self).__name__}" + \
               f"(name='{self.name}', type='{self.type.value}', " + \
               f"value={self.value!r})"


class SymbolTable:
    def __init__(self, name: str = "global") -> None:
        self._symbols: Dict[str, VarSymbol] = {}
        self.name: str = name

    def __str__(self) -> str:
        return f"(" + \
               f"name: {self.name}, " + \
               f"symbols: {[str(sym) for sym in self._symbols.values()]}" + \
               ")"

    def __repr__(self) -> str:
        header = "Symbol Table Contents"
        name_header = "Table name"

        lines = [
            header,
            "=" * len(header),
            f"{name_header:<15}: {self.name}",
        ]
        lines += [f"{name:7}: {sym!r}" for name, sym in self._symbols.items()]
        return "\n".join(lines)

    def __getitem__(self, name: str) -> VarSymbol:
        assert isinstance(name, str), f"name must be a str"
        sym: Optional[VarSymbol] = self.lookup(name)
        assert sym is not None, f"{name} does not exist"
        return cast(VarSymbol, sym)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[VarSymbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def memory(self) -> Dict[str, Numeric]:
        return {name: sym.value for name, sym in self._symbols.items()}

    def lookup(self, name: str) -> Optional[VarSymbol]:
        scope_logger.info(f"Lookup: {name}. (Table name: {self.name})")
        return self._symbols.get(name)

    def insert(self, sym: VarSymbol) -> None:
        scope_logger.info(f"Insert: {sym.name}")
        assert sym.name not in self._symbols, f"{sym.name} already exists"
        self._symbols[sym.name] = sym

    def clear(self) -> None:
        scope_logger.info(f"Clear: {self.name}")
        self._symbols.clear()


class IAST(ABC, NodeMixin):
    def __init__(self, children: Optional[List['IAST']] = None):
        self.children: Tuple['IAST', ...] = tuple(children or [])

    @property
    def kids(self) -> Tuple['IAST', ...]:
        assert isinstance(self.children, tuple)
        return self.children

    @abstractmethod
    def __str__(self) -> str:
        return f"{type(self).__name__}({self.kids})"

    def __repr__(self) -> str:
        return str(self)


class Program(IAST):
    def __init__(self, nametok: Token, block: 'Block') -> None:
        self.token: Token = nametok
        self.name: str = nametok.value
        self.block: 'Block' = block
        super().__init__([self.block])

    def __str__(self) -> str:
        return f"{type(self).__name__}(name={self.name})"


class Block(IAST):
    def __init__(
            self,
            declarations: List['VarDecl'],
            compound_statement: 'Compound'
    ) -> None:
        self.declarations: List['VarDecl'] = declarations
        self.compound_statement: 'Compound' = compound_statement
        super().__init__(
            list(self.declarations) + [self.compound_statement])

    def __str__(self) -> str:
        return f"{type(self).__name__}()"


class VarDecl(IAST):
    def __init__(self, var: 'Var', ty: 'Type') -> None:
        self.var: 'Var' = var
        self.type: 'Type' = ty
        super().__init__([self.var, self.type])

    def __str__(self) -> str:
        return f"{type(self).__name__}()"


class Type(IAST):
    def __init__(self, tytok: Token) -> None:
        super().__init__()
        self.token: Token = tytok
        self.value: str = tytok.value
        self.var_type: VarType = VarType[tytok.type.name]

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class BinOp(IAST):
    def __init__(self, left: IAST, right: IAST, optok: Token) -> None:
        self.token: Token = optok
        self.value: str = self.token.value
        self.left: IAST = left
        self.right: IAST = right
        super().__init__([self.left, self.right])

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class Add(BinOp):
    pass


class Sub(BinOp):
    pass


class Mul(BinOp):
    pass


class FloatDiv(BinOp):
    pass


class Mod(BinOp):
    pass


class Pow(BinOp):
    pass


class UnOp(IAST):
    def __init__(self, right: IAST, optok: Token) -> None:
        self.right: IAST = right
        super().__init__([self.right])
        self.token: Token = optok
        self.value: str = self.token.value

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class Pos(UnOp):
    pass


class Neg(UnOp):
    pass


class PreIncDec(IAST):
    def __init__(self, var: 'Var', optok: Token) -> None:
        self.var: 'Var' = var
        super().__init__([self.var])
        self.token: Token = optok
        self.value: str = self.token.value

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class PreInc(PreIncDec):
    pass


class PreDec(PreIncDec):
    pass


class Num(IAST):
    def __init__(self, numtok: Token) -> None:
        super().__init__()
        self.token: Token = numtok
        if numtok.type == TokenType.INT_CONST:
            self.value: Numeric = wrap_int32(int(numtok.value))
        else:
            self.value = float(numtok.value)

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class Str(IAST):
    def __init__(self, strtok: Token) -> None:
        super().__init__()
        self.token: Token = strtok
        text = strtok.value
        if len(text) >= 2 and text[0] == text[-1] == "'":
            text = text[1:-1]
        self.value: str = text

    def __str__(self) -> str:
        return f"{type(self).__name__}(value='{self.value}')"


class Var(IAST):
    def __init__(self, idtok: Token) -> None:
        super().__init__()
        self.token: Token = idtok
        self.value: str = self.token.value

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class Compound(IAST):
    def __init__(self, children: Optional[List[IAST]] = None) -> None:
        super().__init__(children)

    def __str__(self) -> str:
        return f"{type(self).__name__}()"


class Assign(IAST):
    def __init__(self, left: Var, right: IAST, optok: Token) -> None:
        self.left: Var = left
        self.right: IAST = right
        super().__init__([self.left, self.right])
        self.token: Token = optok
        self.value: str = self.token.value

    def __str__(self) -> str:
        return f"{type(self).__name__}(value={self.value})"


class Read(IAST):
    def __init__(self, var: Var, token: Token) -> None:
        self.var: Var = var
        super().__init__([self.var])
        self.token: Token = token

    def __str__(self) -> str:
        return f"{type(self).__name__}()"


class Write(IAST):
    def __init__(self, arg: Union[Var, Str], token: Token) -> None:
        self.arg: Union[Var, Str] = arg
        super().__init__([self.arg])
        self.token: Token = token

    def __str__(self) -> str:
        return f"{type(self).__name__}()"


def dump_tree(node: IAST) -> str:
    return "\n".join(
        f"{pre}{n}" for pre, _, n in RenderTree(node, style=ContStyle()))


class Parser:
    STATEMENT_STARTS = [
        TokenType.BEGIN,
        TokenType.ID,
        TokenType.READ,
        TokenType.WRITE
    ]

    def __init__(
            self,
            tokens: Iterable[Token],
            symtab: Optional[SymbolTable] = None
    ) -> None:
        self._it: Iterator[Token] = iter(tokens)
        self.symtab: SymbolTable = \
            symtab if symtab is not None else SymbolTable()
        self._lookahead: Optional[Token] = None
        self._eof: Optional[Token] = None
        self._last_pos: Position = Position(line=1, col=1)

    def _assert(
            self,
            cond,
            errcode: ErrorCode,
            token: Token,
            msg: Optional[Union[str, Callable[[], str]]] = None,
            expected: Optional[TokenType] = None,
            context: Optional[str] = None
    ) -> None:
        assert_with(
            cond,
            ParserError(
                error_code=errcode,
                token=token,
                appended_message=msg,
                expected=expected,
                context=context
            )
        )

    def _assert_semantic(
            self,
            cond,
            errcode: ErrorCode,
            token: Token,
            msg: Optional[str] = None
    ) -> None:
        assert_with(
            cond,
            SemanticError(
                error_code=errcode,
                token=token,
                appended_message=msg
            )
        )

    def peek(self) -> Token:
        if self._lookahead is None:
            if self._eof is None:
                tok = next(self._it, None)
                if tok is None:
                    tok = Token(TokenType.EOF, "", self._last_pos)
                if tok.type == TokenType.EOF:
                    self._eof = tok
                self._last_pos = tok.pos
                self._lookahead = tok
            else:
                self._lookahead = self._eof
            parser_logger.info(f"peek: {self._lookahead!r}")
        return self._lookahead

    def advance(self) -> Token:
        tok = self.peek()
        parser_logger.info(f"consume: {tok.type.name}")
        self._lookahead = None
        return tok

    def expect(self, toktype: TokenType, context: str = "") -> Token:
        tok = self.peek()

        def gen_msg() -> str:
            where = f" {context}" if context else ""
            return f"Expected {toktype.name}{where}, got {tok.type.name}"

        self._assert(
            cond=tok.type == toktype,
            errcode=ErrorCode.UNEXPECTED_TOKEN,
            token=tok,
            msg=gen_msg,
            expected=toktype,
            context=context
        )

        return self.advance()

    def accept(self, toktype: TokenType) -> bool:
        if self.peek().type == toktype:
            self.advance()
            return True
        return False

    def declared_variable(self, context: str) -> Var:
        """variable: ID (must already be declared)"""
        idtok = self.expect(TokenType.ID, context)
        self._assert_semantic(
            cond=idtok.value in self.symtab,
            errcode=ErrorCode.ID_NOT_FOUND,
            token=idtok,
            msg=f"{idtok.value} is not declared"
        )
        return Var(idtok)

    def primary(self) -> IAST:
        """
        primary :
            LPAR expr RPAR |
            INT_CONST |
            REAL_CONST |
            variable
        """
        curtok = self.peek()

        if curtok.type == TokenType.LPAR:
            self.advance()
            node = self.expr()
            self.expect(TokenType.RPAR, "to close parenthesized expression")
            return node
        elif any_of(
                [TokenType.INT_CONST, TokenType.REAL_CONST],
                lambda numtype: curtok.type == numtype
        ):
            return Num(self.advance())
        elif curtok.type == TokenType.ID:
            return self.declared_variable("in expression")

        raise ParserError(
            error_code=ErrorCode.UNEXPECTED_TOKEN,
            token=curtok,
            appended_message="Expected one of " +
                             "['LPAR', 'INT_CONST', 'REAL_CONST', 'ID']",
            context="in expression"
        )

    def unary(self) -> IAST:
        """
        unary :
            ADD unary |
            SUB unary |
            INC variable |
            DEC variable |
            primary
        """
        curtok = self.peek()

        if curtok.type == TokenType.ADD:
            self.advance()
            return Pos(self.unary(), curtok)
        elif curtok.type == TokenType.SUB:
            self.advance()
            return Neg(self.unary(), curtok)
        elif curtok.type == TokenType.INC:
            self.advance()
            return PreInc(self.declared_variable("after ++"), curtok)
        elif curtok.type == TokenType.DEC:
            self.advance()
            return PreDec(self.declared_variable("after --"), curtok)
        return self.primary()

    def power(self) -> IAST:
        """power : unary (POW power)?"""
        node = self.unary()
        curtok = self.peek()
        if curtok.type == TokenType.POW:
            self.advance()
            node = Pow(node, self.power(), curtok)
        return node

    def term(self) -> IAST:
        """term : power ((MUL | FLOAT_DIV | MOD) power)*"""
        node: IAST = self.power()

        while True:
            curtok: Token = self.peek()
            if curtok.type == TokenType.MUL:
                self.advance()
                node = Mul(node, self.power(), curtok)
            elif curtok.type == TokenType.FLOAT_DIV:
                self.advance()
                node = FloatDiv(node, self.power(), curtok)
            elif curtok.type == TokenType.MOD:
                self.advance()
                node = Mod(node, self.power(), curtok)
            else:
                break

        return node

    def simple_expr(self) -> IAST:
        """simple_expr : term ((ADD | SUB) term)*"""
        node: IAST = self.term()

        while True:
            curtok: Token = self.peek()
            if curtok.type == TokenType.ADD:
                self.advance()
                node = Add(node, self.term(), curtok)
            elif curtok.type == TokenType.SUB:
                self.advance()
                node = Sub(node, self.term(), curtok)
            else:
                break

        return node

    def expr(self) -> IAST:
        """expr : simple_expr"""
        return self.simple_expr()

    def assignment_statement(self) -> Assign:
        """assignment_statement : variable ASSIGN expr"""
        left = self.declared_variable("as assignment target")
        assign_tok = self.expect(TokenType.ASSIGN, "after assignment target")
        right = self.expr()
        return Assign(left, right, assign_tok)

    def read_statement(self) -> Read:
        """read_statement : READ LPAR variable RPAR"""
        readtok = self.expect(TokenType.READ, "to start read statement")
        self.expect(TokenType.LPAR, "after READ")
        var = self.declared_variable("to READ into")
        self.expect(TokenType.RPAR, "after READ target")
        return Read(var, readtok)

    def write_statement(self) -> Write:
        """write_statement : WRITE LPAR (STRING_CONST | variable) RPAR"""
        writetok = self.expect(TokenType.WRITE, "to start write statement")
        self.expect(TokenType.LPAR, "after WRITE")

        curtok = self.peek()
        arg: Union[Var, Str]
        if curtok.type == TokenType.STRING_CONST:
            arg = Str(self.advance())
        elif curtok.type == TokenType.ID:
            arg = self.declared_variable("to WRITE")
        else:
            raise ParserError(
                error_code=ErrorCode.UNEXPECTED_TOKEN,
                token=curtok,
                appended_message="Expected one of ['STRING_CONST', 'ID']",
                context="inside WRITE(...)"
            )

        self.expect(TokenType.RPAR, "after WRITE argument")
        return Write(arg, writetok)

    def statement(self) -> IAST:
        """
        statement :
            compound_statement |
            assignment_statement |
            read_statement |
            write_statement
        """
        curtok = self.peek()

        if curtok.type == TokenType.BEGIN:
            return self.compound_statement()
        elif curtok.type == TokenType.ID:
            return self.assignment_statement()
        elif curtok.type == TokenType.READ:
            return self.read_statement()
        elif curtok.type == TokenType.WRITE:
            return self.write_statement()

        raise ParserError(
            error_code=ErrorCode.UNEXPECTED_TOKEN,
            token=curtok,
            appended_message="Expected one of " +
                             f"{[tty.name for tty in Parser.STATEMENT_STARTS]}",
            context="at start of statement"
        )

    def compound_statement(self) -> Compound:
        """compound_statement : BEGIN (statement (SEMI statement)*)? END"""
        self.expect(TokenType.BEGIN, "to open compound statement")

        nodes: List[IAST] = []
        if self.peek().type != TokenType.END:
            nodes.append(self.statement())
            while self.accept(TokenType.SEMI):
                nodes.append(self.statement())

        self.expect(TokenType.END, "to close compound statement")
        return Compound(nodes)

    def type_spec(self) -> Type:
        """type_spec : INTEGER | REAL"""
        curtok = self.peek()
        self._assert(
            cond=any_of(
                [TokenType.INTEGER, TokenType.REAL],
                lambda tty: curtok.type == tty
            ),
            errcode=ErrorCode.EXPECTED_TYPE,
            token=curtok,
            msg="Expected one of ['INTEGER', 'REAL']",
            context="in declaration"
        )
        return Type(self.advance())

    def variable_declaration(self) -> VarDecl:
        """variable_declaration : ID COLON type_spec SEMI"""
        idtok = self.expect(TokenType.ID, "as declared name")
        self.expect(TokenType.COLON, "after declared name")
        ty_node = self.type_spec()

        self._assert_semantic(
            cond=idtok.value not in self.symtab,
            errcode=ErrorCode.DUPLICATE_ID,
            token=idtok,
            msg=f"{idtok.value} is already declared"
        )
        self.symtab.insert(VarSymbol(idtok.value, ty_node.var_type))

        self.expect(TokenType.SEMI, "after declaration")
        return VarDecl(Var(idtok), ty_node)

    def declarations(self) -> List[VarDecl]:
        """declarations : (VAR variable_declaration*)?"""
        declarations: List[VarDecl] = []

        if self.accept(TokenType.VAR):
            while self.peek().type == TokenType.ID:
                declarations.append(self.variable_declaration())

        return declarations

    def block(self) -> Block:
        """block : declarations compound_statement"""
        declaration_nodes = self.declarations()
        compound_statement_node = self.compound_statement()
        return Block(declaration_nodes, compound_statement_node)

    def program(self) -> Program:
        """program : PROGRAM ID SEMI block"""
        self.expect(TokenType.PROGRAM, "at start of program")
        nametok = self.expect(TokenType.ID, "as program name")
        self.expect(TokenType.SEMI, "after program name")
        block_node = self.block()
        return Program(nametok, block_node)

    def parse_expr(self) -> IAST:
        return self.expr()

    def parse_compound(self) -> Compound:
        return self.compound_statement()

    def parse(self) -> Program:
        prog = self.program()
        try:
            curtok = self.peek()
        except LexerError as e:
            raise ParserError(
                error_code=ErrorCode.TRAILING_INPUT,
                token=e.token,
                appended_message="Expected EOF after the final END",
                expected=TokenType.EOF,
                context="at end of program"
            ) from e
        self._assert(
            cond=curtok.type == TokenType.EOF,
            errcode=ErrorCode.TRAILING_INPUT,
            token=curtok,
            msg="Expected EOF after the final END",
            expected=TokenType.EOF,
            context="at end of program"
        )
        return prog


class InputReader:
    INT_PAT = re.compile(r"[+-]?[0-9]+")
    REAL_PAT = re.compile(
        r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

    def __init__(self, stream: TextIO) -> None:
        self._stream: TextIO = stream
        self._words: List[str] = []

    def next_word(self) -> Optional[str]:
        while not self._words:
            line = self._stream.readline()
            if not line:
                return None
            self._words = line.split()
        return self._words.pop(0)

    def read_integer(self) -> Optional[int]:
        word = self.next_word()
        if word is None or not InputReader.INT_PAT.fullmatch(word):
            return None
        val = int(word)
        return val if INT32_MIN <= val <= INT32_MAX else None

    def read_real(self) -> Optional[float]:
        word = self.next_word()
        if word is None or not InputReader.REAL_PAT.fullmatch(word):
            return None
        return float(word)


class INodeVisitor(ABC):
    def _gen_visit_method_name(self, node: IAST) -> str:
        method_name = '_visit_' + type(node).__name__
        return method_name.lower()

    def visit(self, node: IAST) -> Union[int, float, str, None]:
        method_name = self._gen_visit_method_name(node)

        def raise_visit_error(_: IAST) -> None:
            assert False, f"No {method_name} method"

        return getattr(self, method_name, raise_visit_error)(node)

    @abstractmethod
    def _visit_pos(self, node: Pos) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_neg(self, node: Neg) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_preinc(self, node: PreInc) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_predec(self, node: PreDec) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_add(self, node: Add) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_sub(self, node: Sub) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_mul(self, node: Mul) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_floatdiv(self, node: FloatDiv) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_mod(self, node: Mod) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_pow(self, node: Pow) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_num(self, node: Num) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_var(self, node: Var) -> Optional[Numeric]:
        pass

    @abstractmethod
    def _visit_str(self, node: Str) -> Optional[str]:
        pass

    @abstractmethod
    def _visit_compound(self, node: Compound) -> None:
        pass

    @abstractmethod
    def _visit_assign(self, node: Assign) -> None:
        pass

    @abstractmethod
    def _visit_read(self, node: Read) -> None:
        pass

    @abstractmethod
    def _visit_write(self, node: Write) -> None:
        pass

    @abstractmethod
    def _visit_program(self, node: Program) -> None:
        pass

    @abstractmethod
    def _visit_block(self, node: Block) -> None:
        pass

    @abstractmethod
    def _visit_vardecl(self, node: VarDecl) -> None:
        pass

    @abstractmethod
    def _visit_type(self, node: Type) -> None:
        pass


class Interpreter(INodeVisitor):
    def __init__(
            self,
            symtab: Optional[SymbolTable] = None,
            instream: Optional[TextIO] = None,
            outstream: Optional[TextIO] = None
    ) -> None:
        self.symtab: SymbolTable = \
            symtab if symtab is not None else SymbolTable()
        self.reader: InputReader = \
            InputReader(instream if instream is not None else sys.stdin)
        self.output: TextIO = \
            outstream if outstream is not None else sys.stdout

    def _assert(
            self,
            cond,
            errcode: ErrorCode,
            token: Optional[Token],
            msg: Optional[Union[str, Callable[[], str]]] = None
    ) -> None:
        assert_with(
            cond,
            InterpreterError(
                error_code=errcode,
                token=token,
                appended_message=msg
            )
        )

    def _lookup(self, node: Var) -> VarSymbol:
        sym = self.symtab.lookup(node.value)
        self._assert(
            cond=sym is not None,
            errcode=ErrorCode.ID_NOT_FOUND,
            token=node.token,
            msg=f"{node.value} is not declared"
        )
        return cast(VarSymbol, sym)

    def _operands(self, node: BinOp) -> Tuple[Numeric, Numeric]:
        return \
            cast([int, float], self.visit(node.left)), \
            cast([int, float], self.visit(node.right))

    def _arith(
            self,
            node: BinOp,
            op: Callable[[Any, Any], Any]
    ) -> Numeric:
        left, right = self._operands(node)
        if isinstance(left, float) or isinstance(right, float):
            return op(to_real(left), to_real(right))
        return wrap_int32(op(left, right))

    def _step(self, node: PreIncDec, delta: int) -> Numeric:
        sym = self._lookup(node.var)
        if sym.type is VarType.INTEGER:
            sym.value = wrap_int32(cast(int, sym.value) + delta)
        else:
            sym.value = cast(float, sym.value) + float(delta)
        return sym.value

    def _visit_pos(self, node: Pos) -> Numeric:
        return cast([int, float], self.visit(node.right))

    def _visit_neg(self, node: Neg) -> Numeric:
        val = cast([int, float], self.visit(node.right))
        return wrap_int32(-val) if isinstance(val, int) else -val

    def _visit_preinc(self, node: PreInc) -> Numeric:
        return self._step(node, 1)

    def _visit_predec(self, node: PreDec) -> Numeric:
        return self._step(node, -1)

    def _visit_add(self, node: Add) -> Numeric:
        return self._arith(node, operator.add)

    def _visit_sub(self, node: Sub) -> Numeric:
        return self._arith(node, operator.sub)

    def _visit_mul(self, node: Mul) -> Numeric:
        return self._arith(node, operator.mul)

    def _visit_floatdiv(self, node: FloatDiv) -> float:
        left, right = self._operands(node)
        dividend, divisor = to_real(left), to_real(right)
        self._assert(
            cond=divisor != 0.0,
            errcode=ErrorCode.DIVISION_BY_ZERO,
            token=node.token
        )
        return dividend / divisor

    def _visit_mod(self, node: Mod) -> int:
        left, right = self._operands(node)
        self._assert(
            cond=isinstance(left, int) and isinstance(right, int),
            errcode=ErrorCode.OPERAND_TYPE,
            token=node.token,
            msg=lambda: "MOD requires INTEGER operands, got " +
                        f"{kind_name(left)} and {kind_name(right)}"
        )
        self._assert(
            cond=right != 0,
            errcode=ErrorCode.DIVISION_BY_ZERO,
            token=node.token
        )
        # python's % already takes the sign of the divisor
        return wrap_int32(cast(int, left) % cast(int, right))

    def _visit_pow(self, node: Pow) -> Numeric:
        base, exponent = self._operands(node)
        if isinstance(base, int) and isinstance(exponent, int) \
                and exponent >= 0:
            return int_pow(base, exponent)
        return real_pow(to_real(base), to_real(exponent))

    def _visit_num(self, node: Num) -> Numeric:
        return node.value

    def _visit_var(self, node: Var) -> Numeric:
        return self._lookup(node).value

    def _visit_str(self, node: Str) -> str:
        return node.value

    def _visit_compound(self, node: Compound) -> None:
        for child in node.kids:
            self.visit(child)

    def _visit_assign(self, node: Assign) -> None:
        sym = self._lookup(node.left)
        val = cast([int, float], self.visit(node.right))
        sym.value = sym.type.coerce(val)
        runtime_logger.info(f"Assign: {sym.name} = {sym.value!r}")

    def _visit_read(self, node: Read) -> None:
        sym = self._lookup(node.var)
        val: Optional[Numeric]
        if sym.type is VarType.INTEGER:
            val = self.reader.read_integer()
        else:
            val = self.reader.read_real()

        self._assert(
            cond=val is not None,
            errcode=ErrorCode.INPUT_FORMAT,
            token=node.var.token,
            msg=f"Expected {sym.type.value} for {sym.name}"
        )
        sym.value = cast([int, float], val)
        runtime_logger.info(f"Read: {sym.name} = {sym.value!r}")

    def _visit_write(self, node: Write) -> None:
        if isinstance(node.arg, Str):
            text = cast(str, self.visit(node.arg))
        else:
            text = format_value(self._lookup(node.arg).value)
        self.output.write(f"{text}\n")

    def _visit_program(self, node: Program) -> None:
        runtime_logger.info(f"ENTER program {node.name}")
        self.visit(node.block)
        runtime_logger.info(f"LEAVE program {node.name}")

    def _visit_block(self, node: Block) -> None:
        for ast in node.kids:
            self.visit(ast)

    def _visit_vardecl(self, node: VarDecl) -> None:
        pass

    def _visit_type(self, node: Type) -> None:
        pass

    def interpret(self, ast: IAST) -> Union[int, float, str, None]:
        val = self.visit(ast)
        runtime_logger.info(f"global runtime memory: {self.symtab.memory}")
        return val


def main(argv: Optional[Sequence[str]] = None) -> int:
    argparser = argparse.ArgumentParser(
        description="TIPS subset interpreter")
    argparser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="verbose debugging output"
    )
    argparser.add_argument(
        "-t", "--tree",
        action="store_true",
        help="print the syntax tree of FILE instead of running it"
    )
    argparser.add_argument("FILE", help="TIPS source file")
    args = argparser.parse_args(argv)

    setup_logging(args.verbose)

    with open(args.FILE) as tips_file:
        text = tips_file.read()

    symtab: SymbolTable = SymbolTable()
    try:
        parser: Parser = Parser(Lexer(text), symtab)
        ast: Program = parser.parse()
        logging.info(repr(symtab))

        if args.tree:
            print(dump_tree(ast))
        else:
            interpreter: Interpreter = Interpreter(symtab)
            interpreter.interpret(ast)
    except Error as e:
        print(e.message, file=sys.stderr)
        return 1
    return 0


logging.disable(logging.CRITICAL)
if __name__ == '__main__':
    sys.exit(main())
