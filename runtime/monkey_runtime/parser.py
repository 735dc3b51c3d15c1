"""
Monkey Parser

Operator-precedence (Pratt) parser over a two-token window. Each token type
may register a prefix handler (it starts an expression) and an infix handler
(it continues one). Binding power comes from ``PRECEDENCES``; equal
precedence associates to the left because the infix loop only continues while
the next operator binds strictly tighter.

Malformed input never raises. Every failed construct appends one message to
``Parser.errors`` and parsing resumes after the next ``;``, or at the
closing ``}`` of the enclosing block.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .nodes import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, Program, ReturnStatement, Statement, StringLiteral,
)
from .tokenizer import Tokenizer
from .tokens import Token, TokenType


logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2        # == !=
    LESSGREATER = 3   # < >
    SUM = 4           # + -
    PRODUCT = 5       # * /
    PREFIX = 6        # -x !x
    CALL = 7          # f(x)
    INDEX = 8         # a[i]


PRECEDENCES = {
    TokenType.EQUAL_EQUAL: Precedence.EQUALS,
    TokenType.NOT_EQUAL: Precedence.EQUALS,
    TokenType.LESS: Precedence.LESSGREATER,
    TokenType.GREATER: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.STAR: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}


class Parser:
    """Parse Monkey tokens into an AST, collecting syntax errors"""

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer
        self.errors: List[str] = []
        self.error_positions: List[int] = []
        # Braces currently open, and the depth at which each enclosing block opened
        self._brace_depth = 0
        self._block_bases: List[int] = []

        self._prefix_fns: Dict[str, Callable[[], Optional[Expression]]] = {
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FN: self._parse_function_literal,
            TokenType.LBRACKET: self._parse_array_literal,
            TokenType.LBRACE: self._parse_hash_literal,
        }
        self._infix_fns: Dict[str, Callable[[Expression], Optional[Expression]]] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.STAR: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.LESS: self._parse_infix_expression,
            TokenType.GREATER: self._parse_infix_expression,
            TokenType.EQUAL_EQUAL: self._parse_infix_expression,
            TokenType.NOT_EQUAL: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
            TokenType.LBRACKET: self._parse_index_expression,
        }

        self.current: Token = self.tokenizer.next_token()
        self.peek: Token = self.tokenizer.next_token()
        if self._current_is(TokenType.LBRACE):
            self._brace_depth = 1

    def parse_program(self) -> Program:
        """Parse statements until EOF; inspect ``errors`` afterwards"""
        program = Program()

        while not self._current_is(TokenType.EOF):
            statement = self._parse_statement()
            if statement is not None:
                program.statements.append(statement)
            self._next_token()

        if self.errors:
            logger.debug("parsed %d statements with %d errors",
                         len(program.statements), len(self.errors))
        return program

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> Optional[Statement]:
        if self._current_is(TokenType.LET):
            statement = self._parse_let_statement()
        elif self._current_is(TokenType.RETURN):
            statement = self._parse_return_statement()
        else:
            statement = self._parse_expression_statement()

        if statement is None:
            self._skip_statement()
        return statement

    def _parse_let_statement(self) -> Optional[LetStatement]:
        if not self._expect_peek(TokenType.IDENTIFIER):
            return None
        name = Identifier(self.current.value)

        if not self._expect_peek(TokenType.EQUAL):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None or not self._expect_peek(TokenType.SEMICOLON):
            return None
        return LetStatement(name, value)

    def _parse_return_statement(self) -> Optional[ReturnStatement]:
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None or not self._expect_peek(TokenType.SEMICOLON):
            return None
        return ReturnStatement(value)

    def _parse_expression_statement(self) -> Optional[ExpressionStatement]:
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self._peek_is(TokenType.SEMICOLON):
            self._next_token()
        return ExpressionStatement(expression)

    def _parse_block_statement(self) -> Optional[BlockStatement]:
        """Parse statements up to the closing brace; current is '{'"""
        block = BlockStatement()
        base = self._brace_depth
        self._block_bases.append(base)
        self._next_token()

        try:
            while not self._current_is(TokenType.RBRACE):
                if self._current_is(TokenType.EOF):
                    self._error(
                        f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead",
                        self.current.pos,
                    )
                    return None
                statement = self._parse_statement()
                if statement is not None:
                    block.statements.append(statement)
                elif self._brace_depth < base and self._current_is(TokenType.RBRACE):
                    # recovery stopped on this block's closing brace
                    continue
                self._next_token()
        finally:
            self._block_bases.pop()

        return block

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        token = self.current
        if token.type == TokenType.ILLEGAL:
            self._error(token.error or f"illegal token {token.value!r}", token.pos)
            return None

        prefix = self._prefix_fns.get(token.type)
        if prefix is None:
            self._error(f"no prefix parse function for {token.type} found", token.pos)
            return None

        left = prefix()
        while left is not None and not self._peek_is(TokenType.SEMICOLON) \
                and precedence < self._peek_precedence():
            infix = self._infix_fns.get(self.peek.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Identifier:
        return Identifier(self.current.value)

    def _parse_integer_literal(self) -> IntegerLiteral:
        return IntegerLiteral(self.current.value)

    def _parse_string_literal(self) -> StringLiteral:
        # An unterminated string still yields its literal
        if self.current.error:
            self._error(self.current.error, self.current.pos)
        return StringLiteral(self.current.value)

    def _parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self._current_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Optional[PrefixExpression]:
        operator = self.current.value
        self._next_token()

        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(operator, right)

    def _parse_infix_expression(self, left: Expression) -> Optional[InfixExpression]:
        operator = self.current.value
        precedence = self._current_precedence()
        self._next_token()

        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(left, operator, right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self._next_token()

        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None or not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> Optional[IfExpression]:
        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()

        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None or not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None

        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self._peek_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(condition, consequence, alternative)

    def _parse_function_literal(self) -> Optional[FunctionLiteral]:
        if not self._expect_peek(TokenType.LPAREN):
            return None

        parameters = self._parse_function_parameters()
        if parameters is None or not self._expect_peek(TokenType.LBRACE):
            return None

        body = self._parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(parameters, body)

    def _parse_function_parameters(self) -> Optional[List[Identifier]]:
        parameters: List[Identifier] = []
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return parameters

        if not self._expect_peek(TokenType.IDENTIFIER):
            return None
        parameters.append(Identifier(self.current.value))

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENTIFIER):
                return None
            parameters.append(Identifier(self.current.value))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def _parse_call_expression(self, function: Expression) -> Optional[CallExpression]:
        arguments = self._parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return CallExpression(function, arguments)

    def _parse_array_literal(self) -> Optional[ArrayLiteral]:
        elements = self._parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(elements)

    def _parse_index_expression(self, left: Expression) -> Optional[IndexExpression]:
        self._next_token()

        index = self._parse_expression(Precedence.LOWEST)
        if index is None or not self._expect_peek(TokenType.RBRACKET):
            return None
        return IndexExpression(left, index)

    def _parse_hash_literal(self) -> Optional[HashLiteral]:
        pairs: List[Tuple[Expression, Expression]] = []

        while not self._peek_is(TokenType.RBRACE):
            self._next_token()
            key = self._parse_expression(Precedence.LOWEST)
            if key is None or not self._expect_peek(TokenType.COLON):
                return None

            self._next_token()
            value = self._parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self._peek_is(TokenType.RBRACE) and not self._expect_peek(TokenType.COMMA):
                return None

        self._next_token()
        return HashLiteral(pairs)

    def _parse_expression_list(self, end: str) -> Optional[List[Expression]]:
        """Parse comma-separated expressions up to end; current is the opener"""
        items: List[Expression] = []
        if self._peek_is(end):
            self._next_token()
            return items

        self._next_token()
        item = self._parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            item = self._parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self._expect_peek(end):
            return None
        return items

    # ------------------------------------------------------------------
    # Parser utilities
    # ------------------------------------------------------------------

    def _next_token(self):
        self.current = self.peek
        self.peek = self.tokenizer.next_token()
        if self.current.type == TokenType.LBRACE:
            self._brace_depth += 1
        elif self.current.type == TokenType.RBRACE and self._brace_depth > 0:
            self._brace_depth -= 1

    def _current_is(self, token_type: str) -> bool:
        return self.current.type == token_type

    def _peek_is(self, token_type: str) -> bool:
        return self.peek.type == token_type

    def _expect_peek(self, token_type: str) -> bool:
        """Advance if the next token has token_type; otherwise record an error and stay put"""
        if self._peek_is(token_type):
            self._next_token()
            return True
        self._error(
            f"expected next token to be {token_type}, got {self.peek.describe()} instead",
            self.peek.pos,
        )
        return False

    def _skip_statement(self):
        """
        Skip the rest of a failed statement.

        Stops on a ``;`` at the statement's own brace depth. Inside a block it
        also stops short of the block's closing ``}``, or on it when the failed
        statement already consumed it, so the block can still finish.
        """
        base = self._block_bases[-1] if self._block_bases else 0
        while not self._current_is(TokenType.EOF):
            if self._brace_depth < base:
                return
            if self._brace_depth == base:
                if self._current_is(TokenType.SEMICOLON):
                    return
                if self._block_bases and self._peek_is(TokenType.RBRACE):
                    return
            self._next_token()

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def _current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    def _error(self, message: str, pos: int):
        logger.debug("parse error at %d: %s", pos, message)
        self.errors.append(message)
        self.error_positions.append(pos)


def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse source into a Program plus the syntax errors found"""
    parser = Parser(Tokenizer(source))
    program = parser.parse_program()
    return program, list(parser.errors)


__all__ = ['Parser', 'Precedence', 'PRECEDENCES', 'parse']
