"""
Token types and the Token value produced by the tokenizer.
"""

from dataclasses import dataclass
from typing import Any, Optional


class TokenType:
    """Token type constants"""
    # Special
    EOF = "EOF"
    ILLEGAL = "ILLEGAL"

    # Identifiers and literals
    IDENTIFIER = "IDENTIFIER"
    INTEGER = "INTEGER"
    STRING = "STRING"

    # Keywords
    LET = "LET"
    RETURN = "RETURN"
    FN = "FN"
    IF = "IF"
    ELSE = "ELSE"
    TRUE = "TRUE"
    FALSE = "FALSE"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    LESS = "LESS"
    GREATER = "GREATER"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    BANG = "BANG"

    # Delimiters
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"
    COLON = "COLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"


KEYWORDS = {
    'let': TokenType.LET,
    'return': TokenType.RETURN,
    'fn': TokenType.FN,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
}

# Single-character tokens; '=' and '!' are handled with lookahead
PUNCTUATION = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
}


def lookup_identifier(text: str) -> str:
    """Return the keyword type for text, or IDENTIFIER"""
    return KEYWORDS.get(text, TokenType.IDENTIFIER)


@dataclass(frozen=True)
class Token:
    """Token from Monkey source"""
    type: str
    value: Any
    pos: int
    error: Optional[str] = None

    def describe(self) -> str:
        """Short form used in parser messages, e.g. EQUAL ('=')"""
        if self.type == TokenType.EOF:
            return self.type
        return f"{self.type} ({self.value!r})"
