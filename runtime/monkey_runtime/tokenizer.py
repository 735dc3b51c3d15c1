"""
Monkey Tokenizer

Turns Monkey source text into a lazy stream of tokens. Lexical problems are
never raised here: an unrecognised character or an out-of-range integer comes
back as an ILLEGAL token, and an unterminated string comes back as a STRING
token with ``error`` set, so the parser can report them alongside syntax
errors.
"""

from typing import Iterator, List

from .tokens import PUNCTUATION, Token, TokenType, lookup_identifier


INT64_MAX = 2 ** 63 - 1

WHITESPACE = ' \t\n\r'

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
}


def _is_letter(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Tokenizer:
    """Tokenize Monkey source code"""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def next_token(self) -> Token:
        """Return the next token; EOF is returned forever once reached"""
        self._skip_whitespace()

        if self.pos >= len(self.source):
            return Token(TokenType.EOF, None, self.pos)

        start = self.pos
        ch = self.source[self.pos]

        if _is_letter(ch):
            return self._read_identifier()
        if _is_digit(ch):
            return self._read_number()
        if ch == '"':
            return self._read_string()

        if ch == '=':
            if self._peek_char() == '=':
                self.pos += 2
                return Token(TokenType.EQUAL_EQUAL, '==', start)
            self.pos += 1
            return Token(TokenType.EQUAL, ch, start)

        if ch == '!':
            if self._peek_char() == '=':
                self.pos += 2
                return Token(TokenType.NOT_EQUAL, '!=', start)
            self.pos += 1
            return Token(TokenType.BANG, ch, start)

        self.pos += 1
        if ch in PUNCTUATION:
            return Token(PUNCTUATION[ch], ch, start)

        return Token(
            TokenType.ILLEGAL, ch, start,
            error=f"illegal character {ch!r} at position {start}",
        )

    def tokenize(self) -> List[Token]:
        """Tokenize entire source, EOF token included"""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def _peek_char(self) -> str:
        """Return the character after the current one, or '' at end"""
        if self.pos + 1 >= len(self.source):
            return ''
        return self.source[self.pos + 1]

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def _read_identifier(self) -> Token:
        """Read identifier or keyword"""
        start = self.pos
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if _is_letter(ch) or _is_digit(ch):
                self.pos += 1
            else:
                break

        text = self.source[start:self.pos]
        return Token(lookup_identifier(text), text, start)

    def _read_number(self) -> Token:
        """Read a decimal integer literal"""
        start = self.pos
        while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
            self.pos += 1

        text = self.source[start:self.pos]
        value = int(text)
        if value > INT64_MAX:
            return Token(
                TokenType.ILLEGAL, text, start,
                error=f"integer literal {text} out of range",
            )
        return Token(TokenType.INTEGER, value, start)

    def _read_string(self) -> Token:
        """Read string literal, decoding escape sequences"""
        start = self.pos
        self.pos += 1  # Skip opening quote
        chars = []

        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == '"':
                self.pos += 1  # Skip closing quote
                return Token(TokenType.STRING, ''.join(chars), start)
            if ch == '\\' and self.pos + 1 < len(self.source):
                escaped = self.source[self.pos + 1]
                chars.append(ESCAPES.get(escaped, escaped))
                self.pos += 2
            else:
                chars.append(ch)
                self.pos += 1

        return Token(
            TokenType.STRING, ''.join(chars), start,
            error="unterminated string literal",
        )


def tokenize(source: str) -> Iterator[Token]:
    """Lazily tokenize source, ending with a single EOF token"""
    return iter(Tokenizer(source))


__all__ = ['Tokenizer', 'tokenize', 'INT64_MAX']
