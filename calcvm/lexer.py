import logging
from enum import Enum
from typing import List, Optional

from .exceptions import LexerError, ErrorCode

logger = logging.getLogger(__name__)


class Location:
    def __init__(self, lineno: int, column: int, offset: int):
        self.lineno = lineno
        self.column = column
        self.offset = offset

    def __repr__(self):
        return f'{self.lineno}:{self.column}'


class TokenType(Enum):
    NUMBER = 'NUMBER'
    IDENTIFIER = 'IDENTIFIER'
    BOOLEAN = 'BOOLEAN'

    # reserved word
    IF = 'if'
    ELSE = 'else'

    # symbols
    ASSIGN = '='
    SEMICOLON = ';'
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'
    OPERATOR = 'OPERATOR'

    # other
    END = 'END'


reserved_words = {
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'true': TokenType.BOOLEAN,
    'false': TokenType.BOOLEAN,
}

single_character_symbols = {
    '=': TokenType.ASSIGN,
    ';': TokenType.SEMICOLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,

    '+': TokenType.OPERATOR,
    '-': TokenType.OPERATOR,
    '*': TokenType.OPERATOR,
    '/': TokenType.OPERATOR,
    '%': TokenType.OPERATOR,
    '^': TokenType.OPERATOR,
    '<': TokenType.OPERATOR,
    '>': TokenType.OPERATOR,
    '!': TokenType.OPERATOR,
}

# checked before single_character_symbols so that '==' never lexes as '=' '='
double_character_symbols = {
    '==': TokenType.OPERATOR,
    '!=': TokenType.OPERATOR,
    '<=': TokenType.OPERATOR,
    '>=': TokenType.OPERATOR,
    '**': TokenType.OPERATOR,
    '&&': TokenType.OPERATOR,
    '||': TokenType.OPERATOR,
}


class Token:
    def __init__(self, token_type: TokenType, value: str, start: Location, end: Location):
        self.type = token_type
        self.value = value
        self.start = start
        self.end = end

    @property
    def lineno(self) -> int:
        return self.start.lineno

    @property
    def column(self) -> int:
        return self.start.column

    @property
    def offset(self) -> int:
        return self.start.offset

    def __repr__(self):
        return f'Token({self.type.name}, {self.value!r}, ' \
               f'position={self.start.lineno}:{self.start.column} to {self.end.lineno}:{self.end.column})'


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.lineno = 1
        self.column = 1

    @property
    def current_char(self) -> Optional[str]:
        if self.position >= len(self.text):
            return None
        return self.text[self.position]

    @property
    def next_char(self) -> Optional[str]:
        if self.position + 1 >= len(self.text):
            return None
        return self.text[self.position + 1]

    def location(self):
        return Location(self.lineno, self.column, self.position)

    def error(self, message: str, start: Location = None):
        if start is None:
            start = self.location()
        raise LexerError(error_code=ErrorCode.LEXER_ERROR, message=message,
                         lineno=start.lineno, column=start.column)

    def advance_position(self):
        if self.current_char == '\n':
            self.lineno += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1

    def skip_line_comment(self):
        while self.current_char is not None and self.current_char != '\n':
            self.advance_position()
        if self.current_char == '\n':
            self.advance_position()

    def skip_block_comment(self):
        start = self.location()
        self.advance_position()
        self.advance_position()
        while self.current_char is not None:
            if self.current_char == '*' and self.next_char == '/':
                self.advance_position()
                self.advance_position()
                return
            self.advance_position()
        self.error(f'Unclosed block comment starting at line {start.lineno}, column {start.column}', start)

    def read_number(self, start: Location):
        value = ''
        while self.current_char is not None and (self.current_char.isdecimal() or self.current_char == '.'):
            if self.current_char == '.' and '.' in value:
                self.error('Multiple decimal points in number', start)
            value += self.current_char
            self.advance_position()
        if value.endswith('.'):
            self.error('Number cannot end with decimal point', start)
        return Token(TokenType.NUMBER, value, start, self.location())

    def read_word(self, start: Location):
        value = ''
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == '_'):
            value += self.current_char
            self.advance_position()
        token_type = reserved_words.get(value, TokenType.IDENTIFIER)
        return Token(token_type, value, start, self.location())

    def get_next_token(self):
        while self.current_char is not None:
            start = self.location()
            if self.current_char.isspace():
                while self.current_char is not None and self.current_char.isspace():
                    self.advance_position()
                continue
            elif self.current_char == '/' and self.next_char == '/':
                self.skip_line_comment()
                continue
            elif self.current_char == '/' and self.next_char == '*':
                self.skip_block_comment()
                continue
            elif self.current_char.isdecimal():
                return self.read_number(start)
            elif self.current_char.isalpha():
                return self.read_word(start)
            else:
                if self.next_char is not None:
                    value = self.current_char + self.next_char
                    token_type = double_character_symbols.get(value)
                    if token_type is not None:
                        self.advance_position()
                        self.advance_position()
                        return Token(token_type, value, start, self.location())
                value = self.current_char
                token_type = single_character_symbols.get(value)
                if token_type is not None:
                    self.advance_position()
                    return Token(token_type, value, start, self.location())
                elif value in '&|':
                    self.error(f"Invalid symbol: '{value}'", start)
                else:
                    self.error(f"Unknown character: '{value}'", start)

        return Token(TokenType.END, '', self.location(), self.location())

    def tokenize(self) -> List[Token]:
        tokens = list()
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == TokenType.END:
                break
        logger.debug('lexed %d tokens', len(tokens))
        return tokens
