"""
minicc Lexer (Tokenizer)
========================

This module converts source text into the list of tokens consumed by
the parser.

Token Categories
----------------
- Keywords: int, return
- Identifiers: function names
- Numbers: unsigned decimal literals (up to 64 bits)
- Punctuation: { } ( ) ;
- Operators: - ~ ! + * /
- Extended operators: && || == != < <= > >= (lexed but not parsed)

Scanning Rules
--------------
The scan is a single left-to-right pass with one character of lookahead:

1. Single-character punctuation and operators map directly.
2. A decimal digit starts a maximal-munch number.
3. A letter or underscore starts a maximal-munch word, which is then
   checked against the keyword table.
4. '&', '|' and '=' always consume the following character and only form
   a token if it repeats them ('&&', '||', '=='). '!', '<' and '>' take an
   optional '='.
5. Anything else, whitespace included, produces no token.

Lexical Gaps
------------
A span that produces no token (an unknown character, a lone '&', a
literal wider than 64 bits) is dropped. By default this is silent apart
from a DEBUG log line and a warning in the optional WarningCollector. In
strict mode the lexer raises a LexerError instead.

Example Usage
-------------
>>> from minicc.compiler.lexer import CLexer
>>> for token in CLexer("return 42;").tokenize():
...     print(token)
Token(RETURN, 1:1)
Token(NUMBER, 42, 1:8)
Token(SEMICOLON, 1:10)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from minicc.errors import SourceLocation
from minicc.compiler.errors import (
    WarningCollector,
    InvalidCharacterError,
    NumberOverflowError,
)

logger = logging.getLogger(__name__)

# Largest value a NUMBER token can carry
U64_MAX = 2**64 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the minicc language."""

    # === Delimiters ===
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    SEMICOLON = auto()      # ;

    # === Keywords ===
    INT = auto()            # int
    RETURN = auto()         # return

    # === Identifiers and Literals ===
    NUMBER = auto()         # unsigned decimal literal
    IDENTIFIER = auto()     # function names

    # === Unary / Arithmetic Operators ===
    MINUS = auto()          # -
    TILDE = auto()          # ~
    NOT = auto()            # !
    PLUS = auto()           # +
    STAR = auto()           # *
    SLASH = auto()          # /

    # === Logical and Comparison Operators ===
    AND = auto()            # &&
    OR = auto()             # ||
    EQ = auto()             # ==
    NE = auto()             # !=
    LT = auto()             # <
    LE = auto()             # <=
    GT = auto()             # >
    GE = auto()             # >=


# Map keyword strings to their token types
KEYWORDS: dict[str, TokenType] = {
    "int": TokenType.INT,
    "return": TokenType.RETURN,
}

# Characters that map straight to a token
SINGLE_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ";": TokenType.SEMICOLON,
    "-": TokenType.MINUS,
    "~": TokenType.TILDE,
    "+": TokenType.PLUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
}

# Characters that are only valid when doubled
PAIRED_OPERATORS: dict[str, TokenType] = {
    "&": TokenType.AND,
    "|": TokenType.OR,
    "=": TokenType.EQ,
}

# Characters with an optional '=' suffix: char -> (alone, with '=')
EQUALS_SUFFIXED: dict[str, tuple[TokenType, TokenType]] = {
    "!": (TokenType.NOT, TokenType.NE),
    "<": (TokenType.LT, TokenType.LE),
    ">": (TokenType.GT, TokenType.GE),
}

# Spelling of every token type that has a fixed spelling
TOKEN_TEXT: dict[TokenType, str] = {
    **{token_type: text for text, token_type in KEYWORDS.items()},
    **{token_type: text for text, token_type in SINGLE_TOKENS.items()},
    **{token_type: text * 2 for text, token_type in PAIRED_OPERATORS.items()},
    **{alone: text for text, (alone, _) in EQUALS_SUFFIXED.items()},
    **{suffixed: text + "=" for text, (_, suffixed) in EQUALS_SUFFIXED.items()},
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class CToken:
    """
    A single token from minicc source code.

    Position fields do not take part in equality, so tokens can be
    compared by type and value alone:

        >>> CToken(TokenType.NUMBER, 42, line=3) == CToken(TokenType.NUMBER, 42)
        True

    Attributes:
        type: The TokenType classification
        value: int for NUMBER, str for IDENTIFIER, None otherwise
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None = None
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)
    filename: str = field(default="<input>", compare=False)

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def text(self) -> str:
        """The token as it is spelled in source."""
        if self.value is not None:
            return str(self.value)
        return TOKEN_TEXT[self.type]

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class CLexer:
    """
    Tokenizes minicc source code.

    Usage:
        lexer = CLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
        strict: Raise LexerError instead of dropping unrecognised spans
        collector: Receives a warning for every dropped span (optional)
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        strict: bool = False,
        collector: Optional[WarningCollector] = None,
    ):
        self.source = source
        self.filename = filename
        self.strict = strict
        self.collector = collector

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[CToken]:
        """
        Generate tokens from the source code.

        Yields:
            CToken objects in source order (no end-of-file marker)

        Raises:
            LexerError: In strict mode, for a span that yields no token
        """
        while not self._at_end():
            token = self._scan_token()
            if token is not None:
                logger.debug(f"Lexed {token!r}")
                yield token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Look at the current character; empty string past the end."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        start_line: int,
        start_column: int,
    ) -> CToken:
        return CToken(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[CToken]:
        """
        Scan the token starting at the current character.

        Returns:
            The next CToken, or None if the span produced no token
        """
        start_line = self._line
        start_column = self._column
        # Source line is captured before consuming, in case the span ends it
        source_line = self._get_current_line()

        char = self._advance()

        if char in SINGLE_TOKENS:
            return self._make_token(SINGLE_TOKENS[char], None, start_line, start_column)

        if char in string.digits:
            return self._scan_number(char, start_line, start_column, source_line)

        if char.isalpha() or char == "_":
            return self._scan_word(char, start_line, start_column)

        return self._scan_operator(char, start_line, start_column, source_line)

    def _scan_number(
        self, first: str, start_line: int, start_column: int, source_line: str
    ) -> Optional[CToken]:
        """Scan a decimal literal; a value wider than 64 bits yields no token."""
        chars = [first]
        while self._peek() and self._peek() in string.digits:
            chars.append(self._advance())

        text = "".join(chars)
        value = int(text)

        if value > U64_MAX:
            location = SourceLocation(self.filename, start_line, start_column)
            if self.strict:
                raise NumberOverflowError(text, location, source_line)
            self._report_dropped(f"integer literal '{text}' does not fit in 64 bits", location)
            return None

        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _scan_word(self, first: str, start_line: int, start_column: int) -> CToken:
        """Scan an identifier or keyword."""
        chars = [first]
        while self._peek() and (
            self._peek().isalpha() or self._peek() in string.digits or self._peek() == "_"
        ):
            chars.append(self._advance())

        word = "".join(chars)

        if word in KEYWORDS:
            return self._make_token(KEYWORDS[word], None, start_line, start_column)

        return self._make_token(TokenType.IDENTIFIER, word, start_line, start_column)

    def _scan_operator(
        self, char: str, start_line: int, start_column: int, source_line: str
    ) -> Optional[CToken]:
        """Scan a one- or two-character operator."""
        if char in PAIRED_OPERATORS:
            # The second character is consumed whether or not it matches
            second = self._advance()
            if second == char:
                return self._make_token(PAIRED_OPERATORS[char], None, start_line, start_column)
            location = SourceLocation(self.filename, start_line, start_column)
            if self.strict:
                raise InvalidCharacterError(
                    char, location, source_line, hint=f"did you mean '{char}{char}'?"
                )
            self._report_dropped(f"ignored {char + second!r}", location)
            return None

        if char in EQUALS_SUFFIXED:
            alone, suffixed = EQUALS_SUFFIXED[char]
            if self._match("="):
                return self._make_token(suffixed, None, start_line, start_column)
            return self._make_token(alone, None, start_line, start_column)

        if char.isspace():
            return None

        location = SourceLocation(self.filename, start_line, start_column)
        if self.strict:
            raise InvalidCharacterError(char, location, source_line)
        self._report_dropped(f"ignored character {char!r}", location)
        return None

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _report_dropped(self, message: str, location: SourceLocation) -> None:
        """Record a span that produced no token."""
        logger.debug(f"{location}: {message}")
        if self.collector is not None:
            self.collector.add_warning(message, location)

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(
    source: str,
    filename: str = "<input>",
    strict: bool = False,
    collector: Optional[WarningCollector] = None,
) -> list[CToken]:
    """
    Tokenize source text into a list.

    Args:
        source: Program text
        filename: Source filename for diagnostics
        strict: Raise instead of dropping unrecognised spans
        collector: Receives warnings for dropped spans

    Returns:
        The tokens in source order

    Raises:
        LexerError: In strict mode only
    """
    return list(CLexer(source, filename, strict=strict, collector=collector).tokenize())
