"""Extraction of import expressions from Jsonnet source."""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from graph.model import ImportKind, ImportSpecifier
from .errors import FileReadError, ParseError
from .filesystem import FileSystem

logger = logging.getLogger(__name__)

IMPORT_KEYWORDS = {kind.value for kind in ImportKind}

_CLOSING = {"}": "{", "]": "[", ")": "("}

_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Token kinds produced by _Tokenizer
IDENT = "ident"
STRING = "string"
TEXT_BLOCK = "block"
PUNCT = "punct"

Token = Tuple[str, Optional[str], int]


class _Tokenizer:
    """
    A lexical scanner for Jsonnet.

    It only understands as much of the language as is needed to find import
    expressions reliably: comments, every string literal form, identifiers
    and brackets. Everything else is skipped.
    """

    def __init__(self, source: str, path: Optional[Path] = None):
        self.source = source
        self.path = path
        self.pos = 0
        self.line = 1

    def error(self, message: str, line: Optional[int] = None) -> ParseError:
        return ParseError(message, self.path, line or self.line)

    def tokens(self) -> Iterator[Token]:
        source = self.source
        size = len(source)
        brackets: List[Tuple[str, int]] = []

        while self.pos < size:
            char = source[self.pos]
            line = self.line

            if char == "\n":
                self.line += 1
                self.pos += 1
            elif char in " \t\r":
                self.pos += 1
            elif char == "#" or source.startswith("//", self.pos):
                end = source.find("\n", self.pos)
                self.pos = size if end == -1 else end
            elif source.startswith("/*", self.pos):
                self._skip_block_comment()
            elif char in "\"'":
                yield STRING, self._read_quoted(char), line
            elif char == "@" and source[self.pos + 1:self.pos + 2] in ("\"", "'"):
                yield STRING, self._read_verbatim(), line
            elif source.startswith("|||", self.pos):
                self._skip_text_block()
                yield TEXT_BLOCK, None, line
            elif char.isalpha() or char == "_":
                start = self.pos
                while self.pos < size and (source[self.pos].isalnum() or source[self.pos] == "_"):
                    self.pos += 1
                yield IDENT, source[start:self.pos], line
            elif char in "{[(":
                brackets.append((char, line))
                self.pos += 1
                yield PUNCT, char, line
            elif char in _CLOSING:
                if not brackets:
                    raise self.error(f"unexpected '{char}'")
                opener, opened_at = brackets.pop()
                if opener != _CLOSING[char]:
                    raise self.error(f"'{char}' does not close '{opener}' opened on line {opened_at}")
                self.pos += 1
                yield PUNCT, char, line
            else:
                self.pos += 1
                yield PUNCT, char, line

        if brackets:
            opener, opened_at = brackets[-1]
            raise self.error(f"unclosed '{opener}'", opened_at)

    def _skip_block_comment(self) -> None:
        end = self.source.find("*/", self.pos + 2)
        if end == -1:
            raise self.error("unterminated comment")
        self.line += self.source.count("\n", self.pos, end)
        self.pos = end + 2

    def _read_quoted(self, quote: str) -> str:
        source = self.source
        start_line = self.line
        pos = self.pos + 1
        chars: List[str] = []

        while pos < len(source):
            char = source[pos]
            if char == quote:
                self.pos = pos + 1
                return "".join(chars)
            if char == "\\":
                escape = source[pos + 1:pos + 2]
                if escape == "u":
                    digits = source[pos + 2:pos + 6]
                    if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                        raise self.error("invalid \\u escape in string literal")
                    chars.append(chr(int(digits, 16)))
                    pos += 6
                    continue
                if escape not in _ESCAPES:
                    raise self.error(f"unknown escape sequence in string literal: \\{escape}")
                chars.append(_ESCAPES[escape])
                pos += 2
                continue
            if char == "\n":
                self.line += 1
            chars.append(char)
            pos += 1

        raise self.error("unterminated string", start_line)

    def _read_verbatim(self) -> str:
        source = self.source
        start_line = self.line
        quote = source[self.pos + 1]
        pos = self.pos + 2
        chars: List[str] = []

        while pos < len(source):
            char = source[pos]
            if char == quote:
                # a doubled quote stands for the quote itself
                if source[pos + 1:pos + 2] == quote:
                    chars.append(quote)
                    pos += 2
                    continue
                self.pos = pos + 1
                return "".join(chars)
            if char == "\n":
                self.line += 1
            chars.append(char)
            pos += 1

        raise self.error("unterminated verbatim string", start_line)

    def _skip_text_block(self) -> None:
        source = self.source
        start_line = self.line
        pos = self.pos + 3
        if source.startswith("-", pos):
            pos += 1

        end = source.find("\n", pos)
        if end == -1 or source[pos:end].strip():
            raise self.error("text block syntax requires new line after |||")
        pos = end + 1
        self.line += 1

        indent = None
        while pos < len(source):
            end = source.find("\n", pos)
            if end == -1:
                end = len(source)
            text = source[pos:end].rstrip("\r")
            stripped = text.lstrip(" \t")
            lead = text[:len(text) - len(stripped)]

            if indent is None:
                if stripped:
                    if not lead:
                        raise self.error("text block's first line must start with whitespace")
                    indent = lead
            elif stripped and not text.startswith(indent):
                if stripped.startswith("|||"):
                    self.pos = pos + len(lead) + 3
                    return
                raise self.error("text block not terminated with |||")

            pos = end + 1
            self.line += 1

        raise self.error("unterminated text block", start_line)


def extract_imports(
    source: str,
    path: Optional[Path] = None,
    allow_binary: bool = False,
) -> List[ImportSpecifier]:
    """
    Find the import expressions in a piece of Jsonnet source.

    Args:
        source: The Jsonnet source text.
        path: Path of the file the source came from. Its directory becomes
              the origin directory of every specifier.
        allow_binary: If False, an ``importbin`` expression is a parse error.

    Returns:
        Import specifiers in the order they appear.

    Raises:
        ParseError: If the source is malformed, an import is not followed by
                    a string literal, or a binary import is not allowed.
    """
    origin_dir = path.parent if path is not None else Path(".")
    tokenizer = _Tokenizer(source, path)
    specifiers: List[ImportSpecifier] = []
    pending: Optional[Tuple[str, int]] = None
    seen_token = False

    for token_kind, value, line in tokenizer.tokens():
        seen_token = True

        if pending is not None:
            keyword, keyword_line = pending
            pending = None
            if token_kind != STRING:
                raise ParseError(
                    f"computed imports are not allowed ({keyword} must be followed by a string literal)",
                    path,
                    keyword_line,
                )
            kind = ImportKind.from_keyword(keyword)
            if kind is ImportKind.BINARY and not allow_binary:
                raise ParseError(f"importbin '{value}' is not supported", path, keyword_line)
            if not value:
                raise ParseError(f"{keyword} path must not be empty", path, keyword_line)
            specifiers.append(ImportSpecifier(kind, value, origin_dir, keyword_line))
            continue

        if token_kind == IDENT and value in IMPORT_KEYWORDS:
            pending = (value, line)

    if pending is not None:
        raise ParseError(f"unexpected end of file after {pending[0]}", path, pending[1])
    if not seen_token:
        raise ParseError("unexpected end of file", path, tokenizer.line)

    return specifiers


def extract_file_imports(
    path: Path,
    fs: Optional[FileSystem] = None,
    allow_binary: bool = False,
) -> List[ImportSpecifier]:
    """
    Read a Jsonnet file and return its import specifiers.

    Args:
        path: Canonical path of the file.
        fs: File-system access; a plain FileSystem if not given.
        allow_binary: Passed on to extract_imports.

    Raises:
        FileReadError: If the file cannot be read or is not valid UTF-8.
        ParseError: If the file is not valid Jsonnet.
    """
    fs = fs or FileSystem()
    try:
        source = fs.read_text(path)
    except (OSError, ValueError) as e:
        raise FileReadError(path, e) from e

    specifiers = extract_imports(source, path, allow_binary=allow_binary)
    logger.debug("Extracted %d imports from %s", len(specifiers), path)
    return specifiers
