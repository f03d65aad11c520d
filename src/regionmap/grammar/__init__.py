"""Tokenizer and generic tree parser for the brace-delimited map data format."""

from regionmap.grammar.tokenizer import Token, TokenKind, strip_comments, tokenize
from regionmap.grammar.tree import Block, Entry, Scalar, parse_document

__all__ = [
    "Block",
    "Entry",
    "Scalar",
    "Token",
    "TokenKind",
    "parse_document",
    "strip_comments",
    "tokenize",
]
