"""
Token tables shared by the Esta lexer, parser and printer.

Exports:
    - keywords: reserved words mapped to their token types
    - token_hashmap: punctuation and operator spellings mapped to token types
    - I32_MIN, I32_MAX: bounds for numeric literals
"""

keywords: dict[str, str] = {
    "var": "VAR",
    "while": "WHILE",
    "if": "IF",
    "else": "ELSE",
    "for": "FOR",
    "fun": "FUN",
    "return": "RETURN",
    "break": "BREAK",
    "continue": "CONTINUE",
    "and": "AND",
    "or": "OR",
    "not": "NOT",
    "Nil": "NIL",
    "True": "BOOLEAN",
    "False": "BOOLEAN",
}

token_hashmap: dict[str, str] = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ";": "SEMI",
    ",": "COMMA",
    "=": "ASSIGN",
    "==": "EQ",
    "!=": "NE",
    "<": "LT",
    ">": "GT",
    "<=": "LE",
    ">=": "GE",
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
}

# Longest spelling in token_hashmap; bounds the operator lookahead.
MAX_OPERATOR_LENGTH = max(len(k) for k in token_hashmap)

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

__all__ = [
    "I32_MAX",
    "I32_MIN",
    "MAX_OPERATOR_LENGTH",
    "keywords",
    "token_hashmap",
]
