#!/usr/bin/env python3
"""
Arithmetic evaluator for the calc command.

A small recursive-descent parser over numeric literals, + - * /, unary
signs and parentheses. Nothing is ever handed to the host interpreter.

Grammar:
    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/') unary)*
    unary  := ('+' | '-') unary | atom
    atom   := NUMBER | '(' expr ')'
"""

import re
from typing import List, Protocol, Tuple, Union

from .errors import EvaluationError

Number = Union[int, float]

TOKEN_PATTERN = re.compile(r'\s*(?:(\d+\.\d*|\.\d+|\d+)|(.))')


def tokenize(text: str) -> List[Tuple[str, str]]:
    """Convert an expression into (kind, value) tokens."""
    tokens = []
    position = 0
    text = text.rstrip()

    while position < len(text):
        match = TOKEN_PATTERN.match(text, position)
        number, symbol = match.groups()
        if number is not None:
            tokens.append(('number', number))
        elif symbol in '+-*/()':
            tokens.append(('op', symbol))
        else:
            raise EvaluationError(f"unexpected character '{symbol}'")
        position = match.end()

    return tokens


class _Parser:
    """Evaluates a token list while parsing it."""

    def __init__(self, tokens: List[Tuple[str, str]]):
        self.tokens = tokens
        self.index = 0

    def peek(self) -> str:
        if self.index < len(self.tokens):
            return self.tokens[self.index][1]
        return ''

    def take(self) -> Tuple[str, str]:
        if self.index >= len(self.tokens):
            raise EvaluationError("unexpected end of expression")
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse(self) -> Number:
        if not self.tokens:
            raise EvaluationError("empty expression")
        value = self.expr()
        if self.index < len(self.tokens):
            raise EvaluationError(f"unexpected '{self.peek()}'")
        return value

    def expr(self) -> Number:
        value = self.term()
        while self.peek() in ('+', '-'):
            op = self.take()[1]
            right = self.term()
            value = value + right if op == '+' else value - right
        return value

    def term(self) -> Number:
        value = self.unary()
        while self.peek() in ('*', '/'):
            op = self.take()[1]
            right = self.unary()
            if op == '*':
                value = value * right
            elif right == 0:
                raise EvaluationError("division by zero")
            else:
                value = value / right
        return value

    def unary(self) -> Number:
        if self.peek() in ('+', '-'):
            op = self.take()[1]
            value = self.unary()
            return -value if op == '-' else value
        return self.atom()

    def atom(self) -> Number:
        kind, value = self.take()
        if kind == 'number':
            return float(value) if '.' in value else int(value)
        if value == '(':
            result = self.expr()
            if self.peek() != ')':
                raise EvaluationError("missing closing parenthesis")
            self.take()
            return result
        raise EvaluationError(f"unexpected '{value}'")


class ExpressionEvaluator(Protocol):
    """Anything the calc command can hand an expression to."""

    def evaluate(self, text: str) -> Number: ...


class Calculator:
    """Default ExpressionEvaluator: arithmetic only."""

    def evaluate(self, text: str) -> Number:
        """Evaluate an arithmetic expression, raising EvaluationError on bad input."""
        return _Parser(tokenize(text)).parse()


def format_number(value: Number) -> str:
    """Render a result the way a calculator display would (4.0 -> '4')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
