"""
Парсер селекторных выражений с рекурсивным спуском.

Грамматика:
expression     → or_expression
or_expression  → and_expression ("or" and_expression)*
and_expression → not_expression ("and" not_expression)*
not_expression → "not" not_expression | primary
primary        → "(" expression ")" | selector_list

selector_list  → complex ("," complex)*
complex        → [">"] compound (combinator compound)*
combinator     → WS | ">" | "+" | "~"
compound       → [IDENT | "*"] (KEY | HASH | ATTR | PSEUDO)*
"""

from __future__ import annotations

import re
from typing import List, Optional

from .lexer import SelectorLexer, Token
from .model import (
    BinaryExpression,
    Complex,
    ComplexPart,
    Compound,
    Expression,
    ExpressionType,
    GroupExpression,
    NotExpression,
    Pseudo,
    SelectorList,
)


class SelectorSyntaxError(ValueError):
    """Синтаксическая ошибка в селекторном выражении."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Selector syntax error at position {position}: {message}")


_COMPOUND_START = {'STAR', 'IDENT', 'KEY', 'HASH', 'ATTR', 'PSEUDO'}
_COMPOUND_TAIL = {'KEY', 'HASH', 'ATTR', 'PSEUDO'}
_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


def unquote(value: str) -> str:
    """Снимает кавычки и экранирование со строкового литерала (если он в кавычках)."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return _ESCAPE_RE.sub(r'\1', value[1:-1])
    return value


class SelectorParser:
    """
    Парсер селекторных выражений.

    Преобразует список токенов в AST. Пробелы значимы только
    между составными селекторами (комбинатор потомка).
    """

    def __init__(self):
        self.lexer = SelectorLexer()
        self._text = ""
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, text: str) -> Expression:
        """
        Парсит строку селектора в AST.

        Raises:
            SelectorSyntaxError: При синтаксической или лексической ошибке
        """
        self._text = text
        try:
            self._tokens = self.lexer.tokenize(text)
        except ValueError as e:
            raise SelectorSyntaxError(str(e), 0) from e
        self._position = 0

        self._skip_ws()
        if self._is_at_end():
            raise SelectorSyntaxError("Empty selector", 0)

        result = self._parse_expression()

        self._skip_ws()
        if not self._is_at_end():
            current = self._current_token()
            raise SelectorSyntaxError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_expression(self) -> Expression:
        return self._parse_or_expression()

    def _parse_or_expression(self) -> Expression:
        left = self._parse_and_expression()

        while self._match_keyword("or"):
            right = self._parse_and_expression()
            left = BinaryExpression(left=left, right=right, operator=ExpressionType.OR)

        return left

    def _parse_and_expression(self) -> Expression:
        left = self._parse_not_expression()

        while self._match_keyword("and"):
            right = self._parse_not_expression()
            left = BinaryExpression(left=left, right=right, operator=ExpressionType.AND)

        return left

    def _parse_not_expression(self) -> Expression:
        if self._match_keyword("not"):
            return NotExpression(expression=self._parse_not_expression())

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        self._skip_ws()
        current = self._current_token()

        if current.type == 'LPAREN':
            self._advance()
            expr = self._parse_expression()
            self._skip_ws()
            if self._current_token().type != 'RPAREN':
                raise SelectorSyntaxError("Expected ')' after grouped expression", self._current_position())
            self._advance()
            return GroupExpression(expression=expr)

        if current.type in _COMPOUND_START or current.type == 'GT':
            return self._parse_selector_list()

        if current.type == 'EOF':
            raise SelectorSyntaxError("Unexpected end of selector", current.position)
        raise SelectorSyntaxError(f"Unexpected token '{current.value}'", current.position)

    def _parse_selector_list(self) -> SelectorList:
        selectors = [self._parse_complex()]

        while True:
            saved = self._position
            self._skip_ws()
            if self._current_token().type != 'COMMA':
                self._position = saved
                break
            self._advance()
            self._skip_ws()
            selectors.append(self._parse_complex())

        return SelectorList(selectors=selectors)

    def _parse_complex(self) -> Complex:
        relative = False
        if self._current_token().type == 'GT':
            self._advance()
            self._skip_ws()
            relative = True

        parts: List[ComplexPart] = [(None, self._parse_compound())]

        while True:
            saved = self._position
            saw_ws = self._skip_ws()
            current = self._current_token()

            if current.type in ('GT', 'SIBLING'):
                self._advance()
                self._skip_ws()
                parts.append((current.value, self._parse_compound()))
                continue

            if saw_ws and current.type in _COMPOUND_START:
                parts.append((" ", self._parse_compound()))
                continue

            self._position = saved
            break

        return Complex(parts=parts, relative=relative)

    def _parse_compound(self) -> Compound:
        first = self._current_token()
        if first.type not in _COMPOUND_START:
            if first.type == 'EOF':
                raise SelectorSyntaxError("Expected selector at end of input", first.position)
            raise SelectorSyntaxError(f"Expected selector, got '{first.value}'", first.position)

        compound = Compound(source="")
        last: Optional[Token] = None

        if first.type in ('STAR', 'IDENT'):
            compound.type_name = first.value
            last = self._advance()

        while self._current_token().type in _COMPOUND_TAIL:
            token = self._advance()
            if token.type == 'KEY':
                compound.keys.append(unquote(token.value[1:]))
            elif token.type == 'HASH':
                compound.ids.append(token.value[1:])
            elif token.type == 'ATTR':
                compound.attributes.append(token.value[1:-1])
            else:
                compound.pseudos.append(self._make_pseudo(token))
            last = token

        compound.source = self._text[first.position:last.end]
        return compound

    @staticmethod
    def _make_pseudo(token: Token) -> Pseudo:
        body = token.value[1:]
        if "(" not in body:
            return Pseudo(name=body.lower())
        name, _, rest = body.partition("(")
        return Pseudo(name=name.lower(), argument=rest[:-1].strip())

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            return Token(type='EOF', value='', position=len(self._text))
        return self._tokens[self._position]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token

    def _skip_ws(self) -> bool:
        """Пропускает пробелы; True, если что-то было пропущено."""
        skipped = False
        while self._current_token().type == 'WS':
            self._advance()
            skipped = True
        return skipped

    def _match_keyword(self, keyword: str) -> bool:
        """Проверяет и потребляет ключевое слово (с окружающими пробелами)."""
        saved = self._position
        self._skip_ws()
        current = self._current_token()
        if current.type == 'KEYWORD' and current.value == keyword:
            self._advance()
            self._skip_ws()
            return True
        self._position = saved
        return False
