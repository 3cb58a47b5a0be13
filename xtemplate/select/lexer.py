"""
Лексер для разбора селекторных выражений.

Выполняет токенизацию строки селектора, разбивая её на значимые элементы:
- Ключи данных (.name, ."quoted name")
- Типы/теги, универсальный селектор, #id, [атрибуты]
- Псевдоклассы (:root, :nth-child(2), :contains('x'))
- Комбинаторы (>, +, ~ и пробел)
- Логические ключевые слова (and, or, not) и скобки группировки
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List


@dataclass
class Token:
    """
    Токен селекторного выражения.

    Attributes:
        type: Тип токена (KEY, IDENT, KEYWORD, PSEUDO, WS, EOF, ...)
        value: Значение токена
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    @property
    def end(self) -> int:
        return self.position + len(self.value)

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


_QUOTED = r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\''


class SelectorLexer:
    """
    Лексер для разбиения селекторного выражения на токены.

    Пробелы не игнорируются: между составными селекторами они
    являются комбинатором потомка.
    """

    # Спецификация токенов: (regex_pattern, token_type)
    TOKEN_SPECS = [
        (r'\s+', 'WS'),

        # Группировка и перечисление
        (r'\(', 'LPAREN'),
        (r'\)', 'RPAREN'),
        (r',', 'COMMA'),

        # Комбинаторы
        (r'>', 'GT'),
        (r'[+~]', 'SIBLING'),

        (r'\*', 'STAR'),

        # Ключ данных: .name или ."name with spaces"
        (r'\.(?:' + _QUOTED + r'|[\w$-]+)', 'KEY'),
        (r'#[\w-]+', 'HASH'),
        (r'\[(?:' + _QUOTED + r'|[^\]"\'])*\]', 'ATTR'),

        # Псевдокласс с необязательным аргументом (допускается один уровень вложенных скобок)
        (r':[\w-]+(?:\((?:' + _QUOTED + r'|[^()"\']|\((?:' + _QUOTED + r'|[^()"\'])*\))*\))?', 'PSEUDO'),

        # Имена типов/тегов; ключевые слова определяются после захвата
        (r'[\w-]+', 'IDENT'),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN'),
    ]

    KEYWORDS = {'and', 'or', 'not'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type)
            for pattern, token_type in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка селектора

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ValueError: При обнаружении неизвестного символа
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue
                value = match.group(0)

                if token_type == 'UNKNOWN':
                    raise ValueError(f"Unexpected character '{value}' at position {position}")

                final_type = token_type
                if token_type == 'IDENT' and value in self.KEYWORDS:
                    final_type = 'KEYWORD'

                tokens.append(Token(type=final_type, value=value, position=position))
                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens
