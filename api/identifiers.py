"""
Внешние идентификаторы пользователей.

Снаружи пользователь выглядит как `u<N>`, внутри первичный ключ - целое `N`.
Все преобразования проходят через этот модуль.
"""
import re

from .exceptions import InvalidIdentifier

USER_ID_PREFIX = 'u'
_USER_ID_RE = re.compile(r'^u([0-9]+)$')

# Ключ хранится в колонке INTEGER (int32 в PostgreSQL)
MIN_USER_KEY = 1
MAX_USER_KEY = 2 ** 31 - 1


def parse_user_id(value) -> int:
    if not isinstance(value, str):
        raise InvalidIdentifier(f'user_id must be a string like "u1", got {value!r}')
    match = _USER_ID_RE.match(value.strip())
    if match is None:
        raise InvalidIdentifier(f'invalid user_id format: {value!r}')
    key = int(match.group(1))
    if not MIN_USER_KEY <= key <= MAX_USER_KEY:
        raise InvalidIdentifier(f'user_id out of range: {value!r}')
    return key


def format_user_id(key: int) -> str:
    return f'{USER_ID_PREFIX}{key}'
