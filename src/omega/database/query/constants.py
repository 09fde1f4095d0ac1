"""Constants for the query builders to avoid magic strings."""

from enum import Enum

ORDER_ASC = 0
ORDER_DESC = 1


class Operator(str, Enum):
    """Comparison operators accepted by ``compare()``.

    Any other string is passed through verbatim.
    """

    EQ = '='
    NE = '!='
    NEQ_ISO = '<>'  # ISO standard not-equal operator
    LT = '<'
    LE = '<='
    GT = '>'
    GE = '>='
    LIKE = 'LIKE'
    NOT_LIKE = 'NOT LIKE'
    IN = 'IN'
    NOT_IN = 'NOT IN'
    IS = 'IS'
    IS_NOT = 'IS NOT'
    REGEXP = 'REGEXP'


class JoinType(str, Enum):
    """Join keywords."""

    INNER = 'INNER JOIN'
    LEFT = 'LEFT JOIN'
    RIGHT = 'RIGHT JOIN'
    FULL = 'FULL OUTER JOIN'
    CROSS = 'CROSS JOIN'


class OrderDirection(str, Enum):
    """Sort directions."""

    ASC = 'ASC'
    DESC = 'DESC'


class Connective(str, Enum):
    """Glue between rendered conditions."""

    AND = ' AND '
    OR = ' OR '

    @classmethod
    def of(cls, strict: bool) -> 'Connective':
        return cls.AND if strict else cls.OR


def token(value: str | Enum) -> str:
    """Return the SQL text of an enum member or a raw string."""
    return value.value if isinstance(value, Enum) else value
