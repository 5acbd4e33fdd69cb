"""
Fixed-Point — целочисленная арифметика денежных сумм

Модуль обеспечивает единое правило округления для всех калькуляторов:
- Умножение-затем-деление через mul_div (⌊a·b/c⌋)
- Усечение всегда к нулю, никакого округления вверх
- Валидация сумм (Amount) и ставок (Rate, permille)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все суммы — Python int (произвольная точность), float запрещён
2. Суммы никогда не отрицательны; вычитание в минус — InvalidInput
3. Деление на ноль никогда не происходит (InvalidInput)
4. Все операции детерминированы и воспроизводимы

Правило усечения выведено из поведения on-chain контрактов. Если удалённая
система округляет иначе, это расхождение, а не повод менять модель.
"""

from typing import Final

from lease_verifier.core.errors import InvalidInput

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Знаменатель permille (parts per thousand)
PERMILLE: Final[int] = 1000

# Знаменатель процентов
PERCENT: Final[int] = 100


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def _is_int(value: object) -> bool:
    # bool является подклассом int, но суммой не является
    return isinstance(value, int) and not isinstance(value, bool)


def validate_amount(value: int, name: str = "amount") -> int:
    """
    Валидация суммы (Amount): целое неотрицательное число.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value без изменений

    Raises:
        InvalidInput: Если value не int или value < 0
    """
    if not _is_int(value):
        raise InvalidInput(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")

    return value


def validate_permille(value: int, name: str = "rate", upper: int = PERMILLE) -> int:
    """
    Валидация permille-величины в диапазоне [0, upper].

    Raises:
        InvalidInput: Если value вне диапазона
    """
    validate_amount(value, name)

    if value > upper:
        raise InvalidInput(f"{name} must be <= {upper} permille, got {value}")

    return value


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def mul_div(a: int, b: int, c: int) -> int:
    """
    Умножение-затем-деление с усечением: ⌊a·b/c⌋.

    Промежуточное произведение считается в произвольной точности, поэтому
    переполнения до деления не бывает. Все калькуляторы пакета обязаны
    использовать эту функцию для согласованного округления.

    Args:
        a: Сумма (Amount)
        b: Множитель (Rate или сумма)
        c: Делитель (> 0)

    Returns:
        ⌊a·b/c⌋

    Raises:
        InvalidInput: Если c == 0 или аргументы отрицательны / не int

    Examples:
        >>> mul_div(10000, 450, 550)
        8181
        >>> mul_div(7, 1, 2)
        3
    """
    validate_amount(a, "a")
    validate_amount(b, "b")
    validate_amount(c, "c")

    if c == 0:
        raise InvalidInput(f"Division by zero: mul_div({a}, {b}, 0)")

    return (a * b) // c


def checked_sub(minuend: int, subtrahend: int, name: str = "amount") -> int:
    """
    Вычитание сумм с запретом отрицательного результата.

    Raises:
        InvalidInput: Если subtrahend > minuend
    """
    validate_amount(minuend, name)
    validate_amount(subtrahend, name)

    if subtrahend > minuend:
        raise InvalidInput(
            f"{name} would go negative: {minuend} - {subtrahend}"
        )

    return minuend - subtrahend


def ceil_div(a: int, c: int) -> int:
    """
    Деление с округлением вверх: ⌈a/c⌉.

    Используется только там, где протокол гарантирует "не меньше чем"
    (сумма ликвидации).
    """
    validate_amount(a, "a")
    validate_amount(c, "c")

    if c == 0:
        raise InvalidInput(f"Division by zero: ceil_div({a}, 0)")

    return -((-a) // c)
