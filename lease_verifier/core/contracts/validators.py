"""
Snapshot Contracts — проверка документов драйвера по JSON Schema

Драйвер (RPC-клиент, вне пакета) декодирует ответы контрактов в dict и
передаёт их ядру. Перед переводом в доменные модели документ проверяется
по схеме из lease_verifier/core/contracts/schema/ (Draft 2020-12):

- lease_status — статус позиции, ровно один ключ состояния
- lpp_balance — баланс пула ликвидности

Нарушение контракта — jsonschema.ValidationError с наиболее релевантной
ошибкой (best_match), а не первой попавшейся.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from jsonschema import Draft202012Validator, SchemaError, ValidationError
from jsonschema.exceptions import best_match

SCHEMA_DIR = Path(__file__).parent / "schema"

LEASE_STATUS_SCHEMA = "lease_status"
LPP_BALANCE_SCHEMA = "lpp_balance"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и meta-validation схем контрактов.

    Каждая схема читается с диска один раз на экземпляр загрузчика.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Contract schema directory missing: {self.schema_dir}")

        self._cache: Dict[str, Dict[str, Any]] = {}

    def available(self) -> List[str]:
        """Имена схем в каталоге (без .json)."""
        return sorted(path.stem for path in self.schema_dir.glob("*.json"))

    def load_schema(self, name: str) -> Dict[str, Any]:
        """
        Схема контракта по имени.

        Raises:
            FileNotFoundError: Нет файла <name>.json
            ValueError: Файл не является корректной Draft 2020-12 схемой
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Contract schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        self._cache[name] = schema
        return schema


_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка документов против одной схемы контракта."""

    schema_name: str = ""

    def __init__(self, schema_name: Optional[str] = None, loader: Optional[SchemaLoader] = None):
        name = schema_name or self.schema_name
        if not name:
            raise ValueError("Contract schema name is required")

        self.schema_name = name
        self.schema = (loader or _LOADER).load_schema(name)
        self._validator = Draft202012Validator(self.schema)

    def iter_errors(self, document: Dict[str, Any]) -> Iterator[ValidationError]:
        """Все нарушения контракта (ленивый итератор)."""
        return self._validator.iter_errors(document)

    def is_valid(self, document: Dict[str, Any]) -> bool:
        return self._validator.is_valid(document)

    def validate(self, document: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Наиболее релевантное нарушение контракта
        """
        error = best_match(self.iter_errors(document))
        if error is not None:
            raise error

    def error_messages(self, document: Dict[str, Any]) -> List[str]:
        """Нарушения в виде "<путь>: <сообщение>" (для логов драйвера)."""
        return [
            f"{error.json_path}: {error.message}"
            for error in sorted(self.iter_errors(document), key=lambda e: e.json_path)
        ]


class LeaseStatusValidator(ContractValidator):
    schema_name = LEASE_STATUS_SCHEMA


class LppBalanceValidator(ContractValidator):
    schema_name = LPP_BALANCE_SCHEMA


_LEASE_STATUS = LeaseStatusValidator()
_LPP_BALANCE = LppBalanceValidator()


def validate_lease_status(document: Dict[str, Any]) -> None:
    """Проверка статуса позиции (ValidationError при нарушении)."""
    _LEASE_STATUS.validate(document)


def validate_lpp_balance(document: Dict[str, Any]) -> None:
    """Проверка баланса пула (ValidationError при нарушении)."""
    _LPP_BALANCE.validate(document)
