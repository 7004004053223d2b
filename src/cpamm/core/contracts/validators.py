"""
Контракты данных пула: JSON Schema для снапшотов и событий

PoolState.model_dump(mode="json") и события из PoolEngine.events()
отдаются наружу как dict; эти валидаторы проверяют их по схемам,
независимо от pydantic-моделей.

Схемы (package data, cpamm/core/contracts/schema/):
- pool_state.json: резервы, total_shares, комиссия, карта shares
- pool_event.json: LiquidityAdded | LiquidityRemoved | Swap по полю event

Числа в схемах ограничены диапазоном uint256.
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик схем пула с кэшем.

    По умолчанию читает schema/ рядом с модулем; schema_dir позволяет
    подставить другой каталог.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # имя -> схема
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: 'pool_state' или 'pool_event'

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Общий загрузчик: схемы читаются с диска один раз на процесс
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Draft 2020-12 валидатор поверх одной схемы пула."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Проверка dict снапшота или события.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """True, если dict соответствует схеме."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Все нарушения схемы (например, для сообщения со списком полей)."""
        return self.validator.iter_errors(data)


class PoolStateValidator(ContractValidator):
    """Снапшот PoolState."""

    def __init__(self):
        super().__init__("pool_state")


class PoolEventValidator(ContractValidator):
    """Одно событие журнала пула."""

    def __init__(self):
        super().__init__("pool_event")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_pool_state(data: Dict[str, Any]) -> None:
    """
    Проверка снапшота, например PoolEngine.snapshot().model_dump(mode="json").

    Raises:
        ValidationError: Если снапшот не соответствует pool_state.json
    """
    PoolStateValidator().validate(data)


def validate_pool_event(data: Dict[str, Any]) -> None:
    """
    Проверка одного события журнала пула.

    Raises:
        ValidationError: Если событие не соответствует pool_event.json
    """
    PoolEventValidator().validate(data)
