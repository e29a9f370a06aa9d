# rateorant/models/base.py
import logging
from typing import Any, Iterable, List, Type, TypeVar, Union
from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

# Backend ids arrive as numbers or strings depending on the endpoint
EntityId = Union[int, str]

SchemaT = TypeVar("SchemaT", bound="BaseSchema")


class BaseSchema(BaseModel):
    """Base schema for backend payloads"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def id_key(value: Any) -> str:
    """String form used for every id comparison and keyed map"""
    return "" if value is None else str(value)


def parse_items(model: Type[SchemaT], items: Iterable[Any]) -> List[SchemaT]:
    """Validate list items, skipping the ones that do not fit the model"""
    parsed = []
    for item in items:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__}: {e.errors()[:1]}")
    return parsed
