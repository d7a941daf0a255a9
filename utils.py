import logging
import sys
from typing import Iterable, List, Optional, Type, TypeVar
from pydantic import BaseModel

from config import settings

T = TypeVar("T", bound=BaseModel)

def setup_logging(level: Optional[str] = None) -> None:
    level = level or settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

def dict_to_model(model_cls: Type[T], data: dict) -> T:
    valid_keys = set(model_cls.model_fields.keys())
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    return model_cls(**filtered)

def dicts_to_models(model_cls: Type[T], items: Iterable[dict]) -> List[T]:
    return [dict_to_model(model_cls, item) for item in items]
