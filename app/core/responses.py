"""
Uniform response envelope: {"data", "errcode", "errmsg"}.

Controller operations return their payload or raise an ``ApiError``;
``envelope`` converts both outcomes so nothing escapes to the transport layer.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from pydantic import BaseModel

from app.core.exceptions import ApiError

logger = logging.getLogger(__name__)

SUCCESS_CODE = 0
SUCCESS_MESSAGE = "success"


class Envelope(BaseModel):
    data: Any = None
    errcode: int = SUCCESS_CODE
    errmsg: str = SUCCESS_MESSAGE


def res_return(data: Any = None, errcode: int = SUCCESS_CODE, errmsg: str = SUCCESS_MESSAGE) -> Dict[str, Any]:
    return {"data": data, "errcode": errcode, "errmsg": errmsg}


def field_select(data: Optional[Dict[str, Any]], fields: Iterable[str]) -> Optional[Dict[str, Any]]:
    """Project a dict onto the given keys, dropping keys that are absent"""
    if not data:
        return data
    return {field: data[field] for field in fields if field in data}


def envelope(func: Callable) -> Callable:
    """Wrap an async controller method so it always returns an envelope dict"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            result = await func(*args, **kwargs)
        except ApiError as e:
            logger.warning(f"{func.__name__} failed [{e.errcode}]: {e.errmsg}")
            return res_return(None, e.errcode, e.errmsg)
        return res_return(result)

    return wrapper
