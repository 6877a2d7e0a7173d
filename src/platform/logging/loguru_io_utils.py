from inspect import getfile, getsourcelines
from os.path import basename
from re import IGNORECASE, compile
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


_SENSITIVE_PATTERN = compile(
    rf"(\b(?:{'|'.join(SENSITIVE_KEYWORDS)})\b)(\s*[=:]\s*)'[^']*'", IGNORECASE
)
_MAX_CONTENT_LENGTH = 1000


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    try:
        lineno = getsourcelines(func)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(getattr(func, "__func__", func)))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if layer <= 0:
        call_depth_var.set(0)
        chain_start_time_var.set(0)


def mask_sensitive(data: Any) -> Any:
    data_str = str(data)
    masked = _SENSITIVE_PATTERN.sub(r"\1\2'********'", data_str)
    return data if masked == data_str else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return '********' if str(keyword).lower() in SENSITIVE_KEYWORDS else value


def truncate_content(data: Any) -> Any:
    data_str = str(data)
    if len(data_str) <= _MAX_CONTENT_LENGTH:
        return data
    return f'{data_str[:_MAX_CONTENT_LENGTH]}...<truncated {len(data_str)} chars>'
