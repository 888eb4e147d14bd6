from __future__ import annotations

from typing import Optional, Tuple

from flask import request

from utils.exceptions import BadRequestError

MAX_LIMIT = 100


def parse_pagination(default_limit: int = 10) -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(default_limit)))
    except ValueError:
        raise BadRequestError("page and limit must be integers")
    page = max(page, 1)
    limit = max(1, min(limit, MAX_LIMIT))
    return page, limit


def parse_int_arg(name: str) -> Optional[int]:
    val = request.args.get(name)
    if val in (None, ""):
        return None
    try:
        return int(val)
    except ValueError:
        raise BadRequestError(f"{name} must be an integer")


def parse_bool_arg(name: str) -> Optional[bool]:
    val = request.args.get(name)
    if val in (None, ""):
        return None
    lowered = val.lower()
    if lowered in ("1", "true", "yes"):
        return True
    if lowered in ("0", "false", "no"):
        return False
    raise BadRequestError(f"{name} must be a boolean")


def parse_choice_arg(name: str, allowed) -> Optional[str]:
    val = request.args.get(name)
    if val in (None, ""):
        return None
    if val not in allowed:
        raise BadRequestError(f"{name} must be one of {sorted(allowed)}")
    return val


def page_meta(page: int, limit: int, total: int) -> dict:
    return {"page": page, "limit": limit, "total": total}
