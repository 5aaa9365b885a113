from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request

from ..core.exceptions import ConflictError, DomainError, InvalidStateError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def status_for(error: DomainError) -> int:
    # NotFoundError subclasses InvalidStateError, so it is checked first.
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, (ConflictError, InvalidStateError)):
        return 409
    return 400


def json_endpoint(view):
    """Turn domain errors into {"success": false, "message": ...} responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), status_for(e)

    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def query_date(name: str) -> Optional[date]:
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")
