from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, url_for

from ..common.datetime_utils import format_duration, timedelta_to_millis
from ..core.constants import DEFAULT_SORT_FIELD
from ..core.enums import SortDirection
from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..container import Container
from .model import PageRequest, SortSpec, StampRecord

logger = logging.getLogger(__name__)

# JSON name -> model field
_SORT_FIELDS = {
    "id": "id",
    "checkInMillis": "check_in_millis",
    "checkOutMillis": "check_out_millis",
}


def record_to_json(r: StampRecord) -> dict:
    return {
        "id": r.id,
        "userId": r.user_id,
        "checkInMillis": r.check_in_millis,
        "checkOutMillis": r.check_out_millis,
    }


def _optional_int(payload: dict, key: str) -> Optional[int]:
    value: Any = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def record_from_json(payload: Any) -> StampRecord:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return StampRecord(
        id=None,
        user_id=_optional_int(payload, "userId"),
        check_in_millis=_optional_int(payload, "checkInMillis"),
        check_out_millis=_optional_int(payload, "checkOutMillis"),
    )


def _int_arg(name: str, default: Optional[int] = None) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        if default is None:
            raise ValidationError(f"{name} is required")
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def parse_sort(raw: Optional[str]) -> SortSpec:
    """Parse ``field[,asc|desc]``; no value means newest check-in first."""
    if not raw:
        return SortSpec(field=DEFAULT_SORT_FIELD, direction=SortDirection.DESC)

    parts = [p.strip() for p in raw.split(",")]
    field = _SORT_FIELDS.get(parts[0])
    if field is None:
        raise ValidationError(f"Unsupported sort field: {parts[0]}")

    direction = SortDirection.ASC
    if len(parts) > 1 and parts[1]:
        try:
            direction = SortDirection(parts[1].lower())
        except ValueError:
            raise ValidationError(f"Unsupported sort direction: {parts[1]}") from None
    return SortSpec(field=field, direction=direction)


def register(app: Flask, container: Container) -> None:
    service = container.stamp_record_service

    def handle_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except NotFoundError:
                return "", 404
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except StoreError:
                logger.exception("Record store failure in %s", request.path)
                return jsonify({"error": "store unavailable"}), 503

        return wrapper

    @app.route("/stamp-records/all/<int:user_id>", methods=["GET"], endpoint="stamp_records_by_user")
    @handle_errors
    def list_by_user(user_id: int):
        page = _int_arg("page", 0)
        size = _int_arg("size", container.default_page_size)
        if page < 0:
            raise ValidationError("page must be >= 0")
        if size < 1 or size > container.max_page_size:
            raise ValidationError(f"size must be between 1 and {container.max_page_size}")

        page_request = PageRequest(page=page, size=size, sort=parse_sort(request.args.get("sort")))
        result = service.list_for_user(user_id, page_request)
        return jsonify([record_to_json(r) for r in result.items]), 200

    @app.route("/stamp-records/<int:record_id>", methods=["GET"], endpoint="stamp_record_get")
    @handle_errors
    def get_record(record_id: int):
        return jsonify(record_to_json(service.get(record_id))), 200

    @app.route("/stamp-records", methods=["POST"], endpoint="stamp_record_create")
    @handle_errors
    def create_record():
        saved = service.create(record_from_json(request.get_json(silent=True)))
        location = url_for("stamp_record_get", record_id=saved.id)
        return "", 201, {"Location": location}

    @app.route("/stamp-records/<int:record_id>", methods=["PUT"], endpoint="stamp_record_update")
    @handle_errors
    def update_record(record_id: int):
        service.update(record_id, record_from_json(request.get_json(silent=True)))
        return "", 204

    @app.route("/stamp-records/<int:record_id>", methods=["DELETE"], endpoint="stamp_record_delete")
    @handle_errors
    def delete_record(record_id: int):
        service.delete(record_id)
        return "", 204

    @app.route("/stamp-records/status/<int:user_id>", methods=["GET"], endpoint="stamp_records_status")
    @handle_errors
    def checked_in_status(user_id: int):
        return jsonify({"userId": user_id, "checkedIn": service.is_checked_in(user_id)}), 200

    @app.route("/stamp-records/range/<int:user_id>", methods=["GET"], endpoint="stamp_records_range")
    @handle_errors
    def records_in_range(user_id: int):
        start = _int_arg("start")
        end = _int_arg("end")
        if start > end:
            raise ValidationError("start must not be after end")
        rows = service.records_in_check_in_range(user_id, start, end)
        return jsonify([record_to_json(r) for r in rows]), 200

    @app.route("/stamp-records/<int:record_id>/worked-time", methods=["GET"], endpoint="stamp_record_worked_time")
    @handle_errors
    def worked_time(record_id: int):
        result = service.worked_time(record_id)
        return jsonify(
            {
                "id": record_id,
                "checkedInMillis": timedelta_to_millis(result.checked_in),
                "breakMillis": timedelta_to_millis(result.break_deduction),
                "workedMillis": timedelta_to_millis(result.worked),
                "worked": format_duration(result.worked),
            }
        ), 200
