"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates

TRASHED_CHOICES = ("true", "false", "1", "0")


class UserListQuerySchema(Schema):
    """Validate the query string of the user listing.

    ``trashed`` is converted to a boolean; ``per_page`` must fall within
    ``1..max_per_page`` and is left unset when absent so the service applies
    its configured default.
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, max_per_page: int = 100, **kwargs: Any) -> None:
        self._max_per_page = max_per_page
        super().__init__(**kwargs)

    search = fields.String(load_default=None)
    trashed = fields.String(
        load_default=None,
        validate=validate.OneOf(
            TRASHED_CHOICES, error="The trashed field must be one of: true, false, 1, 0."
        ),
    )
    per_page = fields.Integer(load_default=None)
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))

    @validates("per_page")
    def check_per_page(self, value: int | None, **_: Any) -> None:
        if value is None:
            return
        if not 1 <= value <= self._max_per_page:
            raise ValidationError(
                f"The per page field must be between 1 and {self._max_per_page}."
            )

    @post_load
    def coerce_trashed(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("trashed")
        data["trashed"] = None if raw is None else raw in ("true", "1")
        return data


def build_meta(*, current_page: int, per_page: int, total: int, last_page: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return {
        "current_page": int(current_page),
        "per_page": int(per_page),
        "total": int(total),
        "last_page": int(last_page),
    }
