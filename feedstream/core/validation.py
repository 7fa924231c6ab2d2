import re
from collections.abc import Mapping
from typing import TypeVar

import pydantic
from pydantic import BaseModel

from feedstream.core.exceptions import ValidationError

FEED_SLUG_RE = re.compile(r"\w+")
USER_ID_RE = re.compile(r"[\w-]+")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def validate_feed_slug(slug: str) -> str:
    """Feed slugs are word characters only: letters, digits, underscore."""
    if not isinstance(slug, str) or not FEED_SLUG_RE.fullmatch(slug):
        raise ValidationError(
            f"Invalid feed slug {slug!r}, please use letters, numbers or _",
            details={"field": "slug", "value": str(slug)},
        )
    return slug


def validate_user_id(user_id: str) -> str:
    """User ids allow word characters and dashes."""
    if not isinstance(user_id, str) or not USER_ID_RE.fullmatch(user_id):
        raise ValidationError(
            f"Invalid user id {user_id!r}, please use letters, numbers, - or _",
            details={"field": "user_id", "value": str(user_id)},
        )
    return user_id


def option_fields(instance: BaseModel | Mapping | None) -> dict:
    """Fields explicitly set on an options model or mapping."""
    if instance is None:
        return {}
    if isinstance(instance, BaseModel):
        return instance.model_dump(exclude_unset=True)
    if isinstance(instance, Mapping):
        return dict(instance)
    raise ValidationError(
        f"Options must be a model or a mapping, got {type(instance).__name__}",
        details={"type": type(instance).__name__},
    )


def coerce_model(model_cls: type[_ModelT], instance: _ModelT | Mapping | None = None, **overrides) -> _ModelT:
    """Merge ``instance`` and keyword overrides into a validated ``model_cls``.

    pydantic's own error type is translated so callers only ever catch
    feedstream errors for bad input.
    """
    data = option_fields(instance)
    data.update(overrides)
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as e:
        reasons = "; ".join(err["msg"] for err in e.errors())
        raise ValidationError(
            f"Invalid {model_cls.__name__}: {reasons}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
