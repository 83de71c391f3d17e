"""Building blocks for the declarative form schemas.

Every schema in this package is a pydantic model whose fields are annotated
with the helpers below, so a failed validation always carries the product's
own message. ``validate`` turns pydantic's nested error list into a flat list
of ``Violation(path, message)`` items, collecting every failure of a payload
in a single pass.
"""

import re
from datetime import date
from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

M = TypeVar("M", bound=BaseModel)


class Violation(BaseModel):
    path: str
    message: str


class FormModel(BaseModel):
    """Base for form schemas: defaults are validated so a missing field
    reports its own 'required' message instead of pydantic's generic one."""

    model_config = ConfigDict(validate_default=True, extra="ignore")


def _blank_if_none(value: Any) -> Any:
    return "" if value is None else value


def fail(kind: str, message: str):
    raise PydanticCustomError(kind, message)


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def RequiredText(
    message: str,
    min_length: Optional[int] = None,
    min_message: Optional[str] = None,
    max_length: Optional[int] = None,
    max_message: Optional[str] = None,
):
    def check(value: str) -> str:
        stripped = value.strip()
        if not stripped:
            fail("required", message)
        if min_length is not None and len(stripped) < min_length:
            fail("too_short", min_message or message)
        if max_length is not None and len(stripped) > max_length:
            fail("too_long", max_message or message)
        return value

    return Annotated[str, BeforeValidator(_blank_if_none), AfterValidator(check)]


OptionalText = Annotated[str, BeforeValidator(_blank_if_none)]


def OneOf(
    choices: Iterable[str],
    message: str,
    aliases: Optional[Dict[str, str]] = None,
    optional: bool = False,
    required_message: Optional[str] = None,
):
    allowed = tuple(choices)
    aliases = aliases or {}

    def check(value: Any) -> Optional[str]:
        if is_blank(value):
            if optional:
                return None
            fail("required", required_message or message)
        value = aliases.get(str(value), str(value))
        if value not in allowed:
            fail("enum", message)
        return value

    if optional:
        return Annotated[Optional[str], BeforeValidator(check)]
    return Annotated[str, BeforeValidator(check)]


def Email(message: str, required: bool = False, required_message: Optional[str] = None):
    def check(value: str) -> str:
        if not value.strip():
            if required:
                fail("required", required_message or message)
            return value
        if not is_valid_email(value):
            fail("email", message)
        return value

    return Annotated[str, BeforeValidator(_blank_if_none), AfterValidator(check)]


def IsoDate(required_message: str, invalid_message: str = "Data inválida"):
    def check(value: str) -> str:
        if not value.strip():
            fail("required", required_message)
        try:
            date.fromisoformat(value.strip())
        except ValueError:
            fail("date", invalid_message)
        return value

    return Annotated[str, BeforeValidator(_blank_if_none), AfterValidator(check)]


def NonEmptyList(item_type: Any, message: str):
    def check(items: list) -> list:
        if not items:
            fail("too_short", message)
        return items

    return Annotated[List[item_type], BeforeValidator(lambda v: [] if v is None else v), AfterValidator(check)]


def violations_from_error(exc: ValidationError) -> List[Violation]:
    violations = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        violations.append(Violation(path=path, message=err["msg"]))
    return violations


def validate(schema: Type[M], data: Any) -> Tuple[Optional[M], List[Violation]]:
    try:
        return schema.model_validate(data or {}), []
    except ValidationError as exc:
        return None, violations_from_error(exc)
