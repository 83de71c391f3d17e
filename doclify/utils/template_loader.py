import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

from doclify.utils import format as fmt

BASE_PATH = os.path.join(os.path.dirname(__file__), "..", "static", "templates")

_env = None

def get_environment() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(BASE_PATH),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _env.filters.update(
            priority=fmt.format_priority,
            category=fmt.format_category,
            role=fmt.format_role,
            date=fmt.format_date,
            long_date=fmt.format_long_date,
            currency=fmt.format_currency,
            initials=fmt.get_initials,
        )
    return _env

def render_template(filename: str, **kwargs) -> str:
    return get_environment().get_template(filename).render(**kwargs)
