"""Jinja2 environment for the prompt templates."""

from jinja2 import Environment, PackageLoader, select_autoescape

from xiaoniu.domain.entities import RoleTag


def create_jinja_env() -> Environment:
    """Create the environment the prompt builder renders with.

    Templates are loaded from the ``templates`` directory of this package.
    ``roles`` is available in every template so role labels are never
    spelled out by hand.

    Returns:
        Configured Jinja2 environment.
    """
    env = Environment(
        loader=PackageLoader("xiaoniu.infrastructure.llm", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["roles"] = RoleTag
    return env
