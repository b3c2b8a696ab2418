"""Jinja2 template utilities for LLM components."""

from jinja2 import Environment, PackageLoader


def create_jinja_env() -> Environment:
    """Create Jinja2 environment for summarization prompts.

    Loads templates from the ``templates`` directory of the
    inkpipe.infrastructure.llm package. Prompts are plain text, so
    autoescaping is disabled.

    Returns:
        Configured Jinja2 environment.
    """
    return Environment(
        loader=PackageLoader("inkpipe.infrastructure.llm", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
