"""inkpipe: context assembly and preprocessing pipeline for LLM writing assistants."""

__version__ = "0.1.0"
