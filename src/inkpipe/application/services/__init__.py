"""Application services."""

from inkpipe.application.services.preprocessor import Preprocessor

__all__ = ["Preprocessor"]
