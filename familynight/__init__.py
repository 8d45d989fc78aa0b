"""familynight — content-safety pipeline for the AI Family Night games."""

__version__ = "0.1.0"
