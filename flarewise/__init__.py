"""FlareWise - symptom tracking with AI insights."""

__version__ = "1.0.0"
