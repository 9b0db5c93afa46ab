"""KodaPost: carousel generation jobs and social platform publishing."""

__version__ = "0.1.0"
