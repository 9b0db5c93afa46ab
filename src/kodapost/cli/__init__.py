"""Command line interface.

Usage:
    kodapost platforms
    kodapost publish slide1.jpg slide2.jpg -p instagram -p tiktok --caption "..."
    kodapost job job_a1B2c3D4e5F6 --owner user_123
    kodapost sweep-jobs
"""

from .app import app, main

__all__ = ["app", "main"]
