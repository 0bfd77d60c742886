"""bodytrack: body weight and nutrition tracking with trend analytics."""

__version__ = "0.1.0"
