"""coldwave – browse an Artist/Album music folder and play albums."""

__version__ = "0.1.0"
