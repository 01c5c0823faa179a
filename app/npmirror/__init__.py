"""npmirror - mirror node_modules into archives and batch-publish them."""

__version__ = "0.1.0"
