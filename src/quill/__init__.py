"""quill - signed API client for unary requests and streaming sessions"""

__version__ = "0.1.0"
