"""Local file storage"""

from .files import FileStateStore, load_api_key, load_request, read_pem_file

__all__ = ["FileStateStore", "load_api_key", "load_request", "read_pem_file"]
