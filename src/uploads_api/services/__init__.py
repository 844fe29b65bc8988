"""
Uploads API service layer

Holds the file lifecycle logic shared by the HTTP routes, the S3 event
handler and the CLI.
"""

from .files import FileService, build_storage_key, parse_file_id

__all__ = ['FileService', 'build_storage_key', 'parse_file_id']
