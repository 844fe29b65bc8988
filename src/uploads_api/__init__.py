"""Presigned-URL file uploads backed by S3 and a file record store."""
