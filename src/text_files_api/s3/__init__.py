"""Functions for talking to the S3-compatible object store."""
