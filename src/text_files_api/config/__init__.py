"""
Configuration management for the Text Files API.

Contains the Pydantic settings object that is built once at startup and handed
to the object store and metadata store adapters.
"""
