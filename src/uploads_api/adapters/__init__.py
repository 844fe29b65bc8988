"""
Adapter layer for the Uploads API.

Contains the record store abstraction with DynamoDB and local SQLite backends.
"""
