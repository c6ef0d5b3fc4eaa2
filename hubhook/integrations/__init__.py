"""Adapters for HTTP frameworks and serverless runtimes."""
