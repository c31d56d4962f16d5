"""Paperless REST API client, transport and upload pipeline."""
