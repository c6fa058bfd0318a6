"""Shared infrastructure: config, logging, events, storage, exceptions."""
