"""Headless CMS backend: generic collections of records over a relational table or a key-value store."""
