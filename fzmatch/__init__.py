"""Fuzzy and exact matching with scoring, ANSI colour extraction, chunked item storage and query history."""

__version__ = "0.59.0"