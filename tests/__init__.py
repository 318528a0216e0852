#!/usr/bin/env python3
"""
Test suite configuration.

All tests run against SQLite and need no external services:

    python -m pytest tests/ -v

    # Only the multi-step flows
    python -m pytest tests/ -v -m integration
"""
