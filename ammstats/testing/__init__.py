"""Test doubles for storage and ledger collaborators."""
