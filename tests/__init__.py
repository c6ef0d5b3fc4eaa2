"""Test suite for hubhook."""
