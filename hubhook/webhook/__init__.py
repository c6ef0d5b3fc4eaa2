"""Webhook signature verification and payload decoding."""
