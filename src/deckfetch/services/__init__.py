"""Deck download orchestration."""
