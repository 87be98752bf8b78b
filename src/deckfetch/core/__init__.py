"""
Core services shared by every deckfetch module (logging setup).
"""
