"""Configuration for deckfetch (environment driven, see ``settings``)."""
