"""Arcane Node — campaign memory with entity mention detection."""
