"""Reusable field-definition factories, one module per cube."""
