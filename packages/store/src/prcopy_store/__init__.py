"""Persistence backends for prcopy prompt templates."""
