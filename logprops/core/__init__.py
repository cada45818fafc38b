"""Shared normalization building blocks used by every parser."""
