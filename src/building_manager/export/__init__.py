"""Rendering of building models to images."""
