"""Test suite for fantasycricket."""
