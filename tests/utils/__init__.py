"""Tests for trapdoor.utils."""
