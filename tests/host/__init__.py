"""Tests for trapdoor.host."""
