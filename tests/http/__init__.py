"""Tests for trapdoor.http."""
