"""Test suite for the Flamelink SDK."""
