"""Pytest configuration -- add src/ to sys.path so the suite runs from a checkout."""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
