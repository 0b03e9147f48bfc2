"""Tests for the static food table in `DiabeticTwin.data`."""
