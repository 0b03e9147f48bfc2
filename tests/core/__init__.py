"""Tests for `DiabeticTwin.core`, the glucose forecasting engine."""
