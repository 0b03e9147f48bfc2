"""Tests for `DiabeticTwin.sdk`: the food safety analyzer, the medication
engine and the `DigitalTwin` facade that composes them.
"""
