"""Test suite for the DiabeticTwin library.

The structure of this test package mirrors the structure of the main
`DiabeticTwin` package (e.g., `tests.core` for `DiabeticTwin.core`).

The `pytest` framework is used for test discovery and execution.
"""
