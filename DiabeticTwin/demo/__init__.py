"""Console demo for DiabeticTwin.

    - `assessment_report`: the ``diabetic-twin-report`` command.
"""
