"""
Swing Performance Scoring & Prediction Engine.

Turns vendor batted-ball exports and body-sensor biomechanical samples into
session statistics, 4B category scores, ball-flight predictions, motor
profile ceiling projections, grades and coaching recommendations.

The engine is a pure computation layer: no I/O besides parsing the text it
is handed, no persistence, no network access.
"""

__version__ = "0.1.0"
__author__ = "Swing Lab"
