"""
Zengo board engine.

Spatial memory puzzle: words of a sentence are shown on a Go-style board,
hidden, and the player places stones where they remember each word.

Subpackages:
- core: shared data models
- content: layout generation and sentence validation
- session: play state machine, telemetry and session records
- scoring: verdict and score for a finished session
- progression: level, rhythm and difficulty nudges
"""

__version__ = "1.0.0"
