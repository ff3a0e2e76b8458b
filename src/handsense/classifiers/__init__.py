"""Static, motion and tracking gesture classifiers.

All classifiers are pure functions returning a ClassificationResult or
None; they never raise on malformed input.
"""

from handsense.classifiers.static import classify_static
from handsense.classifiers.dynamic import classify_motion
from handsense.classifiers.tracking import classify_tracking

__all__ = ["classify_static", "classify_motion", "classify_tracking"]
