"""
Prescription Tracker

Records prescriptions and medication reference notes in a Markdown vault,
enriching medications with RxNav and openFDA data.
"""

__version__ = "1.0.0"
