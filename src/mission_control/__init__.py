"""Mission Control: a deadline to-do tracker backed by a Firestore collection."""

__version__ = "0.1.0"
