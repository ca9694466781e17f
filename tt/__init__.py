"""Terminal time tracker: named projects, one running timer at a time, rounded CSV reports."""
__version__ = "0.1.0"
