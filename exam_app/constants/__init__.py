"""Constants shared across the exam application."""
