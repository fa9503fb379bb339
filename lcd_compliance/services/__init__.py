"""Service layer for the LCD compliance engine."""
