"""Desktop shell for the print bridge."""
