"""Team directory service application."""
