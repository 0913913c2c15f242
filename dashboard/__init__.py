"""Admin dashboard core for the power-bank rental network."""
