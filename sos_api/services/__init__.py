"""Business logic for auth and SOS data entries."""
