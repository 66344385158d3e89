"""Project role policy and the authorization engine."""
