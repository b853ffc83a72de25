"""Version 1 of the front-desk API."""
