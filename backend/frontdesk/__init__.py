"""Clinic front-desk backend."""
