"""Dore Hami event planning and ticketing API."""
