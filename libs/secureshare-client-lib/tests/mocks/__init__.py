"""Test doubles for secureshare_client_lib."""
