"""Sauce Labs device cloud: capabilities, storage upload and driver sessions."""
