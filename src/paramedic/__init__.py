"""Cordova paramedic: scaffold, run and collect mobile test suites."""
