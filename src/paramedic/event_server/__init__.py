"""Local test event server the device-side harness reports to."""
