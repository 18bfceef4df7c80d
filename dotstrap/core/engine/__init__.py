"""Engine — the provisioning loop."""
