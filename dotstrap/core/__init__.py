"""Core — models, configuration, steps and the provisioning engine."""
