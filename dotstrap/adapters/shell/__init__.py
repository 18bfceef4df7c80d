"""Local-machine adapters: subprocess commands and filesystem mutations."""
