"""QQ chat bot speaking the OneBot v11 protocol."""
