"""Store-free domain logic."""
