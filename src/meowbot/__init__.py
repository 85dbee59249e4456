"""meowbot: a cat-persona chat agent with memory and goal check-ins."""

__version__ = "0.1.0"
