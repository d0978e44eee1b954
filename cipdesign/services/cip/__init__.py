from .calculator import calculate

__all__ = ["calculate"]
