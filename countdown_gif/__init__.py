from countdown_gif.services.countdown_generator import generate

__all__ = ["generate"]
