from .api import GitHubGrabber

__all__ = [
    "GitHubGrabber",
]
