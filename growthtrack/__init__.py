"""Growth tracking API and Webflow OAuth helper."""

__version__ = "1.0.0"
