"""Fashion social-commerce API: wardrobe, AI image analysis, marketplace and social features."""

__version__ = '1.0.0'
