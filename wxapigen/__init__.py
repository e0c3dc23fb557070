"""Generate wx.request API clients from OpenAPI 3.0 specifications."""

__version__ = "1.0.0"
