"""Single-use QR access tokens delivered over SMS and verified on scan."""

__version__ = "0.1.0"
