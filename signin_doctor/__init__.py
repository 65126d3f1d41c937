"""signin-doctor - Google Sign-In fingerprint diagnostics for Titanium Android."""

__version__ = "1.0.0"
