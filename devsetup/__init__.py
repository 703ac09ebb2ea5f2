"""devsetup — interactive development-environment installer."""

__version__ = "2.0.0"
