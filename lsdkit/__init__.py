"""Reader for Lingvo LSD dictionary files, with a ZipCrypto cipher."""

__version__ = "0.6.0"