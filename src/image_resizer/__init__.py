"""S3-triggered image resizer with loop-safe derivative placement."""

__version__ = "0.1.0"
