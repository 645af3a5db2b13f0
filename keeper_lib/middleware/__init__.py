from .brotli import BrotliCompression
from .cors import CORSPolicy, DEFAULT_ALLOWED_ORIGINS

__all__ = [
	"BrotliCompression",
	"CORSPolicy",
	"DEFAULT_ALLOWED_ORIGINS",
]
