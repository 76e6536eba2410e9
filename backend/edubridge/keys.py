from __future__ import annotations

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_MASK = 0xFFFFFFFF


def _base36(n: int) -> str:
	if n == 0:
		return "0"
	out = []
	while n:
		n, r = divmod(n, 36)
		out.append(_DIGITS[r])
	return "".join(reversed(out))


def djb2(text: str) -> str:
	"""djb2 (xor variant) over UTF-16 code units, unsigned 32-bit, base36.

	Walking UTF-16 units keeps keys identical to the ones the web client
	already wrote into the shared dictionary.
	"""
	h = 5381
	data = text.encode("utf-16-le", "surrogatepass")
	for i in range(0, len(data), 2):
		unit = data[i] | (data[i + 1] << 8)
		h = (((h << 5) + h) ^ unit) & _MASK
	return _base36(h)


def hash_key(text: str) -> str:
	"""Field name for `text` inside a remote per-language dictionary."""
	return "k_" + djb2(text)


def memory_key(lang: str, text: str) -> str:
	return f"{lang}::{text}"
