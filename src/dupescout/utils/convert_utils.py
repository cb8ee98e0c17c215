"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size conversions between byte counts and strings like '1.5MB' or '4K'.
"""
import re

_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMGTP]?)(I?B)?\s*$', re.IGNORECASE)

_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512B, 1.50KB, 3.20MB).
        """
        if size_bytes < 1024:
            return f"{max(size_bytes, 0)}B"

        value = float(size_bytes)
        for unit in _UNITS[1:]:
            value /= 1024
            if value < 1024:
                return f"{value:.2f}{unit}"
        return f"{value:.2f}{_UNITS[-1]}"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Accepts plain integers and K/M/G/T/P suffixes with optional 'B' or 'iB'
        ('1024', '4K', '1.5MB', '2GiB'). Units are powers of 1024.
        Raises ValueError for negative or malformed sizes.
        """
        if str(size_str).strip().startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str}'")

        match = _SIZE_PATTERN.match(str(size_str))
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1000, 4K, 1.5MB, 2GiB"
            )

        number, prefix, _ = match.groups()
        return int(float(number) * _MULTIPLIERS[prefix.upper()])
