from dupescout.core.models import DigestAlgorithm

DIGEST_ALIASES = {
    "xxh64": DigestAlgorithm.XXH64,
    "xxh128": DigestAlgorithm.XXH128,
    "sha256": DigestAlgorithm.SHA256,
    "blake2b": DigestAlgorithm.BLAKE2B,
}

DIGEST_CHOICES = list(DIGEST_ALIASES.keys())

DIGEST_HELP_TEXT = (
    "Whole-file digest used as the final equality check:\n"
    "  xxh64   : xxHash64 (default, fastest, non-cryptographic)\n"
    "  xxh128  : xxHash3 128-bit (fast, non-cryptographic)\n"
    "  sha256  : SHA-256 (cryptographic)\n"
    "  blake2b : BLAKE2b (cryptographic)\n"
    "Non-cryptographic digests trade a tiny collision risk for speed;\n"
    "add --verify to confirm every match byte by byte.\n"
)

EPILOG_TEXT = """
Output:
  One line per duplicate group, paths sorted and separated by a tab.
  Hardlinks of the same file count once; groups made only of hardlinks
  are not reported. Nothing is ever deleted or modified.

Examples:
  Find duplicates in Downloads
  %(prog)s -i ~/Downloads

  Print pairs as soon as they are found, comma separated
  %(prog)s -i ~/Downloads --pairs --separator ,

  Cryptographic digest, statistics on stderr
  %(prog)s -i ~/Downloads --digest sha256 --stats

  Larger header/trailer windows, skip windows for files up to 4K
  %(prog)s -i ~/Downloads --hash-size 8K --small-file 4K
"""
