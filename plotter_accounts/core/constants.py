"""Core constants: reserved tags and store key structure.

Single source of truth for the reserved tag names and for the key layout
used by infrastructure.store.keys.
"""

# Every account carries this tag; it can never be revoked.
PUBLIC_TAG = "public"

# Virtual tag granting access to every stream. Never stored.
ALL_TAG = "all"

# Shown in place of a prefix list for universal access.
ALL_TAG_SYMBOL = "<ALL STREAMS>"

# Store key roots (kept distinct so prefix scans never mix record kinds)
KEY_ROOT = "plotter"
KEY_NAMESPACE_ACCOUNTS = "accounts"
KEY_NAMESPACE_TAG_DEFINITIONS = "tagdefs"
KEY_REVISION = "revision"

# Delimiter for composite keys
KEY_SEP = "/"

# Listing marker for records whose payload does not decode
CORRUPT_ENTRY_MARKER = "[CORRUPT ENTRY]"
