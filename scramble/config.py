"""Configuration constants for sentence scramble."""

# Chunking
CHUNK_ACTIVATION_WORDS = 12   # Sentences with more words than this get chunked
MIN_CHUNK_WORDS = 3           # Smallest chunk worth dragging around
MAX_CHUNK_WORDS = 9           # Try to split once a chunk grows past this
CHUNK_FORCE_MARGIN = 3        # Force a cut when no split point is found this far past max
EXPLICIT_CHUNK_MIN = 3        # Teacher chunks are used only when there are more than this

# Word mode falls back to chunks when a sentence has more tokens than this
WORD_MODE_MAX_TOKENS = 12

# Shared links
COMPACT_HASH_PREFIX = '#C='
LEGACY_HASH_PREFIX = '#A='
ASSIGNMENT_VERSION = 1

# Progress storage
STORAGE_KEY_PREFIX = 'ss'

# Teacher flow
DEFAULT_ATTEMPTS_PER_ITEM = '3'
SHARE_HISTORY_LIMIT = 10
TEACHER_DRAFT_STORAGE_KEY = 'sentence-scramble.teacher-draft'
TEACHER_HISTORY_STORAGE_KEY = 'sentence-scramble.share-history'
DEFAULT_INSTRUCTIONS_TEMPLATE = (
    "Homework: {{title}}\n\n"
    "Link: {{link}}\n\n"
    "Instructions: Build each sentence. When you are done, tap 'Finish' "
    "and send the results back to me."
)

QR_CODE_BASE_URL = 'https://api.qrserver.com/v1/create-qr-code/'
QR_CODE_SIZE = '240x240'
