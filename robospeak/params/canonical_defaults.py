"""
Canonical pipeline defaults: single source for the tunable constants.
Settings.from_env() starts from these values; see robospeak/core/config.py.
"""

# Target word count band for one utterance (inclusive). Interpreted as a minimum word
# count, not an expression count.
MIN_WORDS = 5
MAX_WORDS = 11

# Distinct identities kept per symbol within one generation.
IDENTITY_POOL_CAP = 3

# Silence duration band (ms) for baked Wait instances.
WAIT_MIN_MS = 50.0
WAIT_MAX_MS = 300.0

# Linear boundary fade applied to sound segments (ms).
FADE_MS = 5.0

# Export format: sfxr renders 8-bit unsigned PCM at 44.1 kHz.
SAMPLE_RATE = 44100
BIT_DEPTH = 8

GRAMMAR = "subphrases"
GRAMMARS = ("subphrases", "ramble")
