"""
Project-wide constants or “settings” that are unlikely to change at runtime.
"""

INTERCHANGE_VERSION = "1.0"

# Relevance heuristic weights
EXACT_PHRASE_WEIGHT = 10
WORD_OCCURRENCE_WEIGHT = 2
SHORT_TEXT_BONUS = 5
SHORT_TEXT_THRESHOLD = 100
EMPTY_QUERY_SCORE = 1

SUGGESTION_MIN_QUERY_LENGTH = 2
SUGGESTION_SOURCE_ROWS = 5
SUGGESTION_LIMIT = 8

CONVERSATION_STATUSES = ("active", "archived", "deleted")
MESSAGE_ROLES = ("user", "assistant", "system")
DEFAULT_CATEGORY_COLOR = "#6b7280"

SNIPPET_HEADER = "ChatPrompt Manager"
KEYBINDING_PREFIX = "ctrl+shift+p"
AUTOCOMPLETE_TRIGGER_CHARACTERS = ["@", "#"]
