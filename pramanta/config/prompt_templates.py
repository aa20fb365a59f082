"""
Pramanta - Prompt Tokens & Response Texts
==========================================
Centralised prompt placeholders and every user-facing string the
server returns.  Category prompt *templates* themselves live next to
the data (``data/<category>.txt``) so they can be edited without a
deploy; this module only fixes the contract they must follow.

Exports
-------
DATA_PLACEHOLDER, QUERY_PLACEHOLDER,
INVALID_INPUT_RESPONSE, ERROR_RESPONSE_TEMPLATE, TIMEOUT_MESSAGE,
WEBSITE_SOURCE_TITLE, SOCIAL_SOURCE_TITLE.
"""

# ══════════════════════════════════════════════════════════════════════
#  TEMPLATE PLACEHOLDERS
# ══════════════════════════════════════════════════════════════════════
# Each category template must contain each token exactly once.

DATA_PLACEHOLDER: str = "{CSV_DATA_GOES_HERE}"
QUERY_PLACEHOLDER: str = "{USER_QUERY_GOES_HERE}"


# ══════════════════════════════════════════════════════════════════════
#  HTTP RESPONSE TEXTS
# ══════════════════════════════════════════════════════════════════════

INVALID_INPUT_RESPONSE: str = "Invalid input. Please refine your request."

ERROR_RESPONSE_TEMPLATE: str = "I'm sorry, I had a problem processing that request. (Error: {message})"

TIMEOUT_MESSAGE: str = "The request took longer than {seconds:g}s and was cancelled."


# ══════════════════════════════════════════════════════════════════════
#  SOURCE LINK TITLES
# ══════════════════════════════════════════════════════════════════════

WEBSITE_SOURCE_TITLE: str = "{name} - Website"
SOCIAL_SOURCE_TITLE: str = "{name} - Social Media"
