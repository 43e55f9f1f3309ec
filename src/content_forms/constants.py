"""
Constants for the content-forms compiler.

Patterns, alphabets and CMS identifiers shared by the compiler,
hydrator, encoder and handle generator live here so they are
maintained in one place.
"""

import re
import string

# Storage key reserved for the record identity slug
HANDLE_KEY = "handle"

# Handle slugs: lowercase alphanumerics separated by single hyphens
HANDLE_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
HANDLE_RE = re.compile(HANDLE_PATTERN)

# Alphabet for generated fallback handles
HANDLE_ALPHABET = string.ascii_lowercase + string.digits
HANDLE_LEADING_ALPHABET = string.ascii_lowercase
DEFAULT_HANDLE_LENGTH = 12

# Loose address check, the mail server is the real validator
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Name derivation
WHITESPACE_RUN = re.compile(r"\s+")
DISALLOWED_KEY_CHARS = re.compile(r"[^a-z0-9_]")

# CMS dynamic-zone component identifiers
CMS_COMPONENT_PREFIX = "dynamic-component."
CMS_COMPONENT_KINDS = {
    "dynamic-component.text-field": "text",
    "dynamic-component.number-field": "number",
    "dynamic-component.enum-field": "choice",
    "dynamic-component.date-field": "date",
    "dynamic-component.boolean-field": "boolean",
    "dynamic-component.media-field": "media-reference",
}

# Storage-layer message prefix for a rejected duplicate handle
DUPLICATE_HANDLE_PREFIX = "DUPLICATE_HANDLE_ERROR:"
QUOTED_VALUE = re.compile(r"'([^']+)'")

# Error slot for problems that do not belong to a single field
FORM_ERROR_KEY = "_form"

JSON_SCHEMA_VERSION = "https://json-schema.org/draft/2020-12/schema"
