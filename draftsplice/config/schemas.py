"""
JSON Schemas for untrusted payloads.

Two schemas:
1. COMPLETION_RESPONSE_SCHEMA: what the LLM must produce ({subject, body})
2. SAVED_PROMPTS_SCHEMA:       the saved prompt list read back from storage
"""

# =============================================================================
# 1. Completion response
# =============================================================================
COMPLETION_RESPONSE_SCHEMA: dict = {
    "name": "email_rewrite_v1",
    "strict": False,
    "schema": {
        "type": "object",
        "required": ["body"],
        "properties": {
            "subject": {
                "type": ["string", "null"],
                "description": "Suggested subject line",
            },
            "body": {
                "type": "string",
                "description": "HTML body (p, strong, em, ul, ol, li, br) with placeholders kept verbatim",
            },
        },
    },
}

# =============================================================================
# 2. Saved prompts
# =============================================================================
SAVED_PROMPTS_SCHEMA: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "name", "instruction"],
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "name": {"type": "string"},
            "instruction": {"type": "string"},
        },
    },
}
