"""
JSON Schema Definitions for QA Pairs.

Controlled generation schema for the Gemini ``responseSchema`` parameter.
Uses the OpenAPI subset Gemini accepts (upper-case type names,
``propertyOrdering``) rather than full JSON Schema.
"""

from __future__ import annotations

from qa_curator.core.modes import DIFFICULTY_VALUES

QA_FIELDS = ("question", "answer", "difficulty")

QA_ITEM_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "question": {
            "type": "STRING",
            "description": "Question about the source text",
        },
        "answer": {
            "type": "STRING",
            "description": "Answer grounded in the source text",
        },
        "difficulty": {
            "type": "STRING",
            "enum": list(DIFFICULTY_VALUES),
            "description": "Difficulty level",
        },
    },
    "required": ["question", "answer", "difficulty"],
    "propertyOrdering": list(QA_FIELDS),
}

QA_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": QA_ITEM_SCHEMA,
}

# Search grounding directive, cloud + web-query only
WEB_SEARCH_TOOLS = [{"google_search": {}}]

EXAMPLE_OUTPUT = """[
  {
    "question": "A clear question",
    "answer": "An answer based on the text",
    "difficulty": "intermediate"
  }
]"""
